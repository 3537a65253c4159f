#!/usr/bin/env python3
"""
Command implementations for hostkeep.

Each command runs one read -> parse -> mutate -> serialize pass and then
either writes the result or, in preview mode, reports the diff instead.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Tuple

from config import LineFormat
from errors import MalformedImport, ReadFailed
from hosts_model import HostsModel
from hosts_parser import split_physical_lines
from formatter import dump_json
from preview import compute_diff, format_report
from repository import HostsRepository

logger = logging.getLogger(__name__)


@dataclass
class Options:
    """Per-invocation options shared by all commands."""
    preview: bool = False
    line_format: LineFormat = LineFormat.UNIX


@dataclass
class CommandResult:
    """What a command produced: text for stdout, whether the file changed, exit code."""
    output: str = ""
    changed: bool = False
    exit_code: int = 0


def _load(repo: HostsRepository) -> Tuple[str, HostsModel]:
    text = repo.read_text()
    return text, HostsModel.from_text(text)


def _commit(options: Options, repo: HostsRepository, original: str,
            model: HostsModel) -> CommandResult:
    model.reformat()
    updated = model.render(options.line_format)
    changed = updated != original

    if options.preview:
        changes = compute_diff(split_physical_lines(original), split_physical_lines(updated))
        return CommandResult(output=format_report(changes), changed=changed)

    if not changed:
        logger.info("Hosts file already up to date")
        return CommandResult(changed=False)

    repo.write_text(updated)
    return CommandResult(changed=True)


def _mutate(options: Options, repo: HostsRepository,
            operation: Callable[[HostsModel], None]) -> CommandResult:
    original, model = _load(repo)
    operation(model)
    return _commit(options, repo, original, model)


def fmt(options: Options, repo: HostsRepository) -> CommandResult:
    """Reformat the hosts file."""
    return _mutate(options, repo, lambda model: None)


def add(options: Options, repo: HostsRepository, hostname: str, address: str) -> CommandResult:
    """Add or overwrite an entry."""
    return _mutate(options, repo, lambda model: model.add(hostname, address))


def rm(options: Options, repo: HostsRepository, hostname: str) -> CommandResult:
    """Remove all entries for hostname; succeeds if there are none."""
    return _mutate(options, repo, lambda model: model.remove(hostname))


def on(options: Options, repo: HostsRepository, hostname: str) -> CommandResult:
    """Enable hostname. Raises NotFound."""
    return _mutate(options, repo, lambda model: model.enable(hostname))


def off(options: Options, repo: HostsRepository, hostname: str) -> CommandResult:
    """Disable hostname. Raises NotFound."""
    return _mutate(options, repo, lambda model: model.disable(hostname))


def ls(options: Options, repo: HostsRepository) -> CommandResult:
    _, model = _load(repo)
    output = ''.join(f"{entry}\n" for entry in model.entries())
    return CommandResult(output=output)


def has(options: Options, repo: HostsRepository, hostname: str) -> CommandResult:
    """Exit code 0 if hostname has any entry, 1 if not."""
    _, model = _load(repo)
    return CommandResult(exit_code=0 if model.has(hostname) else 1)


def dump(options: Options, repo: HostsRepository) -> CommandResult:
    _, model = _load(repo)
    return CommandResult(output=dump_json(model.entries()))


def apply(options: Options, repo: HostsRepository, filename: str) -> CommandResult:
    """Import entries from a JSON file and merge them into the hosts file."""
    try:
        document = Path(filename).read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise MalformedImport(f"{filename} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise ReadFailed(f"cannot read {filename}: {e}") from e

    imported = HostsModel.from_json(document)
    logger.info(f"Applying {sum(1 for _ in imported.entries())} entries from {filename}")
    return _mutate(options, repo, lambda model: model.merge(imported))

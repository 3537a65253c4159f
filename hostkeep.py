#!/usr/bin/env python3
"""
hostkeep CLI - an idempotent tool for managing the hosts file.
"""

import argparse
import logging
import sys
from typing import List, Optional

import commands
from commands import CommandResult, Options
from config import HostkeepConfig, get_config
from errors import HostkeepError, InvalidCommand
from repository import FileHostsRepository

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

MUTATING_COMMANDS = ['fmt', 'add', 'rm', 'on', 'off', 'apply']
COMMANDS = MUTATING_COMMANDS + ['ls', 'has', 'dump', 'version', 'help']

EPILOG = """
All commands that change the hosts file will implicitly reformat it.

Configuration:
  HOSTKEEP_FMT        may be set to unix or windows to force that platform's syntax
  HOSTKEEP_PATH       may be set to point to a file other than the platform default
  HOSTKEEP_LOG_LEVEL  logging level written to stderr (default: WARNING)

Managing: {hosts_file}
"""


class HostkeepArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser(config: HostkeepConfig) -> argparse.ArgumentParser:
    parser = HostkeepArgumentParser(
        prog='hostkeep',
        description="An idempotent tool for managing the hosts file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG.format(hosts_file=config.hosts_file)
    )
    parser.add_argument('-n', dest='preview', action='store_true',
                        help='Preview changes but do not rewrite the hosts file')
    parser.add_argument('-v', '--version', action='version', version=__version__)

    # -n is accepted after the command too; SUPPRESS keeps the global value otherwise
    preview = argparse.ArgumentParser(add_help=False)
    preview.add_argument('-n', dest='preview', action='store_true', default=argparse.SUPPRESS,
                         help='Preview changes but do not rewrite the hosts file')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    subparsers.add_parser('fmt', parents=[preview], help='Reformat the hosts file')

    add_parser = subparsers.add_parser('add', parents=[preview], help='Add or overwrite a hosts entry')
    add_parser.add_argument('hostname', help='Hostname')
    add_parser.add_argument('ip', help='IPv4 or IPv6 address')

    for name, text in [('rm', 'Remove a hosts entry'),
                       ('on', 'Enable a hosts entry'),
                       ('off', 'Disable a hosts entry')]:
        sub = subparsers.add_parser(name, parents=[preview], help=text)
        sub.add_argument('hostname', help='Hostname')

    subparsers.add_parser('ls', parents=[preview], help='List hosts entries')

    has_parser = subparsers.add_parser('has', parents=[preview], help='Exit 0 if entry present in hosts file, 1 if not')
    has_parser.add_argument('hostname', help='Hostname')

    subparsers.add_parser('dump', parents=[preview], help='Export hosts entries as JSON')

    apply_parser = subparsers.add_parser('apply', parents=[preview], help='Import hosts entries from JSON')
    apply_parser.add_argument('filename', help='JSON file produced by dump')

    subparsers.add_parser('version', help='Show version')
    subparsers.add_parser('help', help='Show this help')

    return parser


def run_command(args: argparse.Namespace, config: HostkeepConfig) -> CommandResult:
    """Dispatch parsed arguments to the matching command."""
    options = Options(preview=args.preview, line_format=config.line_format)
    repo = FileHostsRepository(config)

    handlers = {
        'fmt': lambda: commands.fmt(options, repo),
        'add': lambda: commands.add(options, repo, args.hostname, args.ip),
        'rm': lambda: commands.rm(options, repo, args.hostname),
        'on': lambda: commands.on(options, repo, args.hostname),
        'off': lambda: commands.off(options, repo, args.hostname),
        'ls': lambda: commands.ls(options, repo),
        'has': lambda: commands.has(options, repo, args.hostname),
        'dump': lambda: commands.dump(options, repo),
        'apply': lambda: commands.apply(options, repo, args.filename),
    }

    if args.command not in handlers:
        raise InvalidCommand(args.command)
    return handlers[args.command]()


def first_command(argv: List[str]) -> Optional[str]:
    for arg in argv:
        if not arg.startswith('-'):
            return arg
    return None


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI function."""
    if argv is None:
        argv = sys.argv[1:]

    try:
        config = get_config()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    config.setup_logging()

    parser = build_parser(config)

    command = first_command(argv)
    if command is not None and command not in COMMANDS:
        print(InvalidCommand(command), file=sys.stderr)
        return 1

    args = parser.parse_args(argv)

    if args.command in (None, 'help'):
        parser.print_help()
        return 0
    if args.command == 'version':
        print(__version__)
        return 0

    try:
        result = run_command(args, config)
    except HostkeepError as e:
        logger.debug(f"{args.command} failed: {e!r}")
        print(e, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Operation cancelled by user.", file=sys.stderr)
        return 1

    if args.command in MUTATING_COMMANDS and not args.preview:
        state = "updated" if result.changed else "already up to date"
        logger.info(f"{args.command}: hosts file {state}")

    if result.output:
        sys.stdout.write(result.output)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())

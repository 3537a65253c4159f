#!/usr/bin/env python3
"""
Repository pattern implementation for hosts file storage.
Reads the raw hosts file and commits new content with an atomic replace.
"""

import os
import shutil
import tempfile
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from config import HostkeepConfig
from errors import ReadFailed, WriteFailed

# Undecodable bytes survive a read/write cycle unchanged
ENCODING = 'utf-8'
ENCODING_ERRORS = 'surrogateescape'


class HostsRepository(ABC):
    """Abstract storage for the raw hosts file text."""

    @abstractmethod
    def read_text(self) -> str:
        """Return the current file content, or "" if there is none."""
        pass

    @abstractmethod
    def write_text(self, content: str) -> None:
        """Replace the file content entirely."""
        pass


class FileHostsRepository(HostsRepository):
    """File-based hosts repository with atomic writes."""

    def __init__(self, config: HostkeepConfig):
        self.config = config
        self.hosts_file = Path(config.hosts_file)
        self.logger = logging.getLogger(__name__)

    def read_text(self) -> str:
        try:
            # newline='' keeps CRLF terminators intact for the parser
            with open(self.hosts_file, 'r', encoding=ENCODING,
                      errors=ENCODING_ERRORS, newline='') as f:
                content = f.read()
        except FileNotFoundError:
            self.logger.warning(f"Hosts file not found, starting empty: {self.hosts_file}")
            return ""
        except OSError as e:
            self.logger.error(f"Failed to read hosts file {self.hosts_file}: {e}")
            raise ReadFailed(f"cannot read {self.hosts_file}: {e}") from e

        self.logger.debug(f"Read {len(content)} characters from {self.hosts_file}")
        return content

    def write_text(self, content: str) -> None:
        """
        Write content via a temporary file in the same directory, then rename.

        The hosts file is either left as it was or fully replaced; the
        temporary file is removed on any failure.
        """
        # Replace the file a symlinked hosts path points to, not the link
        target = Path(os.path.realpath(self.hosts_file))
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                mode='w',
                delete=False,
                dir=target.parent,
                prefix='.hosts_tmp_',
                encoding=ENCODING,
                errors=ENCODING_ERRORS,
                newline=''
            ) as tmp:
                tmp_path = tmp.name
                tmp.write(content)
                tmp.flush()
                os.fsync(tmp.fileno())

            # mkstemp creates 0600; keep the permissions of the file we replace
            if target.exists():
                shutil.copymode(target, tmp_path)

            os.replace(tmp_path, target)
            tmp_path = None
            self.logger.info(f"Successfully updated hosts file: {self.hosts_file}")

        except OSError as e:
            self.logger.error(f"Failed to write hosts file {self.hosts_file}: {e}")
            raise WriteFailed(f"cannot write {self.hosts_file}: {e}") from e

        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

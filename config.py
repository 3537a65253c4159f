#!/usr/bin/env python3
"""
Configuration management for hostkeep.
Resolves the hosts file path and line format from environment variables.
"""

import os
import sys
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LineFormat(Enum):
    """Line ending convention used when writing the hosts file."""
    UNIX = "unix"
    WINDOWS = "windows"


def is_windows(platform: str) -> bool:
    return platform.startswith("win")


def default_hosts_path(platform: str = sys.platform,
                       environ: Optional[Mapping[str, str]] = None) -> Path:
    """Platform default location of the hosts file."""
    if environ is None:
        environ = os.environ

    if is_windows(platform):
        system_root = environ.get("SystemRoot", r"C:\Windows")
        return Path(system_root) / "System32" / "drivers" / "etc" / "hosts"
    return Path("/etc/hosts")


@dataclass
class HostkeepConfig:
    """Configuration class for hostkeep."""

    hosts_file: Path = field(default_factory=default_hosts_path)

    # Forced line format ("unix" or "windows"); None means follow the platform
    format_override: Optional[str] = None
    platform: str = sys.platform

    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'HostkeepConfig':
        """
        Load configuration from environment variables.

        HOSTKEEP_PATH: hosts file path (default: platform hosts file)
        HOSTKEEP_FMT: force "unix" or "windows" line endings
        HOSTKEEP_LOG_LEVEL: logging level (default: WARNING)
        """
        if environ is None:
            environ = os.environ

        path = environ.get("HOSTKEEP_PATH")
        return cls(
            hosts_file=Path(path) if path else default_hosts_path(sys.platform, environ),
            format_override=environ.get("HOSTKEEP_FMT") or None,
            log_level=environ.get("HOSTKEEP_LOG_LEVEL", "WARNING").upper()
        )

    @property
    def line_format(self) -> LineFormat:
        if self.format_override:
            return LineFormat(self.format_override.lower())
        if is_windows(self.platform):
            return LineFormat.WINDOWS
        return LineFormat.UNIX

    def validate(self) -> List[str]:
        """Validate configuration and return list of issues."""
        issues = []

        if self.format_override:
            valid_formats = [f.value for f in LineFormat]
            if self.format_override.lower() not in valid_formats:
                issues.append(
                    f"Invalid line format: {self.format_override} "
                    f"(must be one of: {', '.join(valid_formats)})"
                )

        if self.log_level not in VALID_LOG_LEVELS:
            issues.append(f"Invalid log level: {self.log_level}")

        return issues

    def setup_logging(self) -> None:
        """Setup logging based on configuration."""
        level = getattr(logging, self.log_level.upper(), logging.WARNING)

        logging.basicConfig(
            level=level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[
                logging.StreamHandler(sys.stderr)
            ]
        )


def get_config(environ: Optional[Mapping[str, str]] = None) -> HostkeepConfig:
    """Build the configuration for one invocation and report any problems."""
    config = HostkeepConfig.from_env(environ)

    issues = config.validate()
    if issues:
        raise ValueError("; ".join(issues))

    return config

"""
Persistent scan offsets.

One state file per (log name, argument fingerprint) holds the last processed
record number as decimal text. There is no locking: two overlapping runs with
the same arguments against the same log can double-count or skip records in
the overlap window.
"""

import hashlib
import os
import re
from pathlib import Path
from typing import Optional, Sequence, Union

from loguru import logger

from ..exceptions import StateError


_DRIVE_PREFIX = re.compile(r'^([A-Z]):[/\\]')


def sanitize_log_name(log_name: str) -> str:
    """Turn a leading drive prefix such as ``C:\\`` into ``C`` plus a separator."""
    return _DRIVE_PREFIX.sub(lambda m: m.group(1) + os.sep, log_name)


def fingerprint(args: Sequence[str]) -> str:
    """md5 hex digest of the space-joined argument list."""
    return hashlib.md5(" ".join(args).encode('utf-8')).hexdigest()


class StateStore:
    """Reads and writes last-seen record numbers under a state directory."""

    def __init__(self, state_dir: Union[str, Path]):
        self.state_dir = Path(state_dir)

    def path_for(self, log_name: str, args: Sequence[str]) -> Path:
        return self.state_dir / f"{sanitize_log_name(log_name)}-{fingerprint(args)}"

    def load(self, path: Path) -> Optional[int]:
        """
        Load the last offset from a state file.

        Returns:
            The stored record number, or None when the file does not exist

        Raises:
            StateError: if the file cannot be read or does not hold a number
        """
        try:
            text = path.read_text(encoding='ascii')
        except FileNotFoundError:
            logger.debug(f"No state file at {path}")
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StateError(f"cannot read state file {path}: {e}") from e

        try:
            offset = int(text.strip(" \r\n"))
        except ValueError as e:
            raise StateError(f"invalid state file {path}: {text!r}") from e
        logger.debug(f"Loaded offset {offset} from {path}")
        return offset

    def save(self, path: Path, offset: int) -> None:
        """
        Write an offset, creating parent directories as needed.

        Raises:
            StateError: if the file cannot be written
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(str(offset), encoding='ascii')
        except OSError as e:
            raise StateError(f"cannot write state file {path}: {e}") from e
        logger.debug(f"Saved offset {offset} to {path}")

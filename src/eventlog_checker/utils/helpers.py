"""
Helper utilities for eventlog_checker.

This module provides formatting helpers for check output and operator
commands.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional


class FormatHelper:
    """Helper class for output formatting."""

    @staticmethod
    def format_content_line(source_name: str, message: str) -> str:
        """Format a matched record as ``<source>:<message>`` on one line."""
        return source_name + ":" + message.replace("\n", "")

    @staticmethod
    def format_number(number: int) -> str:
        """Format number with thousand separators."""
        return f"{number:,}"

    @staticmethod
    def truncate_string(text: str, max_length: int = 100) -> str:
        """Truncate string to maximum length."""
        if len(text) <= max_length:
            return text
        return text[:max_length - 3] + "..."


class TimeHelper:
    """Helper class for time-related operations."""

    @staticmethod
    def format_mtime(path: Path) -> str:
        """Modification time of a file as an ISO timestamp in UTC."""
        mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
        return mtime.strftime('%Y-%m-%d %H:%M:%S UTC')


class StateFileHelper:
    """Helper class for listing state files."""

    @staticmethod
    def list_state_files(state_dir: Path) -> List[Dict[str, Optional[str]]]:
        """
        Describe every state file under a state directory.

        Drive-prefixed log names are stored in subdirectories, so the walk is
        recursive. Unreadable offsets are reported as None.
        """
        entries = []
        if not state_dir.is_dir():
            return entries

        for path in sorted(p for p in state_dir.rglob('*') if p.is_file()):
            try:
                offset: Optional[str] = str(int(path.read_text(encoding='ascii').strip(" \r\n")))
            except (OSError, UnicodeDecodeError, ValueError):
                offset = None
            entries.append({
                'file': str(path.relative_to(state_dir)),
                'offset': offset,
                'modified': TimeHelper.format_mtime(path),
            })
        return entries

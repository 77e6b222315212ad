"""
Message resolution for event log records.

Classic event log records only carry an event ID and insertion strings. The
readable text lives in a message table inside a module registered by the
event source under
HKLM\\SYSTEM\\CurrentControlSet\\Services\\EventLog\\<log>\\<source>.
"""

import os
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from ..exceptions import MessageResolutionError
from ..models.events import EVENT_CODE_MASK

# Windows-specific imports (only available on Windows)
if os.name == 'nt':
    try:
        import pywintypes
        import win32api
        import win32con
        WINDOWS_AVAILABLE = True
    except ImportError as e:
        logger.warning(f"Windows libraries not available: {e}")
        WINDOWS_AVAILABLE = False
else:
    WINDOWS_AVAILABLE = False


NO_MESSAGE_PLACEHOLDER = (
    "[eventlog-checker] No message resource found. "
    "Please make sure the event log occurred on the server."
)

EVENTLOG_REGISTRY_KEY = "SYSTEM\\CurrentControlSet\\Services\\EventLog\\{log}\\{source}"

_INSERT = re.compile(r'%(\d+)')

# FormatMessage accepts insert markers %1 to %99
MAX_INSERTS = 99


def pad_inserts(args: Sequence[str]) -> List[str]:
    """
    Extend insertion strings to MAX_INSERTS entries.

    A message template may reference more inserts than the record carries;
    missing ones are filled with their own marker text.
    """
    inserts = list(args)[:MAX_INSERTS]
    inserts.extend(f"%{index}" for index in range(len(inserts) + 1, MAX_INSERTS + 1))
    return inserts


def normalize_message(message: str) -> str:
    """Drop carriage returns and a single trailing newline."""
    message = message.replace("\r", "")
    if message.endswith("\n"):
        message = message[:-1]
    return message


class MessageResolver(ABC):
    """Turns an event ID and insertion strings into readable text."""

    @abstractmethod
    def _format(self, log_name: str, source_name: str, event_id: int, args: Sequence[str]) -> str:
        """Format the raw message, raising MessageResolutionError if none exists."""

    def resolve(self, log_name: str, source_name: str, event_id: int, args: Sequence[str]) -> str:
        """
        Resolve the message text for an event.

        Args:
            log_name: Event log the record came from
            source_name: Event source that wrote the record
            event_id: Full 32-bit event identifier
            args: Insertion strings in record order

        Returns:
            Message text with carriage returns removed

        Raises:
            MessageResolutionError: if no message resource is registered
        """
        return normalize_message(self._format(log_name, source_name, event_id, args))


class WindowsMessageResolver(MessageResolver):
    """Resolves messages from the message tables registered in the registry."""

    def _message_files(self, log_name: str, source_name: str) -> List[str]:
        subkey = EVENTLOG_REGISTRY_KEY.format(log=log_name, source=source_name)
        try:
            key = win32api.RegOpenKeyEx(win32con.HKEY_LOCAL_MACHINE, subkey, 0, win32con.KEY_QUERY_VALUE)
        except pywintypes.error as e:
            raise MessageResolutionError(f"no event source '{source_name}' in log '{log_name}': {e.strerror}") from e
        try:
            value, _ = win32api.RegQueryValueEx(key, "EventMessageFile")
        except pywintypes.error as e:
            raise MessageResolutionError(f"no EventMessageFile for '{source_name}': {e.strerror}") from e
        finally:
            win32api.RegCloseKey(key)

        expanded = win32api.ExpandEnvironmentStrings(value)
        return [path.strip() for path in expanded.split(';') if path.strip()]

    def _format(self, log_name: str, source_name: str, event_id: int, args: Sequence[str]) -> str:
        if not WINDOWS_AVAILABLE:
            raise MessageResolutionError("Windows message resources not available")

        last_error = None
        for path in self._message_files(log_name, source_name):
            try:
                module = win32api.LoadLibraryEx(
                    path, 0,
                    win32con.LOAD_LIBRARY_AS_DATAFILE | win32con.DONT_RESOLVE_DLL_REFERENCES,
                )
            except pywintypes.error as e:
                last_error = e
                logger.debug(f"Cannot load message module {path}: {e.strerror}")
                continue
            try:
                return win32api.FormatMessageW(
                    win32con.FORMAT_MESSAGE_FROM_HMODULE, module, event_id, 0, pad_inserts(args)
                )
            except pywintypes.error as e:
                last_error = e
                logger.debug(f"Event {event_id} not in message module {path}: {e.strerror}")
            finally:
                win32api.FreeLibrary(module)

        raise MessageResolutionError(
            f"no message resource for event {event_id} of '{source_name}': {last_error}"
        )


class StaticMessageResolver(MessageResolver):
    """
    Resolver backed by a table of message templates.

    Templates are keyed by (source name, event code) and use ``%1``-style
    insertion markers. Used in tests and wherever message tables are not
    available.
    """

    def __init__(self, templates: Optional[Mapping[Tuple[str, int], str]] = None):
        self.templates: Dict[Tuple[str, int], str] = dict(templates or {})
        self.calls: List[Tuple[str, str, int]] = []

    def _format(self, log_name: str, source_name: str, event_id: int, args: Sequence[str]) -> str:
        self.calls.append((log_name, source_name, event_id))
        template = self.templates.get((source_name, event_id & EVENT_CODE_MASK))
        if template is None:
            raise MessageResolutionError(f"no message template for {source_name}/{event_id}")

        def insert(match):
            index = int(match.group(1)) - 1
            return args[index] if 0 <= index < len(args) else match.group(0)

        return _INSERT.sub(insert, template)


def create_message_resolver() -> MessageResolver:
    """Create the message resolver for this platform."""
    return WindowsMessageResolver()

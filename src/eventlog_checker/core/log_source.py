"""
Event log sources.

This module opens classic Windows event logs and reads single raw records by
record number. WindowsLogSource uses pywin32 for the handle and bounds, and
ReadEventLogW through ctypes for the raw EVENTLOGRECORD bytes that pywin32
does not expose. MemoryLogSource implements the same read semantics in memory
for tests and for platforms without the event log API.
"""

import os
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from ..exceptions import EndOfLogError, InsufficientBufferError, LogOpenError, LogReadError
from .decoder import encode_record

# Windows-specific imports (only available on Windows)
if os.name == 'nt':
    try:
        import ctypes
        from ctypes import wintypes

        import pywintypes
        import win32evtlog
        import winerror
        WINDOWS_AVAILABLE = True
    except ImportError as e:
        logger.warning(f"Windows libraries not available: {e}")
        WINDOWS_AVAILABLE = False
else:
    WINDOWS_AVAILABLE = False


EVENTLOG_SEQUENTIAL_READ = 0x0001
EVENTLOG_SEEK_READ = 0x0002
EVENTLOG_FORWARDS_READ = 0x0004

DEFAULT_BUFFER_SIZE = 0x10000


def read_flags(record_number: int) -> int:
    """Record 0 cannot be seeked to; it is read sequentially."""
    if record_number == 0:
        return EVENTLOG_FORWARDS_READ | EVENTLOG_SEQUENTIAL_READ
    return EVENTLOG_FORWARDS_READ | EVENTLOG_SEEK_READ


class EventLogHandle(ABC):
    """An open event log. Use as a context manager so it is always closed."""

    def __init__(self, log_name: str, buffer_size: int = DEFAULT_BUFFER_SIZE):
        self.log_name = log_name
        self.buffer_size = buffer_size
        self.closed = False

    def __enter__(self) -> "EventLogHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @abstractmethod
    def bounds(self) -> Tuple[int, int]:
        """Return (oldest record number, number of records)."""

    @abstractmethod
    def _read(self, flags: int, record_number: int) -> bytes:
        """Read one record into a buffer of ``self.buffer_size`` bytes."""

    @abstractmethod
    def _release(self) -> None:
        """Release the underlying OS handle."""

    def _resize(self, size: int) -> None:
        self.buffer_size = size

    def read_at(self, record_number: int) -> Optional[bytes]:
        """
        Read the raw bytes of one record.

        An undersized buffer is grown to the reported size and the read is
        retried once.

        Returns:
            Record bytes, or None when no more records are available

        Raises:
            LogReadError: on any other read failure
        """
        flags = read_flags(record_number)
        try:
            try:
                return self._read(flags, record_number)
            except InsufficientBufferError as e:
                logger.debug(
                    f"{self.log_name}: growing read buffer from {self.buffer_size} "
                    f"to {e.required} bytes for record {record_number}"
                )
                self._resize(e.required)
            return self._read(flags, record_number)
        except EndOfLogError as e:
            logger.debug(f"{self.log_name}: no record at {record_number}: {e}")
            return None

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._release()


class LogSource(ABC):
    """Opens event logs by name."""

    @abstractmethod
    def open(self, log_name: str) -> EventLogHandle:
        """
        Open a named event log.

        Raises:
            LogOpenError: if the log does not exist or access is denied
        """


class WindowsEventLogHandle(EventLogHandle):
    """Event log handle backed by the Win32 event logging API."""

    def __init__(self, log_name: str, handle, buffer_size: int = DEFAULT_BUFFER_SIZE):
        super().__init__(log_name, buffer_size)
        self._handle = handle
        self._buffer = ctypes.create_string_buffer(buffer_size)

    def bounds(self) -> Tuple[int, int]:
        try:
            oldest = win32evtlog.GetOldestEventLogRecord(self._handle)
            count = win32evtlog.GetNumberOfEventLogRecords(self._handle)
        except pywintypes.error as e:
            raise LogOpenError(self.log_name, e.strerror) from e
        return oldest, count

    def _resize(self, size: int) -> None:
        super()._resize(size)
        self._buffer = ctypes.create_string_buffer(size)

    def _read(self, flags: int, record_number: int) -> bytes:
        read = wintypes.DWORD(0)
        needed = wintypes.DWORD(0)
        ok = _ReadEventLogW(
            int(self._handle), flags, record_number,
            self._buffer, self.buffer_size,
            ctypes.byref(read), ctypes.byref(needed),
        )
        if ok:
            return self._buffer.raw[:read.value]

        code = ctypes.get_last_error()
        if code == winerror.ERROR_INSUFFICIENT_BUFFER:
            raise InsufficientBufferError(needed.value)
        if code in (winerror.ERROR_HANDLE_EOF, winerror.ERROR_INVALID_PARAMETER):
            raise EndOfLogError(ctypes.FormatError(code), winerror=code)
        raise LogReadError(
            f"ReadEventLog failed on '{self.log_name}' at record {record_number}: "
            f"{ctypes.FormatError(code)}",
            winerror=code,
        )

    def _release(self) -> None:
        try:
            win32evtlog.CloseEventLog(self._handle)
        except pywintypes.error as e:
            logger.warning(f"Error closing event log '{self.log_name}': {e}")


class WindowsLogSource(LogSource):
    """Log source for the local machine's classic event logs."""

    def __init__(self, buffer_size: int = DEFAULT_BUFFER_SIZE):
        self.buffer_size = buffer_size

    def open(self, log_name: str) -> EventLogHandle:
        if not WINDOWS_AVAILABLE:
            raise LogOpenError(log_name, "Windows event log API not available")
        try:
            handle = win32evtlog.OpenEventLog(None, log_name)
        except pywintypes.error as e:
            raise LogOpenError(log_name, e.strerror) from e
        logger.debug(f"Opened event log '{log_name}'")
        return WindowsEventLogHandle(log_name, handle, self.buffer_size)


if WINDOWS_AVAILABLE:
    _advapi32 = ctypes.WinDLL('advapi32', use_last_error=True)
    _ReadEventLogW = _advapi32.ReadEventLogW
    _ReadEventLogW.argtypes = [
        wintypes.HANDLE, wintypes.DWORD, wintypes.DWORD, wintypes.LPVOID,
        wintypes.DWORD, ctypes.POINTER(wintypes.DWORD), ctypes.POINTER(wintypes.DWORD),
    ]
    _ReadEventLogW.restype = wintypes.BOOL


class MemoryEventLog:
    """Records of one in-memory log, numbered from ``oldest``."""

    def __init__(self, records: Sequence[bytes] = (), oldest: int = 1):
        self.oldest = oldest
        self.records: List[bytes] = list(records)

    @property
    def newest(self) -> int:
        return self.oldest + len(self.records) - 1

    def append(self, raw: bytes) -> int:
        self.records.append(raw)
        return self.newest

    def add_event(self, event_id: int, event_type: int, source_name: str, **fields) -> int:
        """Append a record built from fields; returns its record number."""
        number = self.oldest + len(self.records)
        return self.append(encode_record(number, event_id, event_type, source_name, **fields))

    def rotate(self, drop: int) -> None:
        """Discard the ``drop`` oldest records, as a wrapping log would."""
        del self.records[:drop]
        self.oldest += drop


class MemoryEventLogHandle(EventLogHandle):
    """Handle over a MemoryEventLog reproducing ReadEventLog results."""

    def __init__(self, log: MemoryEventLog, log_name: str, buffer_size: int, reads: list):
        super().__init__(log_name, buffer_size)
        self._log = log
        self._reads = reads
        self._position = 0

    def bounds(self) -> Tuple[int, int]:
        return self._log.oldest, len(self._log.records)

    def _read(self, flags: int, record_number: int) -> bytes:
        self._reads.append((self.log_name, record_number, flags))
        if flags & EVENTLOG_SEQUENTIAL_READ:
            index = self._position
        else:
            index = record_number - self._log.oldest
        if not 0 <= index < len(self._log.records):
            raise EndOfLogError(f"record {record_number} not in log")
        raw = self._log.records[index]
        if len(raw) > self.buffer_size:
            raise InsufficientBufferError(len(raw))
        self._position = index + 1
        return raw

    def _release(self) -> None:
        logger.debug(f"Closed in-memory event log '{self.log_name}'")


class MemoryLogSource(LogSource):
    """In-memory log source for testing on any platform."""

    def __init__(self, buffer_size: int = DEFAULT_BUFFER_SIZE):
        self.buffer_size = buffer_size
        self.logs: Dict[str, MemoryEventLog] = {}
        self.reads: List[Tuple[str, int, int]] = []
        self.handles: List[MemoryEventLogHandle] = []

    def add_log(self, log_name: str, records: Sequence[bytes] = (), oldest: int = 1) -> MemoryEventLog:
        log = MemoryEventLog(records, oldest)
        self.logs[log_name] = log
        return log

    def open(self, log_name: str) -> EventLogHandle:
        log = self.logs.get(log_name)
        if log is None:
            raise LogOpenError(log_name, "The specified event log does not exist")
        handle = MemoryEventLogHandle(log, log_name, self.buffer_size, self.reads)
        self.handles.append(handle)
        return handle


def create_log_source() -> LogSource:
    """
    Create the event log source for this platform.

    Returns:
        WindowsLogSource; opening a log fails with LogOpenError where the
        event log API is unavailable
    """
    if not WINDOWS_AVAILABLE:
        logger.warning("Windows libraries not available, event logs cannot be opened")
    return WindowsLogSource()

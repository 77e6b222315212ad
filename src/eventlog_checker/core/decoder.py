"""
Binary decoder for EVENTLOGRECORD buffers.

A record starts with a fixed 56-byte header followed by the NUL-terminated
UTF-16LE source and computer names. Insertion strings and binary data live at
the offsets declared in the header. Every field access goes through
RecordReader, which refuses to read past the end of the record.
"""

import struct
from datetime import datetime, timezone
from typing import List, Sequence

from ..exceptions import DecodeError
from ..models.events import EventRecord, EventType


HEADER = struct.Struct('<6I4H6I')
HEADER_SIZE = HEADER.size  # 56
RECORD_SIGNATURE = 0x654C664C  # 'LfLe'


class RecordReader:
    """Bounds-checked cursor over a record buffer."""

    def __init__(self, buffer: bytes, limit: int):
        self._buffer = memoryview(buffer)
        self._limit = limit
        self.position = 0

    @property
    def remaining(self) -> int:
        return self._limit - self.position

    def seek(self, offset: int) -> None:
        if not 0 <= offset <= self._limit:
            raise DecodeError(f"offset {offset} outside record of {self._limit} bytes")
        self.position = offset

    def read(self, size: int) -> bytes:
        if size < 0 or size > self.remaining:
            raise DecodeError(
                f"cannot read {size} bytes at offset {self.position}, "
                f"{self.remaining} remaining"
            )
        start = self.position
        self.position += size
        return bytes(self._buffer[start:self.position])

    def unpack(self, fmt: struct.Struct) -> tuple:
        return fmt.unpack(self.read(fmt.size))

    def read_utf16z(self) -> str:
        """
        Read a NUL-terminated UTF-16LE string and move past the terminator.

        Unpaired surrogates become U+FFFD.
        """
        end = self.position
        while end + 2 <= self._limit:
            if self._buffer[end] == 0 and self._buffer[end + 1] == 0:
                raw = bytes(self._buffer[self.position:end])
                self.position = end + 2
                return raw.decode('utf-16-le', errors='replace')
            end += 2
        raise DecodeError(f"unterminated string at offset {self.position}")


def _timestamp(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def decode_record(buffer: bytes) -> EventRecord:
    """
    Decode the first record held in a raw read buffer.

    Args:
        buffer: Bytes returned by a single ReadEventLog call

    Returns:
        EventRecord with header fields, names and insertion strings

    Raises:
        DecodeError: if the buffer is truncated or malformed
    """
    if len(buffer) < HEADER_SIZE:
        raise DecodeError(f"record buffer of {len(buffer)} bytes is shorter than the header")

    (length, signature, record_number, time_generated, time_written, event_id,
     event_type, num_strings, event_category, _reserved_flags, _closing_record,
     string_offset, _sid_length, _sid_offset, data_length, data_offset) = HEADER.unpack_from(buffer)

    if signature != RECORD_SIGNATURE:
        raise DecodeError(f"bad record signature 0x{signature:08x}")
    if length < HEADER_SIZE or length > len(buffer):
        raise DecodeError(f"record length {length} does not fit buffer of {len(buffer)} bytes")

    reader = RecordReader(buffer, length)
    reader.seek(HEADER_SIZE)
    source_name = reader.read_utf16z()
    computer_name = reader.read_utf16z()

    strings: List[str] = []
    if num_strings:
        reader.seek(string_offset)
        for _ in range(num_strings):
            strings.append(reader.read_utf16z())

    data = b""
    if data_length:
        reader.seek(data_offset)
        data = reader.read(data_length)

    return EventRecord(
        record_number=record_number,
        time_generated=_timestamp(time_generated),
        time_written=_timestamp(time_written),
        event_id=event_id,
        event_type=EventType.from_code(event_type),
        event_category=event_category,
        source_name=source_name,
        computer_name=computer_name,
        strings=strings,
        data=data,
    )


def _utf16z(text: str) -> bytes:
    return text.encode('utf-16-le') + b'\x00\x00'


def _pad(blob: bytes) -> bytes:
    return blob + b'\x00' * (-len(blob) % 4)


def encode_record(
    record_number: int,
    event_id: int,
    event_type: int,
    source_name: str,
    computer_name: str = "LOCALHOST",
    strings: Sequence[str] = (),
    data: bytes = b"",
    time_generated: int = 0,
    time_written: int = 0,
    event_category: int = 0,
) -> bytes:
    """
    Build a well-formed EVENTLOGRECORD.

    Used by the in-memory log source to stand in for records read from the OS.
    """
    names = _pad(_utf16z(source_name) + _utf16z(computer_name))
    string_offset = HEADER_SIZE + len(names)
    string_blob = b"".join(_utf16z(s) for s in strings)
    data_offset = string_offset + len(string_blob)
    body = _pad(names + string_blob + data)
    length = HEADER_SIZE + len(body) + 4

    header = HEADER.pack(
        length, RECORD_SIGNATURE, record_number, time_generated, time_written,
        event_id, event_type, len(strings), event_category, 0, 0,
        string_offset, 0, 0, len(data), data_offset,
    )
    return header + body + struct.pack('<I', length)

"""
Tests for the EVENTLOGRECORD decoder.
"""

import struct
from datetime import datetime, timezone

import pytest

from eventlog_checker.core.decoder import (
    HEADER,
    HEADER_SIZE,
    RECORD_SIGNATURE,
    RecordReader,
    decode_record,
    encode_record,
)
from eventlog_checker.exceptions import DecodeError
from eventlog_checker.models.events import EventType

from .conftest import AUDIT_FAILURE, ERROR, STRING_OFFSET_FIELD


class TestDecodeRecord:
    """Test cases for decode_record."""

    def test_decode(self):
        """All header fields, names, strings and data are decoded."""
        raw = encode_record(
            record_number=42,
            event_id=0xC00003E8,
            event_type=ERROR,
            source_name="Application Error",
            computer_name="WEB01",
            strings=["svc.exe", "1.0", ""],
            data=b"\x01\x02\x03",
            time_generated=1700000000,
            time_written=1700000005,
            event_category=3,
        )

        record = decode_record(raw)

        assert record.record_number == 42
        assert record.event_id == 0xC00003E8
        assert record.event_code == 1000
        assert record.event_type == EventType.ERROR
        assert record.event_category == 3
        assert record.source_name == "Application Error"
        assert record.computer_name == "WEB01"
        assert record.strings == ["svc.exe", "1.0", ""]
        assert record.data == b"\x01\x02\x03"
        assert record.time_generated == datetime.fromtimestamp(1700000000, tz=timezone.utc)
        assert record.time_written == datetime.fromtimestamp(1700000005, tz=timezone.utc)
        assert record.message is None

    def test_encoded_length(self):
        """Length is DWORD-aligned and repeated at the end of the record."""
        raw = encode_record(1, 1, ERROR, "Src")

        length = struct.unpack_from('<I', raw)[0]
        assert length == len(raw)
        assert length % 4 == 0
        assert struct.unpack_from('<I', raw, length - 4)[0] == length

    def test_non_ascii_strings(self):
        record = decode_record(encode_record(1, 4625, AUDIT_FAILURE, "Sécurité", strings=["ユーザー"]))

        assert record.source_name == "Sécurité"
        assert record.strings == ["ユーザー"]
        assert record.event_type == EventType.AUDIT_FAILURE

    def test_unpaired_surrogate_in_insertion_string(self):
        """Arbitrary application data in insertion strings does not fail the record."""
        raw = bytearray(encode_record(1, 1000, ERROR, "App", strings=["ab"]))
        string_offset = struct.unpack_from('<I', raw, STRING_OFFSET_FIELD)[0]
        raw[string_offset:string_offset + 2] = b"\x00\xd8"

        record = decode_record(bytes(raw))

        assert record.strings == ["\ufffdb"]
        assert record.event_type == EventType.ERROR

    def test_unknown_type(self):
        assert decode_record(encode_record(1, 1, 0x0020, "Src")).event_type == EventType.UNKNOWN

    def test_only_first_record_is_decoded(self):
        """A buffer may hold more records; only the first is returned."""
        raw = encode_record(1, 10, ERROR, "First") + encode_record(2, 20, ERROR, "Second")

        record = decode_record(raw)

        assert record.record_number == 1
        assert record.source_name == "First"

    def test_short_buffer(self):
        with pytest.raises(DecodeError):
            decode_record(b"\x00" * (HEADER_SIZE - 1))

    def test_bad_signature(self):
        raw = bytearray(encode_record(1, 1, ERROR, "Src"))
        struct.pack_into('<I', raw, 4, 0xDEADBEEF)

        with pytest.raises(DecodeError, match="signature"):
            decode_record(bytes(raw))

    def test_truncated_record(self):
        """A Length field larger than the buffer is rejected."""
        raw = encode_record(1, 1, ERROR, "Src", strings=["abc"])

        with pytest.raises(DecodeError):
            decode_record(raw[:-8])

    def test_unterminated_source_name(self):
        body = "ABCD".encode('utf-16-le')
        length = HEADER_SIZE + len(body)
        raw = HEADER.pack(
            length, RECORD_SIGNATURE, 1, 0, 0, 1, ERROR, 0, 0, 0, 0,
            length, 0, 0, 0, length,
        ) + body

        with pytest.raises(DecodeError, match="unterminated"):
            decode_record(raw)

    def test_string_offset_outside_record(self):
        raw = bytearray(encode_record(1, 1, ERROR, "Src", strings=["x"]))
        struct.pack_into('<I', raw, STRING_OFFSET_FIELD, 10000)

        with pytest.raises(DecodeError):
            decode_record(bytes(raw))


class TestRecordReader:
    """Test cases for RecordReader."""

    def test_read_within_limit(self):
        reader = RecordReader(b"abcdef", 4)

        assert reader.read(2) == b"ab"
        assert reader.remaining == 2

    def test_read_past_limit(self):
        """The limit applies even when the buffer is longer."""
        reader = RecordReader(b"abcdef", 4)

        with pytest.raises(DecodeError):
            reader.read(5)

    def test_seek_past_limit(self):
        reader = RecordReader(b"abcdef", 4)

        with pytest.raises(DecodeError):
            reader.seek(5)

    def test_read_utf16z(self):
        reader = RecordReader("hi".encode('utf-16-le') + b"\x00\x00tail", 10)

        assert reader.read_utf16z() == "hi"
        assert reader.position == 6

    def test_unpaired_surrogate_replaced(self):
        # Lone low surrogate followed by 'A'
        reader = RecordReader(b"\x00\xdcA\x00\x00\x00", 6)

        assert reader.read_utf16z() == "\ufffdA"
        assert reader.position == 6

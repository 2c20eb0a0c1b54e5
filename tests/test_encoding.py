#!/usr/bin/env python3
"""
Tests for kvqueue key and record encoding.
"""

from array import array

import pytest

from kvqueue.encoding import (
    KEY_SIZE,
    MAX_PAYLOAD_SIZE,
    MAX_PRIORITY,
    encode_priority,
    decode_priority,
    encode_record,
    decode_front_record,
    iter_records,
    payload_bytes,
)
from kvqueue.errors import (
    ErrorCode,
    InvalidPriority,
    MalformedKey,
    MalformedRecord,
    PayloadTooLarge,
)


# ============================================================================
# Priority Key Tests
# ============================================================================

class TestPriorityKeys:
    """Test big-endian priority key encoding."""

    def test_encode_decode(self):
        """Test priority encoding roundtrip."""
        values = [0, 1, 100, 1000, 2**32, 2**63 - 1, MAX_PRIORITY]
        for value in values:
            encoded = encode_priority(value)
            assert len(encoded) == KEY_SIZE
            assert decode_priority(encoded) == value, f"Failed for {value}"

    def test_big_endian_layout(self):
        assert encode_priority(1) == b"\x00" * 7 + b"\x01"
        assert encode_priority(0x0102030405060708) == bytes(range(1, 9))

    def test_ordering(self):
        """Test that encoded priorities sort like the numbers."""
        values = [0, 3, 255, 256, 10000, 2**32, MAX_PRIORITY]
        encoded = [encode_priority(v) for v in values]
        assert encoded == sorted(encoded), "Ordering not preserved"

    def test_rejects_out_of_range(self):
        with pytest.raises(InvalidPriority):
            encode_priority(-1)
        with pytest.raises(InvalidPriority):
            encode_priority(MAX_PRIORITY + 1)

    def test_rejects_non_integers(self):
        for bad in (1.5, "10", None, True):
            with pytest.raises(InvalidPriority):
                encode_priority(bad)

    def test_invalid_priority_is_value_error(self):
        with pytest.raises(ValueError):
            encode_priority(-5)

    @pytest.mark.parametrize("key", [b"", b"\x05", b"\x01" * 7, b"\x01" * 9, b"\x01" * 10])
    def test_decode_wrong_length(self, key):
        """Keys that are not exactly 8 bytes are malformed."""
        with pytest.raises(MalformedKey) as exc_info:
            decode_priority(key)
        assert exc_info.value.code == ErrorCode.MALFORMED_KEY
        assert exc_info.value.context["key"] == key


# ============================================================================
# Element Record Tests
# ============================================================================

class TestRecords:
    """Test length-prefixed record encoding."""

    def test_encode_record(self):
        assert encode_record(b"\x00\x00") == b"\x02\x00\x00"
        assert encode_record(b"abc") == b"\x03abc"

    def test_encode_empty(self):
        assert encode_record(b"") == b"\x00"

    def test_encode_bytes_like(self):
        assert encode_record(bytearray(b"xy")) == b"\x02xy"
        assert encode_record(memoryview(b"xy")) == b"\x02xy"

    def test_encode_multibyte_memoryview(self):
        """Length prefix counts bytes, not items."""
        view = memoryview(array('H', [1, 2, 3]))
        record = encode_record(view)
        assert record[0] == 3 * view.itemsize
        assert record[1:] == view.tobytes()

        payload, rest = decode_front_record(record + encode_record(b"x"))
        assert payload == view.tobytes()
        assert rest == b"\x01x"

    def test_multibyte_memoryview_boundary(self):
        under = array('H', [0] * (MAX_PAYLOAD_SIZE // array('H').itemsize))
        assert len(encode_record(memoryview(under))) <= MAX_PAYLOAD_SIZE + 1

        over = array('H', [0] * 128)
        assert len(memoryview(over)) <= MAX_PAYLOAD_SIZE
        with pytest.raises(PayloadTooLarge) as exc_info:
            encode_record(memoryview(over))
        assert exc_info.value.size == 128 * over.itemsize

    def test_payload_bytes(self):
        assert payload_bytes(b"ab") == b"ab"
        assert payload_bytes(bytearray(b"ab")) == b"ab"
        assert payload_bytes(memoryview(array('H', [0x0101]))) == b"\x01\x01"

    @pytest.mark.parametrize("bad", ["text", 3, None])
    def test_encode_rejects_non_bytes(self, bad):
        with pytest.raises(TypeError):
            encode_record(bad)

    def test_max_size_boundary(self):
        """255 bytes fits, 256 does not."""
        record = encode_record(b"\xaa" * MAX_PAYLOAD_SIZE)
        assert record[0] == 255
        assert len(record) == 256

        with pytest.raises(PayloadTooLarge) as exc_info:
            encode_record(b"\xaa" * (MAX_PAYLOAD_SIZE + 1))
        assert exc_info.value.size == 256
        assert exc_info.value.limit == 255

    def test_custom_limit(self):
        with pytest.raises(PayloadTooLarge):
            encode_record(b"12345", limit=4)
        assert encode_record(b"1234", limit=4) == b"\x041234"

    def test_decode_front_record(self):
        payload, rest = decode_front_record(b"\x02ab\x01c")
        assert payload == b"ab"
        assert rest == b"\x01c"

        payload, rest = decode_front_record(rest)
        assert payload == b"c"
        assert rest == b""

    def test_decode_empty_payload(self):
        payload, rest = decode_front_record(b"\x00\x00")
        assert payload == b""
        assert rest == b"\x00"

    def test_record_roundtrip(self):
        for payload in (b"", b"\x00", b"hello", bytes(range(256))[:255]):
            record = encode_record(payload)
            decoded, rest = decode_front_record(record)
            assert rest == b""
            assert encode_record(decoded) == record

    def test_decode_truncated(self):
        """A bucket shorter than its length prefix is malformed."""
        with pytest.raises(MalformedRecord) as exc_info:
            decode_front_record(b"\x0a\x00\x00")
        assert exc_info.value.context["declared"] == 10
        assert exc_info.value.code == ErrorCode.MALFORMED_RECORD

    def test_decode_empty_bucket(self):
        with pytest.raises(MalformedRecord):
            decode_front_record(b"")

    def test_iter_records(self):
        bucket = encode_record(b"one") + encode_record(b"") + encode_record(b"three")
        assert list(iter_records(bucket)) == [b"one", b"", b"three"]
        assert list(iter_records(b"")) == []

    def test_iter_records_truncated(self):
        with pytest.raises(MalformedRecord):
            list(iter_records(b"\x01a\x05b"))

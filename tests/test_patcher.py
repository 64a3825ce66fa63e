import pytest

from kru_core.checksum import verify
from kru_core.codec import decode_next, encode_record
from kru_core.errors import LengthMismatchError
from kru_update.patcher import APPLIED, UNCHANGED, apply_patch


def test_patch_rewrites_value_and_crc(make_segment):
    path = make_segment(encode_record(0, b"key", b"hello"), encode_record(1, b"key", b"world"))
    size = path.stat().st_size

    with open(path, "r+b") as f:
        record = decode_next(f)
        assert apply_patch(f, record, b"key", b"!!!!!") == APPLIED
        assert f.tell() == record.end

    assert path.stat().st_size == size
    with open(path, "rb") as f:
        patched = decode_next(f)
        untouched = decode_next(f)
    assert patched.value == b"!!!!!"
    assert patched.checksum != record.checksum
    assert verify(patched)
    assert untouched.value == b"world"


def test_length_mismatch_writes_nothing(make_segment):
    path = make_segment(encode_record(0, b"key", b"hello"))
    before = path.read_bytes()

    with open(path, "r+b") as f:
        record = decode_next(f)
        with pytest.raises(LengthMismatchError):
            apply_patch(f, record, b"key", b"hello!")
        with pytest.raises(LengthMismatchError):
            apply_patch(f, record, b"ke", b"hello")

    assert path.read_bytes() == before


def test_identical_replacement_is_unchanged(make_segment):
    path = make_segment(encode_record(0, b"key", b"hello"))
    before = path.read_bytes()

    with open(path, "r+b") as f:
        record = decode_next(f)
        assert apply_patch(f, record, b"key", b"hello") == UNCHANGED

    assert path.read_bytes() == before


def test_null_key_record_keeps_sentinel(make_segment):
    path = make_segment(encode_record(0, None, b"secret", magic=0))

    with open(path, "r+b") as f:
        record = decode_next(f)
        assert apply_patch(f, record, b"", b"******") == APPLIED

    with open(path, "rb") as f:
        patched = decode_next(f)
    assert patched.key_length == -1
    assert patched.value == b"******"
    assert verify(patched)

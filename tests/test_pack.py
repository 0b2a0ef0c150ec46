import pytest

from mixkit.common import Encoding, ErrorCode, MixedError
from mixkit.pack import Pack


def test_size_counts_bytes():
    pack = Pack(4, 2, Encoding.INT16)
    assert pack.size == 16
    assert len(pack.data) == 16
    assert pack.available_write() == pack.size


def test_double_encoding_size():
    pack = Pack(3, 1, Encoding.DOUBLE)
    assert pack.size == 24


def test_unknown_encoding_raises():
    with pytest.raises(MixedError) as info:
        Pack(4, 2, 99)
    assert info.value.code == ErrorCode.UNKNOWN_ENCODING


def test_bytes_round_trip():
    pack = Pack(2, 2, Encoding.UINT8)
    area = pack.request_write(4)
    area[:] = b"\x01\x02\x03\x04"
    pack.finish_write(4)
    readable = pack.request_read()
    assert bytes(readable) == b"\x01\x02\x03\x04"
    pack.finish_read(len(readable))
    assert pack.available_read() == 0


def test_write_request_clamped():
    pack = Pack(2, 1, Encoding.INT8)
    assert len(pack.request_write(100)) == 2


def test_overcommit_raises():
    pack = Pack(2, 1, Encoding.INT8)
    pack.request_write(1)
    with pytest.raises(MixedError):
        pack.finish_write(2)
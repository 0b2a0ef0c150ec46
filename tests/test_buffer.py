import pytest

from mixkit.buffer import Buffer, copy, transfer
from mixkit.common import ErrorCode, MixedError


def test_write_read_round_trip():
    buf = Buffer(8)
    assert buf.write([0.5, -0.25, 1.0]) == 3
    assert buf.read() == [0.5, -0.25, 1.0]
    assert buf.available_read() == 0


def test_write_stops_when_full():
    buf = Buffer(4)
    assert buf.write([0.5] * 10) == 4
    assert buf.write([0.5]) == 0


def test_read_wraps_around():
    buf = Buffer(4)
    buf.write([0.0, 0.125, 0.25, 0.375])
    assert buf.read(2) == [0.0, 0.125]
    assert buf.write([0.5, 0.625]) == 2
    assert buf.read() == [0.25, 0.375, 0.5, 0.625]


def test_request_write_view_is_writable():
    buf = Buffer(4)
    area = buf.request_write(3)
    assert len(area) == 3
    area[0] = 0.5
    buf.finish_write(1)
    assert buf.read() == [0.5]


def test_request_on_empty_gives_empty_view():
    buf = Buffer(4)
    assert len(buf.request_read()) == 0


def test_overcommit_raises():
    buf = Buffer(4)
    buf.request_write(1)
    with pytest.raises(MixedError) as info:
        buf.finish_write(2)
    assert info.value.code == ErrorCode.BUFFER_OVERCOMMIT


def test_transfer_consumes_source():
    source, target = Buffer(4), Buffer(4)
    source.write([0.5, 0.25])
    assert transfer(source, target) == 2
    assert source.available_read() == 0
    assert target.read() == [0.5, 0.25]


def test_transfer_limited_by_target_space():
    source, target = Buffer(4), Buffer(1)
    source.write([0.5, 0.25])
    transfer(source, target)
    assert target.read() == [0.5]
    assert source.read() == [0.25]


def test_copy_keeps_source():
    source, target = Buffer(4), Buffer(4)
    source.write([0.5, 0.25])
    copy(source, target)
    assert source.read() == [0.5, 0.25]
    assert target.read() == [0.5, 0.25]


def test_transfer_to_self_is_noop():
    buf = Buffer(4)
    buf.write([0.5])
    assert transfer(buf, buf) == 0
    assert buf.read() == [0.5]


def test_resize_keeps_data():
    buf = Buffer(2)
    buf.write([0.5, 0.25])
    buf.resize(6)
    assert buf.size == 6
    assert len(buf.data) == 6
    assert buf.read() == [0.5, 0.25]


def test_resize_shrinks():
    buf = Buffer(6)
    buf.resize(3)
    assert len(buf.data) == 3
    with pytest.raises(ValueError):
        buf.resize(-1)
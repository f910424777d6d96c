import pytest

from udpprobe.utils import parse_addr, split_ns, join_ns, format_time, now, generate_zero_bytes


@pytest.mark.parametrize("addr, expected", [
    ("", ("", 20001, 0)),
    ("10.0.0.1", ("10.0.0.1", 20001, 4)),
    ("10.0.0.1:5000", ("10.0.0.1", 5000, 4)),
    ("[2001:db8::1]:5000", ("2001:db8::1", 5000, 6)),
    ("[2001:db8::1]", ("2001:db8::1", 20001, 6)),
    ("2001:db8::1", ("2001:db8::1", 20001, 6)),
])
def test_parse_addr(addr, expected):
    assert parse_addr(addr) == expected


def test_split_and_join_ns():
    assert split_ns(3000000042) == (3, 42)
    assert join_ns(3, 42) == 3000000042


def test_now_is_monotonic():
    assert now() <= now()


def test_zero_bytes():
    assert generate_zero_bytes(3) == b'\x00\x00\x00'


@pytest.mark.parametrize("ms, text", [
    (0.25, "     250us"),
    (12.5, "   12.50ms"),
    (1500, "   1.50sec"),
])
def test_format_time(ms, text):
    assert format_time(ms) == text

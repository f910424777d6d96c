"""
Probe message codec.

Wire layout (network byte order)::

    offset 0  : magic         4 bytes  0xFEFEFEFE
    offset 4  : sequence      8 bytes
    offset 12 : send_seconds  8 bytes
    offset 20 : send_nanos    8 bytes
    offset 28 : payload       zero padding, never inspected
"""
import struct
from collections import namedtuple

from udpprobe.constants import MAGIC, HEADER_FORMAT, HEADER_SIZE, BUFFER_SIZE
from udpprobe.utils import split_ns, join_ns, generate_zero_bytes

_header = struct.Struct(HEADER_FORMAT)


class PayloadTooLargeError(ValueError):
    pass


class ProbeMessage(namedtuple('ProbeMessage', 'sequence send_seconds send_nanos payload')):
    __slots__ = ()

    @property
    def timestamp(self):
        """Send timestamp in nanoseconds of the sender's monotonic clock."""
        return join_ns(self.send_seconds, self.send_nanos)

    @property
    def size(self):
        """Datagram size on the wire."""
        return HEADER_SIZE + len(self.payload)


class InvalidPacket(namedtuple('InvalidPacket', 'reason length')):
    __slots__ = ()

    def __bool__(self):
        return False


def encode(sequence, timestamp, payload_len=0, max_size=BUFFER_SIZE):
    if payload_len < 0 or HEADER_SIZE + payload_len > max_size:
        raise PayloadTooLargeError(
            "datagram of %d bytes exceeds maximum of %d bytes" % (HEADER_SIZE + payload_len, max_size))
    sec, nsec = split_ns(timestamp)
    return _header.pack(MAGIC, sequence, sec, nsec) + generate_zero_bytes(payload_len)


def decode(data):
    if len(data) < HEADER_SIZE:
        return InvalidPacket('short packet', len(data))
    magic, sequence, sec, nsec = _header.unpack_from(data)
    if magic != MAGIC:
        return InvalidPacket('bad magic 0x%08x' % magic, len(data))
    return ProbeMessage(sequence, sec, nsec, bytes(data[HEADER_SIZE:]))

import pytest

from udpprobe.message import decode


class FakeClock:
    """Monotonic nanosecond clock that only moves when told to."""

    def __init__(self, start=1000000000):
        self.t = start

    def __call__(self):
        return self.t

    def advance(self, ns):
        self.t += ns

    def sleep(self, seconds):
        self.t += max(1, round(seconds * 1E9))
        return False


class MemoryRecords:

    def __init__(self):
        self.lines = []
        self.closed = False

    def write(self, line):
        assert not self.closed
        self.lines.append(line)

    def writelines(self, lines):
        for line in lines:
            self.write(line)

    def close(self):
        self.closed = True


class ScriptedTransport:
    """In-memory datagram transport driven by a FakeClock.

    `reply` decides what comes back for each datagram sent: it gets the
    sent bytes and returns a list of datagrams to queue (default: echo).
    """

    peer = ('192.0.2.1', 20001)

    def __init__(self, clock, rtt=250000, reply=None):
        self.clock = clock
        self.rtt = rtt
        self.reply = reply or (lambda data: [data])
        self.sent = []
        self.inbound = []
        self.send_errors = 0
        self.recv_error = None
        self.close_calls = 0
        self.drop_calls = 0
        self.closed = False

    def sendto(self, data, address):
        if self.send_errors:
            self.send_errors -= 1
            raise OSError("network unreachable")
        self.sent.append((self.clock(), data, address))
        self.inbound.extend(self.reply(data))

    def recvfrom(self, timeout=None):
        if self.recv_error is not None:
            raise self.recv_error
        if self.inbound:
            self.clock.advance(self.rtt)
            return self.inbound.pop(0), self.peer
        self.clock.sleep(timeout)
        return None, None

    def drop_multicast(self):
        self.drop_calls += 1

    def close(self):
        self.close_calls += 1
        self.closed = True

    @property
    def sent_messages(self):
        return [decode(data) for _, data, _ in self.sent]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def records():
    return MemoryRecords()


@pytest.fixture
def transport(clock):
    return ScriptedTransport(clock)

import enum
import threading

from udpprobe.constants import POLL_INTERVAL
from udpprobe.message import encode, decode
from udpprobe.session import ProbeSession
from udpprobe.statistics import SessionStatistics, latency_record, clock_record
from udpprobe.tracker import SequenceTracker, Observation
from udpprobe.transport import udpTransport
from udpprobe.utils import now, epoch_ns, parse_addr

import logging
logger = logging.getLogger("udpprobe")


class State(enum.Enum):
    IDLE = 'idle'
    WAIT = 'wait-for-interval'
    SEND = 'send'
    AWAIT = 'await-reply'
    STOP = 'stop'


class StopReason(enum.Enum):
    COMPLETED = 'all probes answered'
    TIMEOUT = 'receive timeout'
    RECEIVE_ERROR = 'receive error'
    CANCELLED = 'cancelled'


class SessionSender(threading.Thread):
    """Pacing engine.

    Sends one probe per interval and, unless running send-only, waits for
    its reply before the next one is sent. The session ends when `count`
    replies arrived (`count` probes sent in send-only mode), when a reply
    does not arrive within `timeout` seconds, on a receive error or on
    cancel(). Statistics are finalized exactly once on every path.
    """

    def __init__(self, transport, address, interval, count=0, timeout=None, payload_size=0,
                 send_only=False, record_sys_clock=False, records=None,
                 clock=now, wallclock=epoch_ns, sleep=None):
        threading.Thread.__init__(self, name="udpprobe-sender", daemon=True)
        self.address = address
        self.interval = interval
        self.count = count
        self.timeout = None if timeout is None else int(timeout * 1E9)
        self.payload_size = payload_size
        self.send_only = send_only
        self.record_sys_clock = record_sys_clock
        self.clock = clock
        self.wallclock = wallclock

        self.tracker = SequenceTracker()
        self.stats = SessionStatistics()
        self.session = ProbeSession(transport, self.stats, records, send_only)

        self._cancel = threading.Event()
        self.sleep = sleep or self._cancel.wait
        self.state = State.IDLE
        self.stop_reason = None
        self.last_sent = None
        self.deadline = None
        self.outstanding = None

    @classmethod
    def from_config(cls, config, records=None):
        config.validate()
        config.log()
        _, _, ipversion = parse_addr(config.server)
        transport = udpTransport.for_sender(config, ipversion=6 if ipversion == 6 else 4)
        return cls(transport, config.address, config.interval, config.count,
                   config.timeout_seconds, config.payload_size, config.send_only,
                   config.record_sys_clock, records)

    @property
    def summary(self):
        return self.session.summary

    def run(self):
        handlers = {
            State.IDLE: self._idle,
            State.WAIT: self._wait_for_interval,
            State.SEND: self._send,
            State.AWAIT: self._await_reply,
        }
        self.last_sent = self.clock()
        logger.info("Start communicating with %s:%d", *self.address[:2])
        try:
            while self.state is not State.STOP:
                if self.session.closed:
                    self._finish(StopReason.CANCELLED)
                    break
                self.state = handlers[self.state]()
        finally:
            self.state = State.STOP
            self.shutdown()

    def _finish(self, reason):
        if self.stop_reason is None:
            self.stop_reason = reason
        return State.STOP

    def _done(self):
        if not self.count:
            return False
        if self.send_only:
            return self.stats.sent >= self.count
        return self.stats.received >= self.count

    def _idle(self):
        if self._cancel.is_set():
            return self._finish(StopReason.CANCELLED)
        if self._done():
            logger.info("All %d probes done", self.count)
            return self._finish(StopReason.COMPLETED)
        return State.WAIT

    def _wait_for_interval(self):
        remaining = self.interval - (self.clock() - self.last_sent)
        if remaining > 0:
            self.sleep(remaining / 1E9)
            if self._cancel.is_set():
                return self._finish(StopReason.CANCELLED)
            return State.WAIT
        return State.SEND

    def _send(self):
        sequence = self.tracker.next_sequence()
        timestamp = self.clock()
        data = encode(sequence, timestamp, self.payload_size)
        try:
            self.session.transport.sendto(data, self.address)
        except OSError as e:
            logger.error("Error on sending UDP packet %d: %s", sequence, e)
        else:
            self.stats.add_sent()
            logger.info("Sent to %s [seq=%d]", self.address[0], sequence)
        # anchor the next interval after the send completed
        self.last_sent = self.clock()
        self.outstanding = (sequence, timestamp)

        if self.send_only:
            if self.record_sys_clock:
                self.session.record(clock_record(sequence, self.wallclock()))
            return State.IDLE

        self.deadline = None if self.timeout is None else self.last_sent + self.timeout
        return State.AWAIT

    def _await_reply(self):
        if self._cancel.is_set():
            return self._finish(StopReason.CANCELLED)

        wait = POLL_INTERVAL
        if self.deadline is not None:
            remaining = self.deadline - self.clock()
            if remaining <= 0:
                logger.info("Receive timeout for packet %d (don't wait anymore)", self.outstanding[0])
                self.stats.add_missing()
                return self._finish(StopReason.TIMEOUT)
            wait = min(wait, remaining / 1E9)

        try:
            data, address = self.session.transport.recvfrom(wait)
        except OSError as e:
            logger.warning("Receive error, communication end: %s", e)
            return self._finish(StopReason.RECEIVE_ERROR)
        if data is None:
            return State.AWAIT

        received_at = self.clock()
        reply = decode(data)
        if not reply:
            logger.debug("ignored packet from %s (%s, %d bytes)", address[0], reply.reason, reply.length)
            return State.AWAIT
        if self.session.closed:
            return self._finish(StopReason.CANCELLED)

        sequence = self.outstanding[0]
        matched = self.tracker.observe(reply.sequence) is Observation.MATCHED
        latency = received_at - reply.timestamp
        if matched:
            logger.info("Reply from %s [seq=%d rtt=%.3fus]", address[0], reply.sequence, latency / 1E3)
        else:
            logger.warning("Packet no %d has gone missing (reply seq=%d)", sequence, reply.sequence)
        self.stats.add_reply(matched, latency / 1E6)

        if self.record_sys_clock:
            self.session.record(clock_record(sequence, self.wallclock()))
        else:
            self.session.record(latency_record(sequence, latency))
        return State.IDLE

    def cancel(self):
        self._cancel.set()

    def shutdown(self):
        if not self.session.closed and self.stop_reason is not None:
            logger.info("Session sender stopped: %s", self.stop_reason.value)
        return self.session.shutdown()

    def stop(self, signum=None, frame=None):
        logger.info("SIGINT received: Stop session sender")
        self._finish(StopReason.CANCELLED)
        self.cancel()
        if self.is_alive() and threading.current_thread() is not self:
            self.join(POLL_INTERVAL * 10)
        return self.shutdown()

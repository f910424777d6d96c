import threading

from udpprobe.constants import POLL_INTERVAL
from udpprobe.message import decode
from udpprobe.session import ProbeSession
from udpprobe.transport import udpTransport
from udpprobe.utils import parse_addr

import logging
logger = logging.getLogger("udpprobe")


class SessionResponder(threading.Thread):
    """Validates incoming probes and, with echo enabled, returns them
    verbatim to their source. Keeps no per-sender state."""

    def __init__(self, transport, echo=True):
        threading.Thread.__init__(self, name="udpprobe-responder", daemon=True)
        self.session = ProbeSession(transport)
        self.echo = echo
        self.received = 0
        self.last_sequence = None
        self.running = True

    @classmethod
    def from_config(cls, config):
        config.validate()
        config.log()
        _, _, ipversion = parse_addr(config.bind_address)
        transport = udpTransport.for_responder(config, ipversion=6 if ipversion == 6 else 4)
        return cls(transport, config.echo)

    @property
    def transport(self):
        return self.session.transport

    def run(self):
        logger.info("Start echo server.")
        try:
            while self.running:
                try:
                    data, address = self.transport.recvfrom(POLL_INTERVAL)
                except OSError as e:
                    if self.running:
                        logger.error("Receive error: %s", e)
                    break
                if data is None:
                    continue

                message = decode(data)
                if not message:
                    logger.debug("ignored packet from %s (%s, %d bytes)", address[0], message.reason, message.length)
                    continue

                self.received += 1
                self.last_sequence = message.sequence
                logger.info("Received packet from %s [seq=%d]", address[0], message.sequence)

                if self.echo:
                    try:
                        self.transport.sendto(data, address)
                    except OSError as e:
                        logger.error("Error sending packet to %s: %s", address[0], e)
        finally:
            self.shutdown()
        logger.info("Session responder stopped (%d probes received)", self.received)

    def shutdown(self):
        self.running = False
        self.session.shutdown()

    def stop(self, signum=None, frame=None):
        logger.info("SIGINT received: Stop session responder")
        self.running = False
        if self.is_alive() and threading.current_thread() is not self:
            self.join(POLL_INTERVAL * 10)
        self.shutdown()

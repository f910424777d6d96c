from udpprobe.constants import (BUFFER_SIZE, HEADER_SIZE, INTERVAL_DEFAULT, COUNT_DEFAULT,
                                TIMEOUT_DEFAULT, PAYLOAD_DEFAULT, TOS_DEFAULT, TOS_MAX)

import logging
logger = logging.getLogger("udpprobe")


class ConfigurationError(ValueError):
    pass


def _check_port(port):
    if port is None:
        raise ConfigurationError("port number is required")
    if not 0 < port < 65536:
        raise ConfigurationError("port number %d out of range [1..65535]" % port)


def _check_not_negative(name, value):
    if value < 0:
        raise ConfigurationError("%s must not be negative (got %d)" % (name, value))


class SenderConfig:

    def __init__(self, server, port, interval=INTERVAL_DEFAULT, count=COUNT_DEFAULT,
                 timeout=TIMEOUT_DEFAULT, payload_size=PAYLOAD_DEFAULT, tos=TOS_DEFAULT,
                 multicast=False, broadcast=False, loopback=False,
                 record_sys_clock=False, send_only=False):
        self.server = server
        self.port = port
        self.interval = interval          # nanoseconds
        self.count = count                # 0: unbounded
        self.timeout = timeout            # milliseconds, 0: block indefinitely
        self.payload_size = payload_size
        self.tos = tos
        self.multicast = multicast
        self.broadcast = broadcast
        self.loopback = loopback
        self.record_sys_clock = record_sys_clock
        self.send_only = send_only

    @property
    def address(self):
        return (self.server, self.port)

    @property
    def timeout_seconds(self):
        if self.timeout == 0:
            return None
        return self.timeout / 1E3

    def validate(self):
        if not self.server:
            raise ConfigurationError("server address is required")
        _check_port(self.port)
        _check_not_negative("interval", self.interval)
        _check_not_negative("count", self.count)
        _check_not_negative("timeout", self.timeout)
        _check_not_negative("payload size", self.payload_size)
        if HEADER_SIZE + self.payload_size > BUFFER_SIZE:
            raise ConfigurationError("payload size %d exceeds maximum of %d bytes" % (
                self.payload_size, BUFFER_SIZE - HEADER_SIZE))
        if not 0 <= self.tos <= TOS_MAX:
            raise ConfigurationError("ToS code %d out of range [0..%d]" % (self.tos, TOS_MAX))
        return self

    def log(self):
        logger.info("Server address:        %s", self.server)
        logger.info("Port number:           %d", self.port)
        logger.info("Packet interval (ns):  %d", self.interval)
        logger.info("Max number of packets: %d", self.count)
        logger.info("Socket timeout (ms):   %d", self.timeout)
        logger.info("Socket ToS:            %d", self.tos)
        logger.info("Payload size:          %d", self.payload_size)
        logger.info("Enable multicast:      %s", "yes" if self.multicast else "no")
        logger.info("Enable broadcast:      %s", "yes" if self.broadcast else "no")
        logger.info("Enable loopback:       %s", "yes" if self.loopback else "no")
        logger.info("Record system clock:   %s", "yes" if self.record_sys_clock else "no")
        logger.info("Send only mode:        %s", "yes" if self.send_only else "no")


class ResponderConfig:

    def __init__(self, port, bind_address="", multicast_group=None, loopback=False, echo=True):
        self.port = port
        self.bind_address = bind_address
        self.multicast_group = multicast_group
        self.loopback = loopback
        self.echo = echo

    def validate(self):
        _check_port(self.port)
        return self

    def log(self):
        logger.info("Port number:       %d", self.port)
        logger.info("Enable multicast:  %s", "yes" if self.multicast_group else "no")
        if self.multicast_group:
            logger.info("Multicast address: %s", self.multicast_group)
        logger.info("Enable loopback:   %s", "yes" if self.loopback else "no")
        logger.info("Echo probes:       %s", "yes" if self.echo else "no")

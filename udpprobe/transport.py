import binascii
import errno
import select
import socket
import struct

from udpprobe.constants import BUFFER_SIZE

import logging
logger = logging.getLogger("udpprobe")


class udpTransport:
    """Datagram transport shared by sender and responder.

    recvfrom() is bounded by a timeout in seconds (None blocks) and
    returns (None, None) when nothing arrived in time.
    """

    def __init__(self, addr="", port=0, ipversion=4):
        self.ipversion = ipversion
        self.multicast_group = None
        self.socket = None
        try:
            if ipversion == 6:
                self.bind6(addr, port)
            else:
                self.bind(addr, port)
        except OSError:
            if self.socket is not None:
                self.socket.close()
            raise
        self.closed = False

    def bind(self, addr, port):
        logger.debug("bind(addr=%s, port=%d)", addr, port)
        self.socket = socket.socket(
            socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        self.socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.socket.bind((addr, port))

    def bind6(self, addr, port):
        logger.debug("bind6(addr=%s, port=%d)", addr, port)
        self.socket = socket.socket(
            socket.AF_INET6, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        self.socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.socket.bind((addr, port))

    @classmethod
    def for_sender(cls, config, ipversion=4):
        transport = cls(ipversion=ipversion)
        try:
            transport.set_tos(config.tos)
            if config.multicast:
                transport.join_multicast(config.server)
            if ipversion == 4:
                transport.set_multicast_loop(config.loopback)
                transport.set_broadcast(config.broadcast)
        except OSError:
            transport.close()
            raise
        return transport

    @classmethod
    def for_responder(cls, config, ipversion=4):
        transport = cls(config.bind_address, config.port, ipversion)
        try:
            if config.multicast_group:
                transport.join_multicast(config.multicast_group)
            if ipversion == 4:
                transport.set_multicast_loop(config.loopback)
        except OSError:
            transport.close()
            raise
        logger.info("Wait to receive probes on %s:%d", config.bind_address or "*", transport.port)
        return transport

    @property
    def port(self):
        return self.socket.getsockname()[1]

    def set_tos(self, code):
        # DSCP code in the upper six bits of the ToS byte
        tos = (code & 0x3F) << 2
        if not tos:
            return
        try:
            if self.ipversion == 6:
                self.socket.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_TCLASS, tos)
            else:
                self.socket.setsockopt(socket.IPPROTO_IP, socket.IP_TOS, tos)
        except OSError as e:
            logger.error("Failed to set IP_TOS to %d: %s", tos, e)

    def _mreq(self, group):
        return struct.pack('4s4s', socket.inet_aton(group), socket.inet_aton('0.0.0.0'))

    def join_multicast(self, group):
        logger.debug("join multicast group %s", group)
        self.socket.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, self._mreq(group))
        self.multicast_group = group

    def drop_multicast(self):
        if self.multicast_group is None:
            return
        group, self.multicast_group = self.multicast_group, None
        logger.debug("drop multicast group %s", group)
        try:
            self.socket.setsockopt(socket.IPPROTO_IP, socket.IP_DROP_MEMBERSHIP, self._mreq(group))
        except OSError as e:
            logger.error("Error on dropping multicast membership on socket: %s", e)

    def set_multicast_loop(self, enable):
        self.socket.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_LOOP, 1 if enable else 0)

    def set_broadcast(self, enable):
        self.socket.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1 if enable else 0)

    def sendto(self, data, address):
        logger.debug("transmit: %s", binascii.hexlify(data))
        self.socket.sendto(data, address)

    def recvfrom(self, timeout=None):
        if self.closed:
            raise OSError(errno.EBADF, "transport closed")
        try:
            ready = select.select([self.socket], [], [], timeout)[0]
        except ValueError:
            # socket closed from another thread while waiting
            raise OSError(errno.EBADF, "transport closed")
        if not ready:
            return None, None
        data, address = self.socket.recvfrom(BUFFER_SIZE)
        logger.debug("received: %s", binascii.hexlify(data))
        return data, address

    def close(self):
        if self.closed:
            return
        self.closed = True
        try:
            self.socket.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            # unconnected datagram sockets report ENOTCONN, waiters still wake up
            logger.debug("shutdown: %s", e)
        self.socket.close()

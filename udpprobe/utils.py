import time

from udpprobe.constants import NANOS, PORT_DEFAULT


def parse_addr(addr, port=PORT_DEFAULT):
    """ Parse IP addresses and ports.
        Works with:
            IPv6 address with and without port;
            IPv4 address or hostname with and without port.
    """
    if addr == '':
        # no address given (default: any IPv4 address)
        return "", port, 0
    elif ']:' in addr:
        # IPv6 address with port
        ip, port = addr.rsplit(':', 1)
        return ip.strip('[]'), int(port), 6
    elif ']' in addr:
        # IPv6 address without port
        return addr.strip('[]'), port, 6
    elif addr.count(':') > 1:
        # IPv6 address without port
        return addr, port, 6
    elif ':' in addr:
        # IPv4 address with port
        ip, port = addr.split(':')
        return ip, int(port), 4
    else:
        # IPv4 address without port
        return addr, port, 4


def now():
    """Monotonic clock reading in nanoseconds."""
    return time.monotonic_ns()


def epoch_ns():
    return time.time_ns()


def split_ns(ns):
    """Split nanoseconds into (seconds, nanoseconds) as carried on the wire."""
    return divmod(ns, NANOS)


def join_ns(seconds, nanos):
    return seconds * NANOS + nanos


def generate_zero_bytes(nbr):
    return b'\x00' * nbr


def close_timestamp():
    return time.asctime(time.localtime())


def format_time(ms):
    if abs(ms) > 60000:
        return "%7.1fmin" % float(ms / 60000)
    if abs(ms) > 10000:
        return "%7.1fsec" % float(ms / 1000)
    if abs(ms) > 1000:
        return "%7.2fsec" % float(ms / 1000)
    if abs(ms) > 1:
        return "%8.2fms" % ms
    return "%8dus" % int(ms * 1000)

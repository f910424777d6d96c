#!/usr/bin/env python3

from udpprobe.config import SenderConfig, ResponderConfig, ConfigurationError
from udpprobe.constants import (DSCP_MAP, INTERVAL_DEFAULT, COUNT_DEFAULT, TIMEOUT_DEFAULT,
                                TOS_DEFAULT, TOS_MAX, PAYLOAD_DEFAULT, PORT_DEFAULT, POLL_INTERVAL)
from udpprobe.records import RecordLog
from udpprobe.sessionresponder import SessionResponder
from udpprobe.sessionsender import SessionSender
from udpprobe.utils import parse_addr

import click
import click_log
import signal
import time

from logging.handlers import TimedRotatingFileHandler


import logging
logger = logging.getLogger("udpprobe")
click_logger = click_log.basic_config(logger)


class AliasedGroup(click.Group):

    def get_command(self, ctx, cmd_name):
        rv = click.Group.get_command(self, ctx, cmd_name)
        if rv is not None:
            return rv
        matches = [x for x in self.list_commands(ctx)
                   if x.startswith(cmd_name)]
        if not matches:
            return None
        elif len(matches) == 1:
            return click.Group.get_command(self, ctx, matches[0])
        ctx.fail('Please be more specific \n%s' % '\n'.join(sorted(matches)))


def run_until_done(session):
    signal.signal(signal.SIGINT, session.stop)
    session.start()
    while session.is_alive():
        time.sleep(POLL_INTERVAL)


@click.group(cls=AliasedGroup)
@click_log.simple_verbosity_option(logger)
@click.option("-q", "--quiet", "quiet", is_flag=True)
@click.option("--logfile", "logfile", type=click.Path())
def cli(quiet, logfile):
    """Measure round-trip latency and packet loss with a minimal UDP
       probe protocol."""

    loglevel = logger.level
    if quiet:
        logger.setLevel(logging.CRITICAL + 1)

    if logfile:
        file_handler = TimedRotatingFileHandler(
            filename=logfile, when='midnight', backupCount=31)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        file_handler.setLevel(loglevel)
        click_logger.addHandler(file_handler)


@cli.command('sender')
@click.option('-s', '--server', metavar='<server address>', help='server address, ip[:port]')
@click.option('-p', '--port', metavar='<port number>', type=int, help='port number')
@click.option('-i', '--interval', metavar='ns', default=INTERVAL_DEFAULT, type=click.IntRange(0), help='time interval between packets (ns)')
@click.option('-n', '--count', metavar='packets', default=COUNT_DEFAULT, type=click.IntRange(0), help='number of packets (0: unbounded)')
@click.option('-w', '--timeout', metavar='ms', default=TIMEOUT_DEFAULT, type=click.IntRange(0), help='receive timeout (0: wait forever)')
@click.option('-t', '--tos', metavar='<ToS code>', default=TOS_DEFAULT, type=click.IntRange(0, TOS_MAX), help='ToS code (decimal)')
@click.option('--dscp', metavar='<dscp-value>', type=click.Choice(sorted(DSCP_MAP.keys())), help='DSCP name, overrides --tos')
@click.option('-P', '--payload', metavar='bytes', default=PAYLOAD_DEFAULT, type=click.IntRange(0), help='payload size')
@click.option('-f', '--file', 'record_file', metavar='<file name>', type=click.Path(dir_okay=False, writable=True), help='record file (default: stdout)')
@click.option('-m', '--multicast', is_flag=True, help='enable multicast')
@click.option('-b', '--broadcast', is_flag=True, help='enable broadcast')
@click.option('-l', '--loopback', is_flag=True, help='enable multicast loopback')
@click.option('-r', '--record-sys-clock', is_flag=True, help='record system clock (default: time difference)')
@click.option('-S', '--send-only', is_flag=True, help='send only, do not wait for replies')
def sender(server, port, interval, count, timeout, tos, dscp, payload, record_file,
           multicast, broadcast, loopback, record_sys_clock, send_only):
    """Send probes to a responder and record latency and loss."""

    if server:
        server, port, _ = parse_addr(server, port)
    if dscp:
        tos = DSCP_MAP[dscp]

    config = SenderConfig(server, port, interval, count, timeout, payload, tos,
                          multicast, broadcast, loopback, record_sys_clock, send_only)
    try:
        config.validate()
    except ConfigurationError as e:
        raise click.UsageError(str(e))

    records = RecordLog(record_file)
    try:
        session = SessionSender.from_config(config, records)
    except OSError as e:
        records.close()
        logger.error("Error initializing UDP socket: %s", e)
        raise click.ClickException(str(e))
    run_until_done(session)

    if not send_only:
        session.stats.dump()


@cli.command('responder')
@click.option('-p', '--port', metavar='<port number>', default=PORT_DEFAULT, type=int, help='port number')
@click.option('-a', '--address', 'bind_address', metavar='<local address>', default='', help='local address to bind')
@click.option('-m', '--multicast', 'multicast_group', metavar='<multicast address>', help='join multicast group')
@click.option('-l', '--loopback', is_flag=True, help='enable multicast loopback')
@click.option('--echo/--no-echo', default=True, help='echo probes back to the sender')
def responder(port, bind_address, multicast_group, loopback, echo):
    """Validate incoming probes and echo them back."""

    config = ResponderConfig(port, bind_address, multicast_group, loopback, echo)
    try:
        config.validate()
    except ConfigurationError as e:
        raise click.UsageError(str(e))

    try:
        session = SessionResponder.from_config(config)
    except OSError as e:
        logger.error("Error initializing UDP socket: %s", e)
        raise click.ClickException(str(e))
    run_until_done(session)


if __name__ == "__main__":
    cli()

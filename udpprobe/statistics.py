from collections import namedtuple

import click

from udpprobe.utils import format_time


class StatisticsClosedError(RuntimeError):
    pass


SessionSummary = namedtuple('SessionSummary', 'sent received missing loss_ratio closed_at')


def loss_ratio(missing, received):
    if received == 0:
        return 1.0 if missing else 0.0
    return float(missing) / received


def latency_record(sequence, latency_ns):
    """Time-difference record: sequence and latency in microseconds."""
    return "%d,%.3f" % (sequence, latency_ns / 1E3)


def clock_record(sequence, epoch_ns):
    """System-clock record: sequence and receive time in epoch nanoseconds."""
    return "%d,%d" % (sequence, epoch_ns)


def summary_lines(summary, send_only=False):
    lines = []
    if not send_only:
        lines.append("Received:    %d\tMissed:      %d\tPacket loss: %.3f%%" % (
            summary.received, summary.missing, 100 * summary.loss_ratio))
    lines.append(summary.closed_at)
    return lines


class SessionStatistics:

    def __init__(self):
        self.sent = 0
        self.received = 0
        self.missing = 0
        self.count = 0
        self.summary = None

    @property
    def closed(self):
        return self.summary is not None

    @property
    def loss_ratio(self):
        return loss_ratio(self.missing, self.received)

    def _check_open(self):
        if self.closed:
            raise StatisticsClosedError("session statistics already finalized")

    def add_sent(self):
        self._check_open()
        self.sent += 1

    def add_reply(self, matched, delayRT=None):
        """Account for one valid reply; delayRT is the round-trip in ms."""
        self._check_open()
        self.received += 1
        if not matched:
            self.missing += 1
        if delayRT is not None:
            self.add_delay(delayRT)

    def add_missing(self):
        self._check_open()
        self.missing += 1

    def add_delay(self, delayRT):
        if self.count == 0:
            self.minRT = delayRT
            self.maxRT = delayRT
            self.sumRT = delayRT
            self.jitterRT = 0
        else:
            self.minRT = min(self.minRT, delayRT)
            self.maxRT = max(self.maxRT, delayRT)
            self.sumRT += delayRT

            if self.count == 1:
                self.jitterRT = abs(self.lastRT - delayRT)
            else:
                self.jitterRT = self.jitterRT + \
                    (abs(self.lastRT - delayRT) - self.jitterRT) / 16

        self.lastRT = delayRT
        self.count += 1

    def finalize(self, closed_at):
        self._check_open()
        self.summary = SessionSummary(
            self.sent, self.received, self.missing, self.loss_ratio, closed_at)
        return self.summary

    def dump(self):
        click.echo(
            "===============================================================================")
        click.echo(
            "Direction         Min         Max         Avg          Jitter     Loss")
        click.echo(
            "-------------------------------------------------------------------------------")
        if self.count > 0:
            click.echo("  Roundtrip:   %s  %s  %s  %s    %5.1f%%" % (
                format_time(self.minRT),
                format_time(self.maxRT),
                format_time(self.sumRT / self.count),
                format_time(self.jitterRT),
                100 * self.loss_ratio))
        else:
            click.echo("  NO STATS AVAILABLE (100% loss)", err=True)
        click.echo(
            "-------------------------------------------------------------------------------")
        click.echo(
            "  Sent: %d   Received: %d   Missing: %d      Jitter Algorithm [RFC1889]" % (
                self.sent, self.received, self.missing))
        click.echo(
            "===============================================================================")

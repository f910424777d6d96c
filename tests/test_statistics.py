import pytest

from udpprobe.statistics import (SessionStatistics, StatisticsClosedError, loss_ratio,
                                 latency_record, clock_record, summary_lines)


@pytest.fixture
def stats():
    return SessionStatistics()


def test_starts_at_zero(stats):
    assert (stats.sent, stats.received, stats.missing) == (0, 0, 0)
    assert stats.loss_ratio == 0.0


def test_matched_reply_leaves_missing_unchanged(stats):
    stats.add_sent()
    stats.add_reply(True, 0.25)

    assert stats.received == 1
    assert stats.missing == 0


def test_mismatches_count_as_received_and_missing(stats):
    for _ in range(4):
        stats.add_sent()
        stats.add_reply(False)

    assert stats.received == 4
    assert stats.missing == 4
    assert stats.loss_ratio == 1.0


def test_loss_ratio():
    assert loss_ratio(1, 4) == 0.25
    assert loss_ratio(0, 0) == 0.0
    assert loss_ratio(1, 0) == 1.0


def test_rtt_min_max_avg_jitter(stats):
    for delay in (1.0, 3.0, 2.0):
        stats.add_reply(True, delay)

    assert stats.minRT == 1.0
    assert stats.maxRT == 3.0
    assert stats.sumRT / stats.count == 2.0
    # 2.0 after the second sample, then 2.0 + (abs(3.0 - 2.0) - 2.0) / 16
    assert stats.jitterRT == pytest.approx(1.9375)


def test_finalize_once(stats):
    stats.add_reply(True)
    summary = stats.finalize("Sat Oct 17 12:00:00 2026")

    assert summary.received == 1
    assert summary.closed_at == "Sat Oct 17 12:00:00 2026"
    assert stats.closed
    with pytest.raises(StatisticsClosedError):
        stats.finalize("again")
    with pytest.raises(StatisticsClosedError):
        stats.add_reply(True)


def test_record_formats():
    assert latency_record(3, 250500) == "3,250.500"
    assert clock_record(4, 1760000000123456789) == "4,1760000000123456789"


def test_summary_lines(stats):
    for matched in (True, True, True, False):
        stats.add_reply(matched)
    summary = stats.finalize("Sat Oct 17 12:00:00 2026")

    assert summary_lines(summary) == [
        "Received:    4\tMissed:      1\tPacket loss: 25.000%",
        "Sat Oct 17 12:00:00 2026",
    ]
    assert summary_lines(summary, send_only=True) == ["Sat Oct 17 12:00:00 2026"]


def test_dump_without_replies(stats, capsys):
    stats.dump()

    captured = capsys.readouterr()
    assert "NO STATS AVAILABLE" in captured.err


def test_dump_table(stats, capsys):
    stats.add_sent()
    stats.add_reply(True, 0.5)
    stats.dump()

    out = capsys.readouterr().out
    assert "Roundtrip:" in out
    assert "Sent: 1   Received: 1   Missing: 0" in out

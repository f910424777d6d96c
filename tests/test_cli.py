import signal

import pytest
from click.testing import CliRunner

import cli as cli_module
from cli import cli
from udpprobe.records import RecordLog
from udpprobe.sessionresponder import SessionResponder
from udpprobe.transport import udpTransport


@pytest.fixture(autouse=True)
def restore_sigint():
    handler = signal.getsignal(signal.SIGINT)
    yield
    signal.signal(signal.SIGINT, handler)


@pytest.fixture
def responder():
    responder = SessionResponder(udpTransport('127.0.0.1', 0))
    responder.start()
    yield responder
    responder.stop()


@pytest.fixture
def runner():
    return CliRunner()


def test_sender_requires_server(runner):
    result = runner.invoke(cli, ['sender', '-p', '20001'])

    assert result.exit_code != 0
    assert "server address is required" in result.output


def test_sender_rejects_bad_port(runner):
    result = runner.invoke(cli, ['sender', '-s', '127.0.0.1', '-p', '70000'])

    assert result.exit_code == 2
    assert "Usage:" in result.output


def test_sender_rejects_tos_out_of_range(runner):
    result = runner.invoke(cli, ['sender', '-s', '127.0.0.1', '-p', '20001', '-t', '64'])

    assert result.exit_code == 2


def test_command_prefix(runner):
    result = runner.invoke(cli, ['send', '--help'])

    assert result.exit_code == 0
    assert "--send-only" in result.output


def test_sender_against_responder(runner, responder):
    result = runner.invoke(cli, ['-q', 'sender', '-s', '127.0.0.1', '-p', str(responder.transport.port),
                                 '-n', '3', '-i', '1000000', '-w', '1000', '-P', '0'])

    assert result.exit_code == 0, result.output
    assert "Packet loss: 0.000%" in result.output
    assert "Roundtrip:" in result.output
    assert responder.received == 3


def test_sender_writes_record_file(runner, responder, tmp_path):
    path = tmp_path / "records.csv"
    result = runner.invoke(cli, ['-q', 'sender', '-s', '127.0.0.1:%d' % responder.transport.port,
                                 '-n', '2', '-i', '1000000', '-w', '1000', '--dscp', 'af11',
                                 '-f', str(path)])

    assert result.exit_code == 0, result.output
    lines = path.read_text().splitlines()
    assert [line.split(',')[0] for line in lines[:2]] == ['0', '1']
    assert lines[2] == "Received:    2\tMissed:      0\tPacket loss: 0.000%"
    assert len(lines) == 4


def test_sender_setup_failure_is_reported(runner, tmp_path, monkeypatch):
    opened = []

    class TrackingRecordLog(RecordLog):

        def __init__(self, path=None):
            RecordLog.__init__(self, path)
            opened.append(self)

    monkeypatch.setattr(cli_module, 'RecordLog', TrackingRecordLog)
    path = tmp_path / "records.csv"
    result = runner.invoke(cli, ['-q', 'sender', '-s', '127.0.0.1', '-p', '20001', '-m', '-f', str(path)])

    assert result.exit_code == 1
    assert not isinstance(result.exception, OSError)
    assert "Error:" in result.output
    assert opened and all(log.closed for log in opened)


def test_responder_bind_failure_is_reported(runner):
    result = runner.invoke(cli, ['-q', 'responder', '-a', '192.0.2.1', '-p', '20001'])

    assert result.exit_code == 1
    assert not isinstance(result.exception, OSError)
    assert "Error:" in result.output

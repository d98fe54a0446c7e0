import io
import signal

import pytest

from ntrip_relay.agent import main
from ntrip_relay.config import RelayConfig
from ntrip_relay.models import ConnectionStatus, IoStatus, MountPoint, SourceTableResult
from ntrip_relay.poller import Ticker


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "ADDRESS", "PORT", "MOUNT", "USER", "PASSWORD",
        "LATITUDE", "LONGITUDE", "ELEVATION", "REPORT_INTERVAL_TICKS",
    ):
        monkeypatch.delenv(f"NTRIP_RELAY_{name}", raising=False)
    monkeypatch.setenv("NTRIP_RELAY_LOG_TO_FILE", "0")


class FakeClient:
    def __init__(self, config, *, table=None, status=ConnectionStatus.OK, chunks=(),
                 interrupt=False):
        self.config = config
        self.interrupt = interrupt
        self.table = table
        self.status = status
        self.chunks = list(chunks)
        self.ticker = Ticker(0, sleep=lambda _: None)
        self.logins = []
        self.discovery = []
        self.closed = False

    def get_mount_points(self, address, port, username="", password=""):
        self.discovery.append((address, port, username, password))
        if self.table is None:
            return SourceTableResult.failure()
        return SourceTableResult.success(self.table)

    def connect(self, login):
        self.logins.append(login)
        if self.interrupt:
            raise KeyboardInterrupt
        return self.status

    def check_position_report(self):
        return IoStatus.SUCCESS

    def send_position_report(self, location, timestamp):
        return IoStatus.SUCCESS

    def available(self):
        if not self.chunks:
            return -1
        return len(self.chunks[0])

    def receive(self, size):
        return self.chunks.pop(0)

    def close(self):
        self.closed = True


def _factory(created, **kwargs):
    def build(config):
        client = FakeClient(config, **kwargs)
        created.append(client)
        return client

    return build


STREAM_ARGS = [
    "-a", "rtk.example.com", "-p", "2101", "-m", "CMR",
    "-u", "myname", "-pw", "myword", "-la", "30", "-lo", "-50",
]


def test_no_arguments_prints_usage(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().err


def test_streaming_needs_credentials_and_location(capsys):
    created = []

    assert main(["-a", "rtk.example.com", "-p", "2101", "-m", "CMR"],
                client_factory=_factory(created)) == 1
    assert created[0].logins == []
    assert "usage" in capsys.readouterr().err


def test_discovery_prints_one_name_per_line():
    created = []
    table = [MountPoint(raw="STR;CMR;", name="CMR"), MountPoint(raw="STR;RTCM3;", name="RTCM3")]
    out = io.StringIO()

    code = main(["-a", "rtk.example.com", "-p", "2101", "-g", "y"],
                stdout=out, client_factory=_factory(created, table=table))

    assert code == 0
    assert out.getvalue() == "CMR\nRTCM3\n"
    assert created[0].discovery == [("rtk.example.com", 2101, "", "")]


def test_discovery_failure_exits_non_zero(capsys):
    code = main(["--address", "rtk.example.com", "--port", "2101", "--get", "yes"],
                client_factory=_factory([]))

    assert code == 1
    assert "error retrieving mount points" in capsys.readouterr().err


def test_invalid_get_value_prints_usage(capsys):
    assert main(["-a", "rtk.example.com", "-g", "maybe"], client_factory=_factory([])) == 1
    assert "usage" in capsys.readouterr().err


def test_authentication_failure(capsys):
    created = []

    code = main(STREAM_ARGS, client_factory=_factory(created, status=ConnectionStatus.AUTH_FAILURE))

    assert code == 1
    assert "authentication failure" in capsys.readouterr().err
    login = created[0].logins[0]
    assert login.mountpoint == "CMR"
    assert login.location.latitude == 30.0
    assert login.location.longitude == -50.0
    assert created[0].closed


def test_connection_error(capsys):
    code = main(STREAM_ARGS, client_factory=_factory([], status=ConnectionStatus.ERROR))

    assert code == 1
    assert "connection error" in capsys.readouterr().err


def test_interrupted_handshake_still_closes_the_client():
    created = []
    before = signal.getsignal(signal.SIGINT)

    with pytest.raises(KeyboardInterrupt):
        main(STREAM_ARGS, client_factory=_factory(created, interrupt=True))

    assert created[0].closed
    assert signal.getsignal(signal.SIGINT) == before


def test_streaming_writes_corrections_until_the_channel_fails():
    created = []
    sink = io.BytesIO()

    code = main(STREAM_ARGS, sink=sink,
                client_factory=_factory(created, chunks=[b"\xd3\x00\x01", b"\x02\x03"]))

    assert code == 1
    assert sink.getvalue() == b"\xd3\x00\x01\x02\x03"
    assert created[0].closed


def test_environment_supplies_defaults(monkeypatch):
    created = []
    monkeypatch.setenv("NTRIP_RELAY_ADDRESS", "env.example.com")
    monkeypatch.setenv("NTRIP_RELAY_PORT", "2102")

    main(["-g", "yes"], stdout=io.StringIO(), client_factory=_factory(created, table=[]))

    assert created[0].discovery == [("env.example.com", 2102, "", "")]


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("NTRIP_RELAY_LATITUDE", "50.45")
    monkeypatch.setenv("NTRIP_RELAY_REPORT_INTERVAL_TICKS", "20")
    monkeypatch.setenv("NTRIP_RELAY_LOG_LEVEL", "debug")

    config = RelayConfig.from_env()

    assert config.latitude == 50.45
    assert config.longitude is None
    assert config.report_interval_ticks == 20
    assert config.log_level == "DEBUG"
    assert config.log_to_file is False
    assert config.handshake_polls == 50

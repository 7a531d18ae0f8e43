from __future__ import annotations

from functools import partial
from typing import Any, List

import httpx
import pytest
from typer.testing import CliRunner

from comment_sync import main
from comment_sync.config import Settings
from comment_sync.errors import (
    ConfigurationError,
    DatabaseConnectionError,
    HttpStatusError,
    LoadError,
)
from comment_sync.infrastructure.db_factory import connect
from comment_sync.orchestrator import run_sync
from comment_sync.policies.fixed_count import FixedCountPolicy
from comment_sync.policies.open_ended import OpenEndedPolicy
from tests.fakes import FakeConnection, FakeUpstream

BASE_URL = "https://api.test"

runner = CliRunner()


class _FailsAfterFirstCommit(FakeConnection):
    """Connection whose second batch insert fails, e.g. on a duplicate key."""

    def cursor(self):
        self.fail_on_execute = self.commits >= 1
        return super().cursor()


class _ClientTracker:
    """client_factory that remembers the clients it hands out."""

    def __init__(self, upstream: FakeUpstream) -> None:
        self.upstream = upstream
        self.clients: List[httpx.Client] = []

    def __call__(self) -> httpx.Client:
        client = self.upstream.client()
        self.clients.append(client)
        return client


def _run(conn: FakeConnection, upstream: FakeUpstream, policy: Any, unit_settings):
    tracker = _ClientTracker(upstream)
    kwargs = dict(
        settings=unit_settings,
        base_url=BASE_URL,
        policy=policy,
        client_factory=tracker,
        connection_factory=partial(connect, connect_fn=lambda dsn: conn),
    )
    return tracker, kwargs


def test_run_sync_loads_everything_and_closes_resources(unit_settings) -> None:
    conn = FakeConnection()
    upstream = FakeUpstream(total=120)
    tracker, kwargs = _run(conn, upstream, OpenEndedPolicy(delay_seconds=0), unit_settings)

    result = run_sync(**kwargs)

    assert result["policy"] == "open_ended"
    assert result["records"] == 120
    assert len(conn.rows) == 120
    assert conn.transactions == 3
    assert conn.autocommit is True
    assert conn.closed is True
    assert all(client.is_closed for client in tracker.clients)
    assert result["duration_seconds"] >= 0
    assert "throughput_records_per_sec" in result


def test_http_failure_closes_connection_and_client(unit_settings) -> None:
    conn = FakeConnection()
    upstream = FakeUpstream(total=10, status_code=503)
    tracker, kwargs = _run(conn, upstream, OpenEndedPolicy(delay_seconds=0), unit_settings)

    with pytest.raises(HttpStatusError):
        run_sync(**kwargs)

    assert conn.transactions == 0
    assert conn.closed is True
    assert len(tracker.clients) == 1
    assert tracker.clients[0].is_closed


def test_load_failure_keeps_earlier_batches_and_closes_resources(unit_settings) -> None:
    conn = _FailsAfterFirstCommit()
    upstream = FakeUpstream(total=150)
    tracker, kwargs = _run(conn, upstream, OpenEndedPolicy(delay_seconds=0), unit_settings)

    with pytest.raises(LoadError) as excinfo:
        run_sync(**kwargs)

    assert excinfo.value.context["offset"] == 50
    assert conn.commits == 1
    assert conn.rollbacks == 1
    assert len(conn.rows) == 50
    assert conn.closed is True
    assert tracker.clients[0].is_closed


def test_ping_failure_aborts_before_fetching(unit_settings) -> None:
    conn = FakeConnection(fail_on_ping=True)
    upstream = FakeUpstream(total=10)
    tracker, kwargs = _run(conn, upstream, OpenEndedPolicy(delay_seconds=0), unit_settings)

    with pytest.raises(DatabaseConnectionError):
        run_sync(**kwargs)

    assert conn.closed is True
    assert tracker.clients == []
    assert upstream.requests == []


def test_fixed_count_run_through_orchestrator(unit_settings) -> None:
    conn = FakeConnection()
    upstream = FakeUpstream(total=250)
    _, kwargs = _run(conn, upstream, FixedCountPolicy(), unit_settings)

    result = run_sync(**kwargs)

    assert upstream.offsets == [0, 100, 200, 300, 400]
    assert result["records"] == 250
    assert conn.transactions == 3


def test_run_sync_rejects_unknown_policy(unit_settings) -> None:
    with pytest.raises(ValueError, match="Unknown policy"):
        run_sync("cursor_magic", settings=unit_settings)


def test_cli_exits_non_zero_on_sync_error(monkeypatch) -> None:
    def failing_run_sync(policy, settings):
        raise HttpStatusError("Unexpected status code: 500", context={"offset": 50})

    monkeypatch.setattr(main, "run_sync", failing_run_sync)

    result = runner.invoke(main.app, ["run", "--policy", "open_ended"])

    assert result.exit_code == 1


def test_cli_success_prints_summary(monkeypatch) -> None:
    calls: List[str] = []

    def fake_run_sync(policy, settings):
        calls.append(policy)
        return {
            "policy": policy,
            "pages": 2,
            "records": 20,
            "batches": [{"offset": 0, "records": 20}],
            "stopped_on_empty": True,
            "duration_seconds": 0.5,
            "throughput_records_per_sec": 40.0,
            "peak_rss_bytes": 1024,
        }

    monkeypatch.setattr(main, "run_sync", fake_run_sync)

    result = runner.invoke(main.app, ["run"])

    assert result.exit_code == 0
    assert calls == ["open_ended"]
    assert "Comment Sync Results" in result.output


def test_cli_rejects_unknown_policy() -> None:
    result = runner.invoke(main.app, ["run", "--policy", "nope"])
    assert result.exit_code == 2


def test_cli_lists_policies() -> None:
    result = runner.invoke(main.app, ["policies"])
    assert result.exit_code == 0
    assert "fixed_count" in result.output
    assert "open_ended" in result.output


def test_cli_corrupt_body_exits_through_sync_error_handler(monkeypatch, unit_settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip at all")

    conn = FakeConnection()

    def gzip_run_sync(policy, settings):
        return run_sync(
            policy,
            settings=settings,
            base_url=BASE_URL,
            client_factory=lambda: httpx.Client(transport=httpx.MockTransport(handler)),
            connection_factory=partial(connect, connect_fn=lambda dsn: conn),
        )

    monkeypatch.setattr(main, "load_settings", lambda: unit_settings)
    monkeypatch.setattr(main, "run_sync", gzip_run_sync)

    result = runner.invoke(main.app, ["run"])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert conn.transactions == 0
    assert conn.closed is True


def test_cli_info_masks_password(monkeypatch) -> None:
    settings = Settings(
        _env_file=None,
        pg_port="5432",
        pg_database_name="comments_db",
        pg_user="etl",
        pg_password="hunter2",
    )
    monkeypatch.setattr(main, "get_settings", lambda: settings)

    result = runner.invoke(main.app, ["info"])

    assert result.exit_code == 0
    assert "DB=etl@localhost:5432/comments_db" in result.output
    assert "password=***" in result.output
    assert "hunter2" not in result.output


def test_cli_info_reports_unset_password(monkeypatch) -> None:
    settings = Settings(_env_file=None, pg_user="etl", pg_password="")
    monkeypatch.setattr(main, "get_settings", lambda: settings)

    result = runner.invoke(main.app, ["info"])

    assert result.exit_code == 0
    assert "password=(unset)" in result.output


def test_cli_info_exits_non_zero_when_settings_fail(monkeypatch) -> None:
    def broken_settings():
        raise ConfigurationError("Error loading environment")

    monkeypatch.setattr(main, "get_settings", broken_settings)

    result = runner.invoke(main.app, ["info"])

    assert result.exit_code == 1
    assert "Error loading environment" in result.output
    assert "DB=" not in result.output

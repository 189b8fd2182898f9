# tests/test_notifiers.py

from __future__ import annotations

import asyncio
import json
import logging
import smtplib
import socket
import threading

import aiohttp
import httpx
import pytest
from nio import RoomSendError, RoomSendResponse

from task_tracker.notifiers import email_notifier, matrix_client
from task_tracker.notifiers.console_notifier import ConsoleNotifier
from task_tracker.notifiers.email_notifier import EmailNotifier
from task_tracker.notifiers.fanout import FanoutNotifier
from task_tracker.notifiers.matrix_notifier import MatrixNotifier
from task_tracker.notifiers.webhook_notifier import SlackNotifier, SmsNotifier

from .fakes import ExplodingNotifier, FakeMatrixClient, FakeSMTP, RecordingNotifier
from .helpers import make_task


def _recording_client(status_code: int = 200) -> tuple[httpx.Client, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status_code)

    return httpx.Client(transport=httpx.MockTransport(handler)), seen


def test_console_notifier_prints_one_line_per_event(capsys) -> None:
    n = ConsoleNotifier()
    t = make_task("1", title="Write docs")

    n.notify_task_created(t)
    n.notify_task_completed(t)
    n.notify_task_due(t)

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 3
    assert 'Task "Write docs" has been created' in lines[0]
    assert 'Task "Write docs" is complete!' in lines[1]
    assert 'Task "Write docs" is due soon' in lines[2]


def test_slack_notifier_posts_text() -> None:
    client, seen = _recording_client()
    n = SlackNotifier("https://hooks.example.test/T1", client=client)

    n.notify_task_completed(make_task("1", title="Ship"))

    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert str(seen[0].url) == "https://hooks.example.test/T1"
    body = json.loads(seen[0].content)
    assert ":tada:" in body["text"]
    assert 'Task "Ship" is complete!' in body["text"]


def test_webhook_failure_is_logged_not_raised(caplog) -> None:
    client, seen = _recording_client(status_code=500)
    n = SlackNotifier("https://hooks.example.test/T1", client=client)

    with caplog.at_level(logging.ERROR):
        n.notify_task_created(make_task("1"))

    assert len(seen) == 1
    assert "slack delivery failed" in caplog.text


def test_sms_notifier_payload_is_truncated() -> None:
    client, seen = _recording_client()
    n = SmsNotifier("https://sms.example.test/send", to="+15550100", client=client)

    n.notify_task_due(make_task("1", title="x" * 300))

    body = json.loads(seen[0].content)
    assert body["to"] == "+15550100"
    assert len(body["message"]) == SmsNotifier.MAX_LEN
    assert body["message"].endswith("…")


def test_webhook_notifiers_require_configuration() -> None:
    with pytest.raises(ValueError):
        SlackNotifier("")
    with pytest.raises(ValueError):
        SmsNotifier("https://sms.example.test/send", to="")


def test_email_notifier_sends_one_message_per_event(monkeypatch) -> None:
    FakeSMTP.instances = []
    monkeypatch.setattr(email_notifier.smtplib, "SMTP", FakeSMTP)

    n = EmailNotifier(
        host="smtp.example.test",
        port=587,
        sender="tracker@example.test",
        recipients=["a@example.test", "b@example.test"],
        username="bot",
        password="secret",
        starttls=True,
    )
    t = make_task("1", title="Ship", description="release notes")
    n.notify_task_created(t)
    n.notify_task_completed(t)

    assert len(FakeSMTP.instances) == 2
    first = FakeSMTP.instances[0]
    assert (first.host, first.port) == ("smtp.example.test", 587)
    assert first.started_tls is True
    assert first.login_args == ("bot", "secret")

    created = first.sent[0]
    assert created["Subject"] == "[tasks] New task: Ship"
    assert created["To"] == "a@example.test, b@example.test"
    assert "has been created" in created.get_content()
    assert "release notes" in created.get_content()

    completed = FakeSMTP.instances[1].sent[0]
    assert completed["Subject"] == "[tasks] Completed: Ship"


def test_email_failure_is_logged(monkeypatch, caplog) -> None:
    class RefusingSMTP(FakeSMTP):
        def send_message(self, msg) -> None:
            raise smtplib.SMTPRecipientsRefused({})

    monkeypatch.setattr(email_notifier.smtplib, "SMTP", RefusingSMTP)
    n = EmailNotifier(host="h", sender="s@example.test", recipients=["r@example.test"])

    with caplog.at_level(logging.ERROR):
        n.notify_task_due(make_task("1"))

    assert "Email delivery failed" in caplog.text


def test_email_notifier_requires_recipients() -> None:
    with pytest.raises(ValueError):
        EmailNotifier(host="h", sender="s@example.test", recipients=[])


def test_matrix_notifier_sends_to_room(monkeypatch, settings) -> None:
    fake = FakeMatrixClient(RoomSendResponse(event_id="$ev", room_id="!room:example.test"))

    async def fake_create(_settings):
        return fake

    monkeypatch.setattr(matrix_client, "create_matrix_client", fake_create)

    n = MatrixNotifier(settings, room_id="!room:example.test")
    n.notify_task_created(make_task("1", title="Ship"))

    assert fake.closed is True
    assert fake.sent == [
        {
            "room_id": "!room:example.test",
            "message_type": "m.room.message",
            "content": {"msgtype": "m.text", "body": 'Task "Ship" has been created'},
        }
    ]


def test_matrix_notifier_logs_send_errors(monkeypatch, settings, caplog) -> None:
    fake = FakeMatrixClient(RoomSendError("forbidden"))

    async def fake_create(_settings):
        return fake

    monkeypatch.setattr(matrix_client, "create_matrix_client", fake_create)

    with caplog.at_level(logging.ERROR):
        MatrixNotifier(settings, room_id="!room:example.test").notify_task_due(make_task("1"))

    assert "room_send failed" in caplog.text
    assert fake.closed is True


def test_matrix_notifier_without_configuration_sends_nothing(settings, caplog) -> None:
    with caplog.at_level(logging.ERROR):
        MatrixNotifier(settings, room_id="!room:example.test").notify_task_created(make_task("1"))
    assert "Matrix is not configured" in caplog.text


def test_matrix_client_config_does_not_retry(settings) -> None:
    cfg = matrix_client.client_config(settings)
    assert cfg.max_timeouts == 0
    assert cfg.max_limit_exceeded == 0
    assert cfg.request_timeout == settings.http_timeout
    assert cfg.encryption_enabled is False


def test_matrix_notifier_unreachable_homeserver_returns_and_logs(settings, caplog) -> None:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
    settings.matrix_homeserver = f"http://127.0.0.1:{port}"
    settings.matrix_user_id = "@bot:example.test"
    settings.matrix_password = "secret"

    n = MatrixNotifier(settings, room_id="!room:example.test")
    worker = threading.Thread(target=n.notify_task_created, args=(make_task("1"),), daemon=True)

    with caplog.at_level(logging.ERROR):
        worker.start()
        worker.join(timeout=20)

    assert not worker.is_alive()
    assert "Matrix delivery failed" in caplog.text
    assert not (settings.matrix_store_path / "session.json").exists()


def test_matrix_notifier_logs_client_errors(monkeypatch, settings, caplog) -> None:
    async def broken_create(_settings):
        raise aiohttp.InvalidURL("not a url")

    monkeypatch.setattr(matrix_client, "create_matrix_client", broken_create)

    with caplog.at_level(logging.ERROR):
        MatrixNotifier(settings, room_id="!room:example.test").notify_task_completed(make_task("1"))

    assert "Matrix delivery failed" in caplog.text


def test_matrix_client_restores_saved_session(settings) -> None:
    settings.matrix_homeserver = "https://matrix.example.test"
    settings.matrix_user_id = "@bot:example.test"
    settings.matrix_store_path.mkdir(parents=True)
    (settings.matrix_store_path / "session.json").write_text(
        json.dumps({"access_token": "tok", "user_id": "@bot:example.test", "device_id": "DEV"}), "utf-8"
    )

    async def open_and_close():
        client = await matrix_client.create_matrix_client(settings)
        assert client is not None
        await client.close()
        return client

    client = asyncio.run(open_and_close())
    assert (client.access_token, client.device_id) == ("tok", "DEV")


def test_matrix_notifier_requires_room(settings) -> None:
    with pytest.raises(ValueError):
        MatrixNotifier(settings)


def test_fanout_isolates_failing_channels(caplog) -> None:
    a, b = RecordingNotifier(), RecordingNotifier()
    fan = FanoutNotifier([a, ExplodingNotifier(), b])
    t = make_task("9")

    with caplog.at_level(logging.ERROR):
        fan.notify_task_created(t)
        fan.notify_task_completed(t)
        fan.notify_task_due(t)

    expected = [("created", "9"), ("completed", "9"), ("due", "9")]
    assert a.events == expected
    assert b.events == expected
    assert caplog.text.count("ExplodingNotifier crashed") == 3

"""
Tests for the mail relay

The SMTP transport is replaced with a fake so no network is used.
"""

import smtplib
import socket

import pytest

from app.core.config import settings
from app.services import mail_service


class FakeSMTP:
    """Records what the mail service does with the connection"""

    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.started_tls = False
        self.logged_in = None
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def ehlo(self):
        return 250, b"ok"

    def has_extn(self, name):
        return name.lower() == "starttls"

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        self.logged_in = user

    def send_message(self, msg, from_addr=None, to_addrs=None):
        self.sent.append((msg, from_addr, to_addrs))
        return {}


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    monkeypatch.setattr(smtplib, "SMTP_SSL", FakeSMTP)
    return FakeSMTP


def test_send_email(client, fake_smtp):
    response = client.post(
        "/api/v1/mail",
        json={"to": "alice@mail.com", "subject": "Request update", "text": "Your request was completed."},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Email sent successfully"
    assert body["info"]["accepted"] == ["alice@mail.com"]
    assert body["info"]["rejected"] == []
    assert body["info"]["envelope"] == {"from": "desk@mail.com", "to": ["alice@mail.com"]}
    assert body["info"]["messageId"]

    connection = fake_smtp.instances[0]
    assert connection.host == "smtp.mail.com"
    assert connection.port == 587
    assert connection.started_tls is True
    msg, from_addr, to_addrs = connection.sent[0]
    assert msg["Subject"] == "Request update"
    assert from_addr == "desk@mail.com"
    assert to_addrs == ["alice@mail.com"]


def test_send_email_implicit_tls_and_login(client, fake_smtp, monkeypatch):
    monkeypatch.setattr(settings, "SMTP_PORT", 465)
    monkeypatch.setattr(settings, "SMTP_USER", "relay@mail.com")
    monkeypatch.setattr(settings, "SMTP_PASSWORD", "relay-pass")

    response = client.post(
        "/api/v1/mail",
        json={"to": "alice@mail.com", "subject": "Hi", "text": "Hello"},
    )

    assert response.status_code == 200
    connection = fake_smtp.instances[0]
    assert connection.port == 465
    assert connection.started_tls is False
    assert connection.logged_in == "relay@mail.com"


@pytest.mark.parametrize("payload", [
    {"subject": "Hi", "text": "Hello"},
    {"to": "alice@mail.com", "text": "Hello"},
    {"to": "alice@mail.com", "subject": "Hi"},
    {"to": "alice@mail.com", "subject": "   ", "text": "Hello"},
])
def test_send_email_missing_fields(client, fake_smtp, payload):
    response = client.post("/api/v1/mail", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing email, subject, or text"}
    assert fake_smtp.instances == []


@pytest.mark.parametrize("payload", [
    {"to": "alice@mail.com\r\nBcc: mallory@mail.com", "subject": "Hi", "text": "Hello"},
    {"to": "not-an-address", "subject": "Hi", "text": "Hello"},
    {"to": "alice@mail.com, bob@mail.com", "subject": "Hi", "text": "Hello"},
    {"to": "alice@mail.com", "subject": "Hi\nBcc: mallory@mail.com", "text": "Hello"},
])
def test_send_email_rejects_malformed_headers(client, fake_smtp, payload):
    response = client.post("/api/v1/mail", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid email address or subject"}
    assert fake_smtp.instances == []


def test_send_email_connection_refused(client, monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError(111, "Connection refused")

    monkeypatch.setattr(smtplib, "SMTP", refuse)

    response = client.post(
        "/api/v1/mail",
        json={"to": "alice@mail.com", "subject": "Hi", "text": "Hello"},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Error sending email"}


def test_send_email_auth_rejected(client, fake_smtp, monkeypatch):
    def reject(self, user, password):
        raise smtplib.SMTPAuthenticationError(535, b"Authentication failed")

    monkeypatch.setattr(FakeSMTP, "login", reject)
    monkeypatch.setattr(settings, "SMTP_USER", "relay@mail.com")

    response = client.post(
        "/api/v1/mail",
        json={"to": "alice@mail.com", "subject": "Hi", "text": "Hello"},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Error sending email"}


@pytest.mark.parametrize("stage", ["connect", "send"])
def test_send_email_timeout_is_not_retried(client, fake_smtp, monkeypatch, stage):
    attempts = []

    def time_out(*args, **kwargs):
        attempts.append(stage)
        raise socket.timeout("timed out")

    if stage == "connect":
        monkeypatch.setattr(smtplib, "SMTP", time_out)
    else:
        monkeypatch.setattr(FakeSMTP, "send_message", time_out)

    response = client.post(
        "/api/v1/mail",
        json={"to": "alice@mail.com", "subject": "Hi", "text": "Hello"},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Error sending email"}
    assert attempts == [stage]
    assert len(fake_smtp.instances) == (1 if stage == "send" else 0)


def test_send_mail_without_host(monkeypatch):
    monkeypatch.setattr(settings, "SMTP_HOST", "")

    with pytest.raises(mail_service.MailTransportError):
        mail_service.send_mail("alice@mail.com", "Hi", "Hello")


def test_build_message_uses_sender_domain():
    msg = mail_service.build_message("alice@mail.com", "Hi", "Hello")

    assert msg["From"] == "desk@mail.com"
    assert msg["To"] == "alice@mail.com"
    assert msg["Message-ID"].endswith("@mail.com>")
    assert msg.get_content().strip() == "Hello"

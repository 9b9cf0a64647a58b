import pytest
from pydantic import ValidationError

from innovatefund.config import Settings
from innovatefund.runtime import Runtime


def _settings(**values):
    return Settings(_env_file=None, secret_key="test-secret", **values)


def test_sendgrid_settings_must_be_paired():
    with pytest.raises(ValidationError):
        _settings(sendgrid_api_key="SG.fake")
    with pytest.raises(ValidationError):
        _settings(sendgrid_sender="sender@example.com")
    with pytest.raises(ValidationError):
        _settings(sendgrid_api_key="SG.fake", sendgrid_sender="not-an-email")

    settings = _settings(sendgrid_api_key="SG.fake", sendgrid_sender="sender@example.com")
    assert settings.sendgrid_sender == "sender@example.com"


def test_allowed_origins_are_split_and_trimmed():
    settings = _settings(frontend_url=" https://a.test , https://b.test ,")

    assert settings.allowed_origins == ["https://a.test", "https://b.test"]
    assert settings.primary_frontend_url == "https://a.test"


def test_delivery_timeouts_must_be_positive():
    with pytest.raises(ValidationError):
        _settings(delivery_timeout_seconds=0)
    with pytest.raises(ValidationError):
        _settings(persistence_timeout_seconds=-1)


def test_shutdown_grace_must_be_positive():
    assert _settings().shutdown_grace_seconds == 5.0
    with pytest.raises(ValidationError):
        _settings(shutdown_grace_seconds=0)


@pytest.mark.anyio
async def test_runtime_shutdown_uses_configured_grace(
    monkeypatch, push_sender, email_sender, transport
):
    runtime = Runtime(
        settings=_settings(shutdown_grace_seconds=0.25),
        push_sender=push_sender,
        email_sender=email_sender,
        transport=transport,
    )
    graces = []

    async def record_shutdown(grace_period):
        graces.append(grace_period)

    monkeypatch.setattr(runtime.dispatcher, "shutdown", record_shutdown)
    runtime.start()

    await runtime.shutdown()

    assert graces == [0.25]
    assert not runtime.registry.running

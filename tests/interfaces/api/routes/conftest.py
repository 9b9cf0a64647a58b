import pytest
from fastapi.testclient import TestClient

from innovatefund.infrastructure.security import create_access_token
from innovatefund.runtime import Runtime
from main import create_app


@pytest.fixture
def runtime(push_sender, email_sender, transport):
    return Runtime(push_sender=push_sender, email_sender=email_sender, transport=transport)


@pytest.fixture
def app(runtime):
    return create_app(runtime)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def drain(client, runtime):
    """Wait for background notification deliveries started by a request."""

    def _drain():
        client.portal.call(runtime.dispatcher.drain)

    return _drain


def auth_headers(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.user_type)}"}

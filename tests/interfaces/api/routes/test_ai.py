from innovatefund.infrastructure.openai_client import OpenAIServiceError
from innovatefund.interfaces.api.dependencies import get_assistant_service

from .conftest import auth_headers


class FakeAssistant:
    def __init__(self, *, fail=False):
        self.fail = fail
        self.transcripts = []

    def chat(self, messages):
        if self.fail:
            raise OpenAIServiceError("The request to OpenAI failed.")
        self.transcripts.append(list(messages))
        return "Focus on your go-to-market plan."

    def impact_score(self, idea):
        return "82 - strong environmental impact"


def test_assistant_unavailable_without_api_key(client, make_user):
    response = client.post(
        "/ai/chat", json={"prompt": "Hello"}, headers=auth_headers(make_user("Rita"))
    )

    assert response.status_code == 503


def test_assistant_requires_authentication(client):
    assert client.post("/ai/chat", json={"prompt": "Hello"}).status_code == 401


def test_chat_accepts_legacy_prompt(client, app, make_user):
    assistant = FakeAssistant()
    app.dependency_overrides[get_assistant_service] = lambda: assistant

    response = client.post(
        "/ai/chat", json={"message": "How do I pitch?"}, headers=auth_headers(make_user("Rita"))
    )

    assert response.json() == {"response": "Focus on your go-to-market plan."}
    assert assistant.transcripts == [[{"role": "user", "content": "How do I pitch?"}]]


def test_impact_score(client, app, make_user):
    app.dependency_overrides[get_assistant_service] = lambda: FakeAssistant()

    response = client.post(
        "/ai/impact-score", json={"idea": "Solar purifier"}, headers=auth_headers(make_user("Rita"))
    )

    assert response.json() == {"impactScore": "82 - strong environmental impact"}


def test_provider_errors_become_bad_gateway(client, app, make_user):
    app.dependency_overrides[get_assistant_service] = lambda: FakeAssistant(fail=True)

    response = client.post(
        "/ai/chat",
        json={"messages": [{"role": "user", "content": "Hi"}]},
        headers=auth_headers(make_user("Rita")),
    )

    assert response.status_code == 502

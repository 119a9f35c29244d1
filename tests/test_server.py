"""Tests for the FastAPI surface — routing, identity extraction and status codes."""

import pytest
from fastapi.testclient import TestClient

from axtarget.config import AxtarGetConfig
from axtarget.memory.prompt_assembler import PromptAssembler
from axtarget.pipeline import ChatPipeline
from axtarget.providers.base import ProviderError
from axtarget.server import create_app
from axtarget.tools.web_search import SearchAugmenter
from axtarget.utils.rate_limiter import FixedWindowRateLimiter


class StubLLM:
    name = "stub_llm"

    def __init__(self, reply: str = "Salam dostum! Necəsən?", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        if self.error is not None:
            raise self.error
        return self.reply

    async def is_available(self) -> bool:
        return True


class FailingSearch:
    name = "failing_search"

    async def lookup(self, query: str) -> str:
        raise ProviderError(self.name, "connection refused")

    async def is_available(self) -> bool:
        return False


def _pipeline(llm: StubLLM | None = None, api_key: str = "sk-test") -> ChatPipeline:
    config = AxtarGetConfig(_env_file=None, openai_api_key=api_key)
    return ChatPipeline(
        config=config,
        rate_limiter=FixedWindowRateLimiter(max_requests=15, window_seconds=60.0),
        augmenter=SearchAugmenter(FailingSearch()),
        assembler=PromptAssembler(),
        llm=llm or StubLLM(),
    )


@pytest.fixture
def pipeline():
    return _pipeline()


@pytest.fixture
def client(pipeline):
    return TestClient(create_app(pipeline))


class TestChatEndpoint:
    def test_success(self, client):
        response = client.post("/api/chat", json={"message": "salam bro", "history": []})
        assert response.status_code == 200
        assert response.json() == {"response": "Salam dostum! Necəsən?"}

    def test_empty_message(self, client):
        response = client.post("/api/chat", json={"message": ""})
        assert response.status_code == 400
        assert response.json() == {
            "error": "Mesaj tələb olunur və 1000 simvoldan az olmalıdır",
        }

    def test_invalid_json_body(self, client):
        response = client.post(
            "/api/chat", content=b"{not json", headers={"content-type": "application/json"},
        )
        assert response.status_code == 400

    def test_search_failure_still_answers(self, client):
        response = client.post("/api/chat", json={"message": "son xəbərlər nədir"})
        assert response.status_code == 200

    def test_upstream_failure(self):
        client = TestClient(create_app(_pipeline(StubLLM(error=ProviderError("stub_llm", "401")))))
        response = client.post("/api/chat", json={"message": "salam"})
        assert response.status_code == 500
        assert response.json() == {
            "error": "Üzr istəyirəm dostum, bir xəta baş verdi. Yenidən cəhd et!",
        }

    def test_misconfigured(self):
        client = TestClient(create_app(_pipeline(api_key="")))
        response = client.post("/api/chat", json={"message": "salam"})
        assert response.status_code == 500
        assert response.json() == {"error": "API açarı təyin edilməyib"}

    def test_get_not_allowed(self, client):
        response = client.get("/api/chat")
        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "ok"


class TestIdentity:
    def test_rapid_requests_from_one_forwarded_ip(self, client):
        headers = {"x-forwarded-for": "1.2.3.4"}
        statuses = [
            client.post("/api/chat", json={"message": "salam"}, headers=headers).status_code
            for _ in range(16)
        ]
        assert statuses[:15] == [200] * 15
        last = client.post("/api/chat", json={"message": "salam"}, headers=headers)
        assert statuses[15] == 429
        assert last.json() == {"error": "Çox tez-tez sorğu. Bir az gözləyin dostum!"}

    def test_first_forwarded_hop_is_the_identity(self, client, pipeline):
        client.post(
            "/api/chat",
            json={"message": "salam"},
            headers={"x-forwarded-for": "5.6.7.8, 10.0.0.1"},
        )
        assert pipeline.rate_limiter.get_window("5.6.7.8").count == 1
        assert pipeline.rate_limiter.get_window("10.0.0.1") is None

    def test_falls_back_to_peer_host(self, client, pipeline):
        client.post("/api/chat", json={"message": "salam"})
        assert pipeline.rate_limiter.get_window("testclient").count == 1

    def test_other_identities_unaffected(self, client):
        for _ in range(16):
            client.post("/api/chat", json={"message": "salam"}, headers={"x-forwarded-for": "1.1.1.1"})
        response = client.post(
            "/api/chat", json={"message": "salam"}, headers={"x-forwarded-for": "2.2.2.2"},
        )
        assert response.status_code == 200

import httpx
import pytest

from leemai.core.config import Settings

MISTRAL = "mistralai/Mistral-7B-Instruct-v0.2"
ZEPHYR = "HuggingFaceH4/zephyr-7b-beta"
LLAMA = "meta-llama/Llama-3.1-8B-Instruct"


def make_settings(**overrides) -> Settings:
    values = {
        "HF_TOKEN": "hf_test",
        "TEXT_GENERATION_MODELS": [MISTRAL, ZEPHYR],
        "CHAT_MODELS": [],
        "REQUEST_TIMEOUT": 2.0,
        "LOG_FILE": "",
    }
    values.update(overrides)
    return Settings(**values)


def chat_completion(content: str) -> dict:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": LLAMA,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


class RecordingUpstream:
    """Stub für die HF-API: Antwort je Modell, zeichnet alle Aufrufe auf."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        for marker, response in self.responses.items():
            if marker in request.url.path or marker in request.content.decode("utf-8"):
                if isinstance(response, Exception):
                    raise response
                return response
        return httpx.Response(404, json={"error": "Model not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def called_paths(self):
        return [request.url.path for request in self.calls]


@pytest.fixture
def settings():
    return make_settings()

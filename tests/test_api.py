import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import MISTRAL, ZEPHYR, RecordingUpstream, make_settings
from leemai.core.assistant import (
    MISSING_CONFIG_ANSWER,
    UNAVAILABLE_ANSWER,
    UNEXPECTED_ERROR_ANSWER,
    TutorAssistant,
)
from leemai.core.handler import INVALID_JSON, METHOD_NOT_ALLOWED, QUESTION_REQUIRED
from leemai.main import create_app

URL = "/api/leemai"


def make_client(settings=None, responses=None):
    settings = settings or make_settings()
    upstream = RecordingUpstream(responses or {})
    assistant = TutorAssistant(settings, transport=upstream.transport)
    return TestClient(create_app(settings, assistant)), upstream


def assert_cors(response):
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"
    assert response.headers["access-control-allow-headers"] == "Content-Type, Authorization"


def test_options_preflight_is_empty_200():
    client, upstream = make_client()

    response = client.options(URL, headers={"Origin": "https://leemai.example", "Access-Control-Request-Method": "POST"})

    assert response.status_code == 200
    assert response.content == b""
    assert_cors(response)
    assert upstream.calls == []


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
def test_non_post_methods_get_405(method):
    client, _ = make_client()

    response = client.request(method, URL)

    assert response.status_code == 405
    assert response.json() == {"error": METHOD_NOT_ALLOWED}
    assert_cors(response)


def test_malformed_json_gets_400():
    client, _ = make_client()

    response = client.post(URL, content=b"{question: oops", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"error": INVALID_JSON}
    assert_cors(response)


@pytest.mark.parametrize("body", [b"", b"{}", b'{"language": "ur"}', b'{"question": "   "}', b'{"question": 42}', b'["question"]'])
def test_missing_or_blank_question_gets_400(body):
    client, upstream = make_client()

    response = client.post(URL, content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"error": QUESTION_REQUIRED}
    assert upstream.calls == []


def test_too_long_question_gets_400():
    client, upstream = make_client(make_settings(MAX_QUESTION_CHARS=20))

    response = client.post(URL, json={"question": "x" * 21})

    assert response.status_code == 400
    assert "too long" in response.json()["error"]
    assert upstream.calls == []


def test_valid_question_falls_back_to_second_model():
    client, upstream = make_client(responses={
        MISTRAL: httpx.Response(503, json={"error": "Model is currently loading"}),
        ZEPHYR: httpx.Response(200, json=[{"generated_text": "Mitochondria produce energy."}]),
    })

    response = client.post(URL, json={"question": "What do mitochondria do?", "language": "en"})

    assert response.status_code == 200
    assert response.json() == {"answer": "Mitochondria produce energy."}
    assert upstream.called_paths() == [f"/models/{MISTRAL}", f"/models/{ZEPHYR}"]
    assert_cors(response)


def test_all_models_failing_is_still_200():
    client, _ = make_client(responses={
        MISTRAL: httpx.ReadTimeout("timed out"),
        ZEPHYR: httpx.Response(502, text="bad gateway"),
    })

    response = client.post(URL, json={"question": "What is an ecosystem?"})

    assert response.status_code == 200
    assert response.json() == {"answer": UNAVAILABLE_ANSWER}


def test_missing_token_is_200_with_apology():
    client, upstream = make_client(make_settings(HF_TOKEN=""))

    response = client.post(URL, json={"question": "What is an ecosystem?"})

    assert response.status_code == 200
    assert response.json() == {"answer": MISSING_CONFIG_ANSWER}
    assert upstream.calls == []


def test_unexpected_error_is_200_with_apology():
    client, _ = make_client()

    with patch.object(TutorAssistant, "ask", AsyncMock(side_effect=RuntimeError("boom"))):
        response = client.post(URL, json={"question": "What is an ecosystem?"})

    assert response.status_code == 200
    assert response.json() == {"answer": UNEXPECTED_ERROR_ANSWER}


def test_long_upstream_answer_is_capped():
    client, _ = make_client(responses={
        MISTRAL: httpx.Response(200, json=[{"generated_text": "word " * 2000}]),
    })

    response = client.post(URL, json={"question": "Tell me everything about history."})

    assert response.status_code == 200
    assert len(response.json()["answer"]) <= 2000


def test_health_reports_models_and_configuration():
    client, _ = make_client()

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "configured": True, "models": [MISTRAL, ZEPHYR]}


def test_deeply_nested_json_gets_400():
    client, upstream = make_client()
    body = "[" * 200000 + "]" * 200000

    response = client.post(URL, content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"error": INVALID_JSON}
    assert upstream.calls == []


def test_invalid_utf8_body_gets_400():
    client, upstream = make_client()

    response = client.post(URL, content=b'{"question": "\xff"}', headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"error": INVALID_JSON}
    assert upstream.calls == []


def test_non_string_language_falls_back_to_english():
    client, upstream = make_client(responses={
        MISTRAL: httpx.Response(200, json=[{"generated_text": "Rivers flow downhill."}]),
    })

    response = client.post(URL, json={"question": "Why do rivers flow?", "language": 42})

    assert response.status_code == 200
    assert response.json() == {"answer": "Rivers flow downhill."}
    sent_prompt = json.loads(upstream.calls[0].content)["inputs"]
    assert "Answer in simple English." in sent_prompt


def test_error_before_answering_is_200_with_apology():
    client, upstream = make_client()

    with patch("leemai.core.handler.QuestionRequest") as request_model:
        request_model.model_validate.side_effect = RuntimeError("boom")
        response = client.post(URL, json={"question": "What is an ecosystem?"})

    assert response.status_code == 200
    assert response.json() == {"answer": UNEXPECTED_ERROR_ANSWER}
    assert upstream.calls == []

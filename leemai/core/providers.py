"""Adapter für die Modell-Kandidaten. Jeder Kandidat liefert über
generate() den rohen Antworttext oder wirft einen CandidateError."""
import logging
from abc import ABC, abstractmethod
from typing import Any, List

import httpx
from openai import (
    APIConnectionError,
    APIResponseValidationError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
)
from openai.types.chat import ChatCompletion

from leemai.core.config import Settings
from leemai.core.errors import (
    CandidateError,
    CandidateTimeout,
    InvalidUpstreamResponse,
    ModelLoading,
    UpstreamStatusError,
    short_detail,
)

logger = logging.getLogger(__name__)


class ModelCandidate(ABC):
    """Gemeinsame Basis: Modellname, Endpunkt und Sampling-Parameter."""

    kind = "base"

    def __init__(
        self,
        model: str,
        base_url: str,
        max_new_tokens: int = 400,
        temperature: float = 0.7,
        top_p: float = 0.95,
        timeout: float = 25.0,
    ) -> None:
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.max_new_tokens = max_new_tokens
        self.temperature = temperature
        self.top_p = top_p
        self.timeout = timeout

    @abstractmethod
    async def generate(self, client: httpx.AsyncClient, prompt: str, token: str) -> str:
        """Liefert den rohen Antworttext oder wirft einen CandidateError."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model='{self.model}')"


class TextGenerationCandidate(ModelCandidate):
    """Hugging Face Inference API (text-generation Task)."""

    kind = "text-generation"

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.model}"

    async def generate(self, client: httpx.AsyncClient, prompt: str, token: str) -> str:
        payload = {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": self.max_new_tokens,
                "temperature": self.temperature,
                "return_full_text": False,
                "top_p": self.top_p,
            },
        }
        headers = {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}

        try:
            response = await client.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except httpx.TimeoutException as exc:
            raise CandidateTimeout(self.model) from exc
        except httpx.HTTPError as exc:
            raise CandidateError(self.model, short_detail(str(exc))) from exc

        logger.info(f"HF response status for {self.model}: {response.status_code}")

        if response.status_code == 503:
            raise ModelLoading(self.model, short_detail(response.text))
        if not response.is_success:
            raise UpstreamStatusError(self.model, response.status_code, short_detail(response.text))

        try:
            data = response.json()
        except ValueError as exc:
            raise InvalidUpstreamResponse(self.model, short_detail(response.text)) from exc

        return self._extract_text(data)

    def _extract_text(self, data: Any) -> str:
        # HF liefert je nach Modell eine Liste oder ein einzelnes Objekt.
        if isinstance(data, list):
            data = data[0] if data else {}
        if not isinstance(data, dict):
            raise InvalidUpstreamResponse(self.model, f"unexpected payload type {type(data).__name__}")

        if data.get("generated_text"):
            return str(data["generated_text"])

        error = data.get("error")
        if error:
            if "loading" in str(error).lower():
                raise ModelLoading(self.model, short_detail(str(error)))
            raise CandidateError(self.model, short_detail(str(error)))
        return ""


class ChatCompletionCandidate(ModelCandidate):
    """OpenAI-kompatibler Chat-Endpunkt (HF Router), über das openai-SDK."""

    kind = "chat-completion"

    async def generate(self, client: httpx.AsyncClient, prompt: str, token: str) -> str:
        # Der httpx-Client des Requests wird geteilt; Retries übernimmt die Fallback-Schleife.
        ai = AsyncOpenAI(
            api_key=token,
            base_url=self.base_url,
            http_client=client,
            max_retries=0,
            timeout=self.timeout,
        )
        try:
            completion = await ai.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_new_tokens,
                temperature=self.temperature,
                top_p=self.top_p,
            )
        except APITimeoutError as exc:
            raise CandidateTimeout(self.model) from exc
        except APIConnectionError as exc:
            raise CandidateError(self.model, short_detail(str(exc))) from exc
        except APIStatusError as exc:
            if exc.status_code == 503:
                raise ModelLoading(self.model, short_detail(exc.message)) from exc
            raise UpstreamStatusError(self.model, exc.status_code, short_detail(exc.message)) from exc
        except (APIResponseValidationError, ValueError) as exc:
            raise InvalidUpstreamResponse(self.model, short_detail(str(exc))) from exc

        # Ohne JSON-Content-Type gibt das SDK den Rohtext statt eines ChatCompletion zurück.
        if not isinstance(completion, ChatCompletion):
            raise InvalidUpstreamResponse(self.model, short_detail(str(completion)))
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""


def build_candidates(settings: Settings) -> List[ModelCandidate]:
    """Erzeugt die Kandidaten in Fallback-Reihenfolge aus den Settings."""
    sampling = dict(
        max_new_tokens=settings.max_new_tokens,
        temperature=settings.temperature,
        top_p=settings.top_p,
        timeout=settings.request_timeout,
    )
    candidates: List[ModelCandidate] = [
        TextGenerationCandidate(model, settings.hf_inference_url, **sampling)
        for model in settings.text_generation_models
    ]
    candidates.extend(
        ChatCompletionCandidate(model, settings.hf_chat_url, **sampling)
        for model in settings.chat_models
    )
    return candidates

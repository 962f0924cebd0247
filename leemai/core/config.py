"""Konfigurationsmodul für den LeemAI Study Assistant: lädt Token, Modell-Liste
und Limits aus Umgebungsvariablen via Pydantic-Settings."""
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Hält alle konfigurierbaren Werte, die der Handler zur Laufzeit
    benötigt (z.B. HF-Token, Modell-Reihenfolge, Timeouts)."""

    hf_token: str = Field("", alias="HF_TOKEN")  # Muss per Env gesetzt werden.
    hf_inference_url: str = Field(
        "https://api-inference.huggingface.co/models", alias="HF_INFERENCE_URL"
    )
    hf_chat_url: str = Field("https://router.huggingface.co/v1", alias="HF_CHAT_URL")

    # Reihenfolge = Fallback-Reihenfolge; Text-Generation-Modelle zuerst.
    text_generation_models: List[str] = Field(
        default_factory=lambda: [
            "mistralai/Mistral-7B-Instruct-v0.2",
            "HuggingFaceH4/zephyr-7b-beta",
        ],
        alias="TEXT_GENERATION_MODELS",
    )
    chat_models: List[str] = Field(
        default_factory=lambda: ["meta-llama/Llama-3.1-8B-Instruct"],
        alias="CHAT_MODELS",
    )

    request_timeout: float = Field(25.0, gt=0, alias="REQUEST_TIMEOUT")  # Sekunden pro Kandidat
    max_new_tokens: int = Field(400, alias="MAX_NEW_TOKENS")
    temperature: float = Field(0.7, alias="TEMPERATURE")
    top_p: float = Field(0.95, alias="TOP_P")
    max_answer_chars: int = Field(2000, ge=10, alias="MAX_ANSWER_CHARS")
    max_question_chars: int = Field(2000, ge=1, alias="MAX_QUESTION_CHARS")

    log_file: str = Field("", alias="LOG_FILE")
    service_port: int = Field(8888, alias="SERVICE_PORT")


settings = Settings()

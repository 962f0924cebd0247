"""API-Modelle für den LeemAI Study Assistant: eingehende Fragen sowie
Antwort- und Fehler-Payloads."""
from typing import Optional

from pydantic import BaseModel, StrictStr, field_validator


class QuestionRequest(BaseModel):
    """Eingehende Schülerfrage inkl. optionaler Sprachpräferenz ("ur" = Urdu)."""

    question: StrictStr
    language: Optional[str] = None

    @field_validator("question")
    @classmethod
    def _question_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("question must not be blank")
        return value

    @field_validator("language", mode="before")
    @classmethod
    def _ignore_non_string_language(cls, value):
        # Unbekannte Typen fallen auf die Standardsprache zurück.
        return value if isinstance(value, str) else None


class AnswerResponse(BaseModel):
    answer: str


class ErrorResponse(BaseModel):
    error: str

"""Baut den Prompt für LeemAI und bereinigt die Modellantwort."""
from typing import Optional

PROMPT_TEMPLATE = """You are LeemAI, a helpful study assistant for FBISE students in Pakistan.
Explain concepts in a simple and clear way suitable for high school students.
Answer in {language}.
Do NOT help with cheating or provide exam answers.

Question: {question}

Answer:"""

TRUNCATION_MARKER = "..."


def answer_language(language: Optional[str]) -> str:
    return "Urdu" if language == "ur" else "simple English"


def build_prompt(question: str, language: Optional[str] = None) -> str:
    """Setzt Rollenanweisung, Sprachwunsch und Frage zu einem Prompt zusammen."""
    return PROMPT_TEMPLATE.format(language=answer_language(language), question=question)


def clean_answer(text: str, prompt: str, max_chars: int) -> str:
    """Entfernt den zurückgespiegelten Prompt und kürzt auf max_chars.

    Manche Modelle liefern trotz return_full_text=False den Prompt mit. Das
    Ergebnis enthält den Prompt nie und ist nie länger als max_chars.
    """
    answer = text or ""
    while prompt and prompt in answer:
        answer = answer.replace(prompt, "")
    answer = answer.strip()

    if len(answer) > max_chars:
        answer = answer[: max_chars - len(TRUNCATION_MARKER)].rstrip() + TRUNCATION_MARKER
    return answer

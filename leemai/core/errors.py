"""Fehlerklassen für einzelne Modell-Kandidaten. Sie verlassen den
TutorAssistant nie, sondern lösen nur den Wechsel zum nächsten Kandidaten aus."""
from typing import Optional


class CandidateError(Exception):
    """Ein Kandidat hat keine verwertbare Antwort geliefert."""

    reason = "error"

    def __init__(self, model: str, detail: str = "") -> None:
        self.model = model
        self.detail = detail
        super().__init__(f"{model}: {self.reason}" + (f" ({detail})" if detail else ""))


class CandidateTimeout(CandidateError):
    reason = "timeout"


class ModelLoading(CandidateError):
    reason = "loading"


class UpstreamStatusError(CandidateError):
    reason = "http_status"

    def __init__(self, model: str, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        super().__init__(model, f"HTTP {status_code}" + (f": {detail}" if detail else ""))


class InvalidUpstreamResponse(CandidateError):
    reason = "invalid_response"


def short_detail(text: Optional[str], limit: int = 200) -> str:
    """Kürzt Provider-Fehlertexte für Logzeilen."""
    return " ".join((text or "").split())[:limit]

"""Steuert die Kommunikation mit den gehosteten Sprachmodellen inkl.
Fallback-Logik für den LeemAI Study Assistant."""
import asyncio
import logging
from typing import List, Optional

import httpx

from leemai.core.config import Settings
from leemai.core.errors import CandidateError
from leemai.core.prompt import build_prompt, clean_answer
from leemai.core.providers import ModelCandidate, build_candidates

logger = logging.getLogger(__name__)

MISSING_CONFIG_ANSWER = "The AI service is not properly configured. Please contact support."
UNAVAILABLE_ANSWER = (
    "Sorry, the AI service is unavailable right now. All models are busy or loading. "
    "Please try again in a minute."
)
UNEXPECTED_ERROR_ANSWER = (
    "An unexpected error occurred. Please try again. If the problem persists, contact support."
)


class TutorAssistant:
    """Schickt den Prompt der Reihe nach an die Kandidaten und gibt die
    erste brauchbare, bereinigte Antwort zurück."""

    def __init__(
        self,
        settings: Settings,
        candidates: Optional[List[ModelCandidate]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self.candidates = candidates if candidates is not None else build_candidates(settings)
        # Nur für Tests: ersetzt das echte Netzwerk (z.B. httpx.MockTransport).
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.settings.hf_token)

    async def ask(self, question: str, language: Optional[str] = None) -> str:
        """Beantwortet eine Frage.

        Ablauf:
        - Ohne HF_TOKEN wird sofort eine Entschuldigung zurückgegeben.
        - Jeder Kandidat bekommt genau einen Versuch mit eigenem Timeout.
        - Fehlerstatus, Ladezustand, Timeout oder leere Ausgabe -> nächster Kandidat.
        - Sind alle Kandidaten erschöpft, kommt UNAVAILABLE_ANSWER zurück.
        """
        if not self.configured:
            logger.error("HF_TOKEN not found in environment variables")
            return MISSING_CONFIG_ANSWER

        prompt = build_prompt(question, language)
        timeout = self.settings.request_timeout

        async with httpx.AsyncClient(transport=self._transport, timeout=timeout) as client:
            for position, candidate in enumerate(self.candidates, start=1):
                logger.info(f"Attempt {position}/{len(self.candidates)}: {candidate.model} ({candidate.kind})")
                try:
                    raw = await asyncio.wait_for(
                        candidate.generate(client, prompt, self.settings.hf_token),
                        timeout=timeout,
                    )
                except asyncio.TimeoutError:
                    logger.warning(f"Candidate {candidate.model} timed out after {timeout}s")
                    continue
                except CandidateError as exc:
                    logger.warning(f"Candidate {candidate.model} failed [{exc.reason}]: {exc.detail}")
                    continue

                answer = clean_answer(raw, prompt, self.settings.max_answer_chars)
                if not answer:
                    logger.warning(f"Candidate {candidate.model} returned an empty answer")
                    continue

                logger.info(f"Returning answer from {candidate.model} (length): {len(answer)}")
                return answer

        logger.error(f"All {len(self.candidates)} candidate models failed")
        return UNAVAILABLE_ANSWER

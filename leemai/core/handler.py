"""Transportneutrale Verarbeitung einer Anfrage: Methode und Rohbody rein,
Statuscode und JSON-Payload raus. Wird vom FastAPI-Router und vom
Serverless-Entry-Point gleichermaßen genutzt."""
import json
import logging
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import ValidationError

from leemai.core.assistant import UNEXPECTED_ERROR_ANSWER, TutorAssistant
from leemai.core.models import AnswerResponse, ErrorResponse, QuestionRequest

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Content-Type": "application/json",
}

METHOD_NOT_ALLOWED = "Only POST allowed"
INVALID_JSON = "Invalid JSON in request body"
QUESTION_REQUIRED = "Question is required and must be a non-empty string"

HandlerResult = Tuple[int, Optional[Dict[str, Any]]]


def _error(status_code: int, message: str) -> HandlerResult:
    return status_code, ErrorResponse(error=message).model_dump()


async def handle_request(
    method: str,
    raw_body: Union[bytes, str, None],
    assistant: TutorAssistant,
) -> HandlerResult:
    """Bildet eine HTTP-Anfrage auf (status, payload) ab; payload None = leerer Body."""
    method = (method or "").upper()
    if method == "OPTIONS":
        return 200, None
    if method != "POST":
        return _error(405, METHOD_NOT_ALLOWED)

    try:
        return await _handle_post(raw_body, assistant)
    except Exception:
        # Das Frontend soll immer ein parsebares {answer} bekommen.
        logger.exception("Unexpected error while handling request")
        return 200, AnswerResponse(answer=UNEXPECTED_ERROR_ANSWER).model_dump()


async def _handle_post(raw_body: Union[bytes, str, None], assistant: TutorAssistant) -> HandlerResult:
    try:
        data = json.loads(raw_body or "{}")
    except (ValueError, RecursionError) as exc:
        # RecursionError: gültiges, aber extrem tief verschachteltes JSON.
        logger.error(f"JSON parse error: {type(exc).__name__}")
        return _error(400, INVALID_JSON)

    if not isinstance(data, dict):
        return _error(400, QUESTION_REQUIRED)
    try:
        request = QuestionRequest.model_validate(data)
    except ValidationError:
        return _error(400, QUESTION_REQUIRED)

    max_chars = assistant.settings.max_question_chars
    if len(request.question) > max_chars:
        return _error(400, f"Question is too long (max {max_chars} characters)")

    logger.info(f"Received question: {request.question}")
    logger.info(f"Language: {request.language}")

    answer = await assistant.ask(request.question, request.language)
    return 200, AnswerResponse(answer=answer).model_dump()

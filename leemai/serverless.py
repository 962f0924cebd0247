"""
Netlify / AWS Lambda entry point.

Converts the function event ({httpMethod, body, isBase64Encoded}) into a
call to handle_request and returns {statusCode, headers, body}.
"""
import asyncio
import base64
import binascii
import json
import logging

from leemai.core.assistant import TutorAssistant
from leemai.core.config import settings
from leemai.core.handler import CORS_HEADERS, INVALID_JSON, handle_request
from leemai.core.logging_setup import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


def _response(status_code, payload):
    return {
        "statusCode": status_code,
        "headers": dict(CORS_HEADERS),
        "body": "" if payload is None else json.dumps(payload),
    }


def handler(event, context=None, assistant=None):
    assistant = assistant or TutorAssistant(settings)

    body = event.get("body") or ""
    if event.get("isBase64Encoded") and body:
        try:
            body = base64.b64decode(body, validate=True)
        except binascii.Error:
            logger.error("Could not decode base64 request body")
            return _response(400, {"error": INVALID_JSON})

    status_code, payload = asyncio.run(handle_request(event.get("httpMethod", ""), body, assistant))
    return _response(status_code, payload)

"""Ask-Router stellt den Hauptendpunkt des LeemAI Study Assistants bereit."""
from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from leemai.core.handler import CORS_HEADERS, handle_request

router = APIRouter(prefix="/api", tags=["Ask"])

# Alle Methoden landen hier, damit OPTIONS/405 dieselben Header und Payloads
# bekommen wie im Serverless-Betrieb.
ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


@router.api_route("/leemai", methods=ALL_METHODS)
async def ask_leemai(request: Request) -> Response:
    """Haupt-Endpunkt: nimmt {question, language} entgegen und liefert {answer}.

    Pipeline:
    1) Preflight (OPTIONS) und Methodenprüfung.
    2) JSON-Parsing und Validierung der Frage.
    3) Fallback-Kette über die Modell-Kandidaten im TutorAssistant.
    """
    body = await request.body()
    status_code, payload = await handle_request(request.method, body, request.app.state.assistant)

    if payload is None:
        return Response(status_code=status_code, headers=CORS_HEADERS)
    return JSONResponse(payload, status_code=status_code, headers=CORS_HEADERS)

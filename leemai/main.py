"""FastAPI-Einstiegspunkt für den LeemAI Study Assistant."""
import logging
from typing import Optional

from fastapi import FastAPI, Request

from leemai.core.assistant import TutorAssistant
from leemai.core.config import Settings
from leemai.core.config import settings as default_settings
from leemai.core.logging_setup import setup_logging
from leemai.routers import ask as ask_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    assistant: Optional[TutorAssistant] = None,
) -> FastAPI:
    """Baut die App mit expliziter Konfiguration.

    - Settings werden übergeben statt global aus der Umgebung gelesen.
    - Der TutorAssistant wird im App State gespeichert.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="LeemAI Study Assistant",
        version="2.0.0",
        description="Forwards student questions to hosted language models with multi-model fallback.",
    )
    app.state.settings = settings
    app.state.assistant = assistant or TutorAssistant(settings)

    @app.get("/health")
    def health(request: Request):
        tutor = request.app.state.assistant
        return {
            "status": "ok",
            "configured": tutor.configured,
            "models": [candidate.model for candidate in tutor.candidates],
        }

    app.include_router(ask_router.router)

    if not app.state.assistant.configured:
        logger.warning("HF_TOKEN is not set - every question will get the configuration apology.")
    return app


# Setup Logging (Console + optional File)
setup_logging()

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("leemai.main:app", host="0.0.0.0", port=default_settings.service_port, log_level="info")

import os, logging
from fastapi import FastAPI
from ra_intake.config import Settings, load_settings
from ra_intake.email import GmailMailer
from ra_intake.webhook import router as webhook_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)


def create_app(settings: Settings = None, mailer=None, client=None) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(title="RA Application Intake")
    app.state.settings = settings
    app.state.mailer = mailer or GmailMailer(settings)
    app.state.openai_client = client

    @app.get("/")
    def health():
        return {"status": "ok"}

    # Mount webhook routes under /webhook/*
    app.include_router(webhook_router, prefix="/webhook")
    return app


app = create_app()

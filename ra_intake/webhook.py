# ra_intake/webhook.py
import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from ra_intake.pipeline import handle_form_submit, handle_webhook

logger = logging.getLogger(__name__)

router = APIRouter()

LIVENESS_TEXT = "RA Application webhook is running."


@router.get("/application", response_class=PlainTextResponse)
def application_alive():
    return LIVENESS_TEXT


@router.post("/application")
async def application_webhook(request: Request) -> Dict[str, Any]:
    # always HTTP 200; success/error is carried in the JSON body
    body = await request.body()
    state = request.app.state
    return await run_in_threadpool(handle_webhook, body, state.settings, state.mailer, state.openai_client)


@router.post("/form-submit")
async def form_submit(request: Request) -> Dict[str, Any]:
    """Relay for the spreadsheet onFormSubmit trigger: {"namedValues": {...}}."""
    body = await request.body()
    state = request.app.state
    try:
        event = json.loads(body) if body else None
    except ValueError:
        event = None
    named_values = event.get("namedValues") if isinstance(event, dict) else None
    if named_values is None:
        logger.warning("form-submit relay called without namedValues")
    raw = body.decode("utf-8", errors="replace")
    await run_in_threadpool(handle_form_submit, named_values, state.settings, state.mailer,
                            state.openai_client, raw)
    return {"status": "processed"}

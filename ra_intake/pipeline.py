"""Shared pipeline behind both entry points.

Received -> Normalized -> Summarized -> Emailed, or Received -> Failed, which
sends one plain-text notification to the recipient. Nothing is retried or
deduplicated: a re-delivered event produces a second email.
"""
import json
import logging
from typing import Any, Dict, Mapping, Optional

from ra_intake.config import Settings
from ra_intake.errors import PayloadError
from ra_intake.intake import Submission, from_named_values, from_webhook_payload, parse_webhook_body
from ra_intake.report import render_report, subject_for, error_subject, error_body
from ra_intake.summarizer import SummaryResult, summarize

logger = logging.getLogger(__name__)


def process_submission(submission: Submission, settings: Settings, mailer,
                       client: Optional[Any] = None) -> SummaryResult:
    summary = summarize(submission.fields, settings, client=client)
    html = render_report(submission.applicant_name, submission.applicant_email,
                         summary.html, submission.fields, settings)
    # send failures propagate to the entry point's catch
    mailer.send(settings.recipient_email, subject_for(submission.applicant_name, settings),
                html_body=html, sender_name=settings.sender_name)
    logger.info("Successfully processed application from %s", submission.applicant_name)
    return summary


def _dump_event(named_values: Any) -> str:
    try:
        return json.dumps(named_values, default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(named_values)


def handle_form_submit(named_values: Optional[Mapping[str, Any]], settings: Settings, mailer,
                       client: Optional[Any] = None, raw: str = "") -> Optional[SummaryResult]:
    """Spreadsheet-trigger path. Returns None when the error notice was sent.

    A failing error notice propagates to the caller.
    """
    try:
        if not isinstance(named_values, Mapping) or not named_values:
            raise PayloadError("Form event has no namedValues")
        submission = from_named_values(named_values, settings)
        return process_submission(submission, settings, mailer, client=client)
    except Exception as e:
        logger.error("Error processing form submission: %s", e)
        raw = raw or _dump_event(named_values)
        mailer.send(settings.recipient_email, error_subject(settings),
                    text_body=error_body(str(e), raw))
        return None


def handle_webhook(body: bytes, settings: Settings, mailer,
                   client: Optional[Any] = None) -> Dict[str, Any]:
    raw = body.decode("utf-8", errors="replace") if body else ""
    try:
        payload = parse_webhook_body(body)
        submission = from_webhook_payload(payload, settings)
        process_submission(submission, settings, mailer, client=client)
        return {"status": "success"}
    except Exception as e:
        logger.error("Error processing webhook: %s", e)
        try:
            mailer.send(settings.recipient_email, error_subject(settings),
                        text_body=error_body(str(e), raw or "(empty body)"))
        except Exception as mail_err:
            logger.error("Could not send error notification: %s", mail_err)
        return {"status": "error", "message": str(e)}

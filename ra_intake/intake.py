# ra_intake/intake.py
import json
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel

from ra_intake.config import Settings
from ra_intake.errors import PayloadError

UNKNOWN_NAME = "Unknown"
UNKNOWN_EMAIL = "Not provided"


class Submission(BaseModel):
    fields: Dict[str, str]
    applicant_name: str = UNKNOWN_NAME
    applicant_email: str = UNKNOWN_EMAIL


def _first_answer(answers: Any) -> str:
    # named values arrive as {question: [answer, ...]}
    if isinstance(answers, (list, tuple)):
        for a in answers:
            if a is not None and str(a).strip():
                return str(a).strip()
        return ""
    if answers is None:
        return ""
    return str(answers).strip()


def first_value(named_values: Mapping[str, Any], candidates: List[str]) -> Optional[str]:
    for name in candidates:
        value = _first_answer(named_values.get(name))
        if value:
            return value
    return None


def from_named_values(named_values: Mapping[str, Any], settings: Settings) -> Submission:
    fields = {question: _first_answer(answers) for question, answers in named_values.items()}
    return Submission(
        fields=fields,
        applicant_name=first_value(named_values, settings.name_candidates) or UNKNOWN_NAME,
        applicant_email=first_value(named_values, settings.email_candidates) or UNKNOWN_EMAIL,
    )


def parse_webhook_body(body: bytes) -> Dict[str, Any]:
    text = body.decode("utf-8", errors="replace") if body else ""
    if not text.strip():
        raise PayloadError("No POST data received")
    try:
        payload = json.loads(text)
    except ValueError as e:
        raise PayloadError(f"Invalid JSON body: {e}") from e
    if not isinstance(payload, dict):
        raise PayloadError("JSON body must be an object")
    return payload


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v).strip() for v in value if v is not None and str(v).strip())
    return str(value).strip()


def from_webhook_payload(payload: Mapping[str, Any], settings: Settings) -> Submission:
    """Known keys first in display order, then unknown keys as they arrived."""
    fields: Dict[str, str] = {}
    for key in settings.field_order:
        if key in payload:
            fields[key] = _to_text(payload[key])
    for key, value in payload.items():
        if key not in fields:
            fields[key] = _to_text(value)

    return Submission(
        fields=fields,
        applicant_name=fields.get("name") or UNKNOWN_NAME,
        applicant_email=fields.get("email") or UNKNOWN_EMAIL,
    )

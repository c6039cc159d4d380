import logging
from enum import Enum
from typing import Any, Mapping, Optional

from openai import OpenAI, APIStatusError
from pydantic import BaseModel

from ra_intake.config import Settings, get_openai_api_key
from ra_intake.field_map import label_for

logger = logging.getLogger(__name__)

NOT_CONFIGURED_HTML = "<p><em>AI summary not available - OpenAI API key not configured.</em></p>"

SYSTEM_PROMPT = """You are reviewing a research assistant application for an economics professor.
Generate a concise, professional summary that helps the professor quickly assess the candidate.
Be evaluative rather than descriptive.
Format your response in HTML with clear sections."""

INSTRUCTIONS = """Please analyze this research assistant application and provide:

1. **Candidate Profile** (2-3 sentences summarizing who they are)
2. **Project Fit** (how well their interests align with available projects)
3. **Key Skills** (notable strengths and any gaps)
4. **Motivation Assessment** (what drives them, what they want to gain)
5. **Overall Recommendation** (Strong Fit / Moderate Fit / Weak Fit with brief justification)
"""


class SummaryStatus(str, Enum):
    OK = "ok"
    NOT_CONFIGURED = "not_configured"
    SERVICE_ERROR = "service_error"
    EXCEPTION = "exception"


class SummaryResult(BaseModel):
    status: SummaryStatus
    html: str
    detail: str = ""

    @property
    def degraded(self) -> bool:
        return self.status is not SummaryStatus.OK


def build_prompt(fields: Mapping[str, str], settings: Settings) -> str:
    projects = "\n".join(f"- {p}" for p in settings.projects)
    lines = []
    for key, value in fields.items():
        if key == settings.excluded_field:
            continue
        value = (value or "").strip()
        if value:
            lines.append(f"**{label_for(key, settings.field_labels)}:** {value}")

    return (
        f"{INSTRUCTIONS}\n"
        f"Available research projects:\n{projects}\n\n"
        "---\n"
        "APPLICATION DATA:\n"
        + "\n".join(lines)
    )


def _service_message(err: APIStatusError) -> str:
    body = err.body
    if isinstance(body, dict):
        if isinstance(body.get("error"), dict):
            body = body["error"]
        if body.get("message"):
            return str(body["message"])
    return err.message


def summarize(fields: Mapping[str, str], settings: Settings, client: Optional[Any] = None) -> SummaryResult:
    """Ask the completion service for a candidate narrative. Never raises."""
    api_key = get_openai_api_key()
    if not api_key:
        logger.warning("OPENAI_API_KEY not configured; skipping AI summary")
        return SummaryResult(status=SummaryStatus.NOT_CONFIGURED, html=NOT_CONFIGURED_HTML)

    try:
        client = client or OpenAI(api_key=api_key, max_retries=0)
        resp = client.chat.completions.create(
            model=settings.openai_model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(fields, settings)},
            ],
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
        )
        content = resp.choices[0].message.content or ""
    except APIStatusError as e:
        msg = _service_message(e)
        logger.warning("Completion service returned an error: %s", msg)
        return SummaryResult(status=SummaryStatus.SERVICE_ERROR,
                             html=f"<p><em>AI summary error: {msg}</em></p>", detail=msg)
    except Exception as e:
        logger.warning("Completion call failed: %s", e)
        return SummaryResult(status=SummaryStatus.EXCEPTION,
                             html=f"<p><em>AI summary unavailable: {e}</em></p>", detail=str(e))

    return SummaryResult(status=SummaryStatus.OK, html=content)

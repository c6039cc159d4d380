import os, json, tempfile, logging
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ra_intake.field_map import (
    FIELD_ORDER, NAME_CANDIDATES, EMAIL_CANDIDATES, default_labels,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_API_KEY = "YOUR_OPENAI_API_KEY_HERE"

DEFAULT_PROJECTS = [
    "Book: Economics of Digital Platforms and Social Media (course materials compilation)",
    "Social Norms of Social Media (evolution of social norms on social media)",
    "Strategic Storytelling [FULL - no spots available]",
    "Social Norms Around Organ Donation (Italian language required)",
]


class Settings(BaseModel):
    """Process-wide configuration, built once by load_settings()."""

    recipient_email: str = ""
    email_tag: str = "[RA_Request_web]"
    sender_name: str = "RA Application System"

    gmail_sender: str = ""
    google_token_path: str = "token.json"

    spreadsheet_id: str = ""
    sheet_range: str = "Form Responses 1"

    openai_model: str = "gpt-4"
    max_tokens: int = 1000
    temperature: float = 0.7

    projects: List[str] = Field(default_factory=lambda: list(DEFAULT_PROJECTS))
    field_labels: Dict[str, str] = Field(default_factory=default_labels)
    field_order: List[str] = Field(default_factory=lambda: list(FIELD_ORDER))
    name_candidates: List[str] = Field(default_factory=lambda: list(NAME_CANDIDATES))
    email_candidates: List[str] = Field(default_factory=lambda: list(EMAIL_CANDIDATES))

    excluded_field: str = "cv"
    attachment_field: str = "cv_url"
    timestamp_field: str = "Timestamp"


def _split_projects(raw: str) -> List[str]:
    return [p.strip() for p in raw.split("|") if p.strip()]


def _materialize_token(blob: str) -> Optional[str]:
    # GOOGLE_TOKEN_JSON lets hosted deploys ship the OAuth token as an env var
    try:
        info = json.loads(blob)
    except ValueError:
        logger.warning("GOOGLE_TOKEN_JSON is not valid JSON; ignoring it")
        return None
    tmp = tempfile.NamedTemporaryFile(prefix="google_token_", suffix=".json", delete=False)
    tmp.write(json.dumps(info).encode("utf-8"))
    tmp.flush()
    tmp.close()
    return tmp.name


def load_settings() -> Settings:
    load_dotenv()

    values = {
        "recipient_email": os.getenv("RA_RECIPIENT_EMAIL", ""),
        "gmail_sender": os.getenv("GMAIL_SENDER", ""),
        "google_token_path": os.getenv("GOOGLE_TOKEN_PATH", "token.json"),
        "spreadsheet_id": os.getenv("SPREADSHEET_ID", ""),
    }
    for env, key in (("RA_EMAIL_TAG", "email_tag"),
                     ("RA_SENDER_NAME", "sender_name"),
                     ("SHEET_RANGE", "sheet_range"),
                     ("OPENAI_MODEL", "openai_model")):
        if os.getenv(env):
            values[key] = os.getenv(env)

    projects = _split_projects(os.getenv("RA_PROJECTS", ""))
    if projects:
        values["projects"] = projects

    token_json = os.getenv("GOOGLE_TOKEN_JSON", "")
    if token_json:
        path = _materialize_token(token_json)
        if path:
            values["google_token_path"] = path

    settings = Settings(**values)
    if not settings.recipient_email:
        logger.warning("RA_RECIPIENT_EMAIL is not set; reports have nowhere to go")
    return settings


def get_openai_api_key() -> str:
    """Read the completion credential at call time; '' when unconfigured."""
    key = os.getenv("OPENAI_API_KEY", "").strip()
    if not key or key == PLACEHOLDER_API_KEY:
        return ""
    return key

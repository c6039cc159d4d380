import os, base64, logging
from typing import List, Optional, Union
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.utils import formataddr

from googleapiclient.discovery import build
from google.oauth2.credentials import Credentials

from ra_intake.config import Settings
from ra_intake.errors import MailerError

logger = logging.getLogger(__name__)

SCOPES = ['https://www.googleapis.com/auth/gmail.send']


def _load_creds(token_path: Optional[str]):
    # GOOGLE_TOKEN_JSON is materialised to this path by load_settings()
    if token_path and os.path.exists(token_path):
        return Credentials.from_authorized_user_file(token_path, SCOPES)
    raise MailerError(f"No Gmail token found at {token_path!r}. Run quickstart.py or set GOOGLE_TOKEN_JSON.")


def _to_list(v: Union[str, List[str], None]) -> List[str]:
    if not v:
        return []
    if isinstance(v, str):
        # allow "a@x.com, b@x.com" or "a@x.com"
        return [s.strip() for s in v.split(",") if s.strip()]
    return v


def build_message(sender: str, to: Union[str, List[str]], subject: str,
                  text_body: str = "", html_body: Optional[str] = None,
                  sender_name: Optional[str] = None):
    if html_body is not None:
        msg = MIMEMultipart('alternative')
        msg.attach(MIMEText(text_body or "", 'plain'))
        msg.attach(MIMEText(html_body, 'html'))
    else:
        msg = MIMEText(text_body or "", 'plain')

    if sender:
        msg['From'] = formataddr((sender_name, sender)) if sender_name else sender
    msg['To'] = ", ".join(_to_list(to))
    msg['Subject'] = subject
    return msg


class GmailMailer:
    """Sends mail as the authorised Gmail account."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._service = None

    def _get_service(self):
        if self._service is None:
            creds = _load_creds(self.settings.google_token_path)
            self._service = build('gmail', 'v1', credentials=creds, cache_discovery=False)
        return self._service

    def send(self, to: Union[str, List[str]], subject: str, text_body: str = "",
             html_body: Optional[str] = None, sender_name: Optional[str] = None) -> str:
        if not _to_list(to):
            raise MailerError("No recipient configured")
        msg = build_message(self.settings.gmail_sender, to, subject,
                            text_body=text_body, html_body=html_body,
                            sender_name=sender_name or self.settings.sender_name)
        raw = base64.urlsafe_b64encode(msg.as_bytes()).decode()
        sent = self._get_service().users().messages().send(userId='me', body={'raw': raw}).execute()
        logger.info("Sent '%s' to %s", subject, ", ".join(_to_list(to)))
        return sent.get('id', '')

# ra_intake/report.py
from datetime import datetime
from typing import Mapping, Optional

from ra_intake.config import Settings
from ra_intake.field_map import label_for

STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 800px; margin: 0 auto; }
    .header { background: #2563eb; color: white; padding: 20px; border-radius: 8px 8px 0 0; }
    .header h1 { margin: 0; font-size: 24px; }
    .header p { margin: 5px 0 0; opacity: 0.9; }
    .section { padding: 20px; border: 1px solid #ddd; margin-top: -1px; }
    .section h2 { color: #2563eb; margin-top: 0; border-bottom: 2px solid #2563eb; padding-bottom: 8px; }
    .ai-summary { background: #f8f9fa; }
    .raw-data { background: #fff; }
    .response-item { margin-bottom: 16px; }
    .response-question { font-weight: bold; color: #555; margin-bottom: 4px; }
    .response-answer { padding-left: 12px; border-left: 3px solid #2563eb; }
    .download a { color: #2563eb; font-weight: bold; }
    .footer { padding: 15px 20px; background: #f0f0f0; border-radius: 0 0 8px 8px; font-size: 12px; color: #666; }
"""


def escape_html(text: Optional[str]) -> str:
    # & must go first or the other entities get double-escaped
    if not text:
        return ""
    return (text
            .replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;")
            .replace("'", "&#039;")
            .replace("\n", "<br>"))


def format_fields(fields: Mapping[str, str], settings: Settings) -> str:
    # the attachment link gets its own download block below
    skip = {settings.timestamp_field, settings.excluded_field, settings.attachment_field}
    html = ""
    for key, value in fields.items():
        value = (value or "").strip()
        if not value or key in skip:
            continue
        html += f"""
        <div class="response-item">
          <div class="response-question">{escape_html(label_for(key, settings.field_labels))}</div>
          <div class="response-answer">{escape_html(value)}</div>
        </div>
"""

    link = (fields.get(settings.attachment_field) or "").strip()
    if link:
        html += f"""
        <div class="response-item download">
          <div class="response-question">CV Download</div>
          <div class="response-answer"><a href="{escape_html(link)}">Download attached CV</a></div>
        </div>
"""
    return html


def render_report(name: str, email: str, summary_html: str, fields: Mapping[str, str],
                  settings: Settings, now: Optional[datetime] = None) -> str:
    # summary_html comes from the summarizer and is inserted as-is
    stamp = (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    return f"""
<!DOCTYPE html>
<html>
<head>
  <style>{STYLE}</style>
</head>
<body>
  <div class="header">
    <h1>New RA Application</h1>
    <p><strong>{escape_html(name)}</strong> ({escape_html(email)})</p>
  </div>

  <div class="section ai-summary">
    <h2>AI-Generated Summary</h2>
    {summary_html}
  </div>

  <div class="section raw-data">
    <h2>Full Application Responses</h2>
    {format_fields(fields, settings)}
  </div>

  <div class="footer">
    <p>This application was submitted via your website's RA application form.</p>
    <p>Timestamp: {stamp}</p>
  </div>
</body>
</html>
"""


def subject_for(name: str, settings: Settings) -> str:
    return f"{settings.email_tag} Application from {name}"


def error_subject(settings: Settings) -> str:
    return f"{settings.email_tag} ERROR Processing Application"


def error_body(message: str, raw: str = "") -> str:
    body = f"An error occurred while processing a new RA application:\n\n{message}\n\n"
    if raw:
        body += f"Raw submission data:\n{raw}\n\n"
    body += "Please check the Google Sheet directly for the submission."
    return body

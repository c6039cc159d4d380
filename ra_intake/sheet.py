import os
from typing import Dict, List, Optional

from googleapiclient.discovery import build
from google.oauth2.credentials import Credentials

from ra_intake.config import Settings

SCOPES = ['https://www.googleapis.com/auth/spreadsheets.readonly']


def read_rows_oauth(token_path, spreadsheet_id, range_name) -> List[List[str]]:
    if not os.path.exists(token_path):
        raise FileNotFoundError(f"Google token not found at {token_path}; run quickstart.py first")
    creds = Credentials.from_authorized_user_file(token_path, SCOPES)
    service = build('sheets', 'v4', credentials=creds, cache_discovery=False)
    return service.spreadsheets().values().get(
        spreadsheetId=spreadsheet_id,
        range=range_name,
    ).execute().get('values', [])


def latest_named_values(rows: List[List[str]]) -> Optional[Dict[str, List[str]]]:
    """Header row + last row -> {question: [answer]}, as the form trigger delivers them."""
    if len(rows) < 2:
        return None
    headers, last = rows[0], rows[-1]
    return {h: [last[i] if i < len(last) else ""] for i, h in enumerate(headers)}


def fetch_latest_named_values(settings: Settings) -> Optional[Dict[str, List[str]]]:
    rows = read_rows_oauth(settings.google_token_path, settings.spreadsheet_id, settings.sheet_range)
    return latest_named_values(rows)

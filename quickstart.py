from google_auth_oauthlib.flow import InstalledAppFlow
from google.oauth2.credentials import Credentials
from google.auth.transport.requests import Request
import os

SCOPES = [
    'https://www.googleapis.com/auth/gmail.send',
    'https://www.googleapis.com/auth/spreadsheets.readonly'
]

def run(token_path='token.json', secrets_path='credentials.json'):
    creds = None
    if os.path.exists(token_path):
        creds = Credentials.from_authorized_user_file(token_path, SCOPES)
    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            creds.refresh(Request())
        else:
            flow = InstalledAppFlow.from_client_secrets_file(secrets_path, SCOPES)
            # Fixed port + consent prompt so a refresh_token is always issued
            creds = flow.run_local_server(host='localhost', port=8080, access_type='offline', prompt='consent')
        with open(token_path, 'w') as f:
            f.write(creds.to_json())
    print('✅ Google token ready (covers Gmail send + Sheets read).')

if __name__ == '__main__':
    run(os.getenv('GOOGLE_TOKEN_PATH', 'token.json'))

from types import SimpleNamespace

import pytest

from ra_intake.config import Settings


class FakeMailer:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    def send(self, to, subject, text_body="", html_body=None, sender_name=None):
        if self.fail:
            raise RuntimeError("gmail is down")
        self.sent.append({"to": to, "subject": subject, "text_body": text_body,
                          "html_body": html_body, "sender_name": sender_name})
        return f"msg-{len(self.sent)}"


class FakeCompletions:
    def __init__(self, content="<h3>Candidate Profile</h3><p>Promising.</p>", error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    def __init__(self, **kwargs):
        self.completions = FakeCompletions(**kwargs)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def settings():
    return Settings(recipient_email="prof@example.edu")


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def openai_client():
    return FakeOpenAI()


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

import pytest

from ra_intake.intake import from_webhook_payload
from ra_intake.pipeline import handle_form_submit, handle_webhook, process_submission
from ra_intake.summarizer import NOT_CONFIGURED_HTML, SummaryStatus
from tests.conftest import FakeMailer, FakeOpenAI

SCENARIO = b'{"name":"Test Applicant","email":"test@example.com","projects":"Social Norms of Social Media"}'


class TestProcessSubmission:
    def test_sends_one_html_report(self, settings, mailer, openai_client, api_key):
        sub = from_webhook_payload({"name": "Ann", "email": "a@b.c"}, settings)
        result = process_submission(sub, settings, mailer, client=openai_client)

        assert result.status is SummaryStatus.OK
        assert len(mailer.sent) == 1
        mail = mailer.sent[0]
        assert mail["to"] == "prof@example.edu"
        assert mail["subject"] == "[RA_Request_web] Application from Ann"
        assert mail["sender_name"] == "RA Application System"
        assert "Promising." in mail["html_body"]


class TestWebhookPath:
    def test_scenario(self, settings, mailer, openai_client, api_key):
        assert handle_webhook(SCENARIO, settings, mailer, client=openai_client) == {"status": "success"}

        assert len(openai_client.completions.calls) == 1
        prompt = openai_client.completions.calls[0]["messages"][1]["content"]
        assert "**Full Name:** Test Applicant" in prompt
        assert len(mailer.sent) == 1
        assert mailer.sent[0]["subject"].startswith("[RA_Request_web] Application from Test Applicant")

    def test_missing_key_still_completes(self, settings, mailer, no_api_key):
        assert handle_webhook(SCENARIO, settings, mailer)["status"] == "success"
        assert len(mailer.sent) == 1
        assert NOT_CONFIGURED_HTML in mailer.sent[0]["html_body"]

    def test_malformed_body(self, settings, mailer, openai_client, api_key):
        result = handle_webhook(b"not json", settings, mailer, client=openai_client)
        assert result["status"] == "error"
        assert "Invalid JSON" in result["message"]
        assert len(mailer.sent) == 1
        assert mailer.sent[0]["subject"] == "[RA_Request_web] ERROR Processing Application"
        assert "not json" in mailer.sent[0]["text_body"]
        assert mailer.sent[0]["html_body"] is None
        assert openai_client.completions.calls == []

    def test_empty_body(self, settings, mailer):
        result = handle_webhook(b"", settings, mailer)
        assert result == {"status": "error", "message": "No POST data received"}
        assert len(mailer.sent) == 1

    def test_error_mail_failure_is_swallowed(self, settings, no_api_key):
        result = handle_webhook(SCENARIO, settings, FakeMailer(fail=True))
        assert result == {"status": "error", "message": "gmail is down"}

    def test_duplicate_delivery_sends_twice(self, settings, mailer, openai_client, api_key):
        handle_webhook(SCENARIO, settings, mailer, client=openai_client)
        handle_webhook(SCENARIO, settings, mailer, client=openai_client)
        assert len(mailer.sent) == 2
        assert len(openai_client.completions.calls) == 2


class FlakyMailer(FakeMailer):
    """Fails the first send only."""

    def send(self, *args, **kwargs):
        if not getattr(self, "_failed", False):
            self._failed = True
            raise RuntimeError("quota exceeded")
        return super().send(*args, **kwargs)


class TestFormPath:
    def test_success(self, settings, mailer, openai_client, api_key):
        result = handle_form_submit({"Full Name": ["Jane Doe"], "Email": ["jane@x.com"],
                                     "Timestamp": ["1/1/2026"]}, settings, mailer, client=openai_client)
        assert result.status is SummaryStatus.OK
        assert mailer.sent[0]["subject"] == "[RA_Request_web] Application from Jane Doe"
        assert "jane@x.com" in mailer.sent[0]["html_body"]
        assert "1/1/2026" not in mailer.sent[0]["html_body"]

    def test_send_failure_becomes_error_notification(self, settings, no_api_key):
        mailer = FlakyMailer()
        assert handle_form_submit({"Full Name": ["Jane Doe"]}, settings, mailer) is None
        assert len(mailer.sent) == 1
        assert mailer.sent[0]["subject"].endswith("ERROR Processing Application")
        assert "quota exceeded" in mailer.sent[0]["text_body"]

    def test_summarizer_failure_does_not_abort(self, settings, mailer, api_key):
        client = FakeOpenAI(error=ConnectionError("network down"))
        result = handle_form_submit({"Full Name": ["Jane Doe"]}, settings, mailer, client=client)
        assert result.status is SummaryStatus.EXCEPTION
        assert "AI summary unavailable: network down" in mailer.sent[0]["html_body"]

    def test_error_body_carries_the_event(self, settings, no_api_key):
        mailer = FlakyMailer()
        handle_form_submit({"Full Name": ["Jane Doe"]}, settings, mailer)
        assert '"Full Name": ["Jane Doe"]' in mailer.sent[0]["text_body"]

    @pytest.mark.parametrize("named_values", [None, {}])
    def test_missing_named_values_sends_error_notice(self, settings, mailer, named_values):
        assert handle_form_submit(named_values, settings, mailer, raw="garbage") is None
        assert len(mailer.sent) == 1
        assert mailer.sent[0]["subject"] == "[RA_Request_web] ERROR Processing Application"
        assert "Form event has no namedValues" in mailer.sent[0]["text_body"]
        assert "garbage" in mailer.sent[0]["text_body"]

    def test_failing_error_notice_propagates(self, settings, no_api_key):
        with pytest.raises(RuntimeError, match="gmail is down"):
            handle_form_submit({"Full Name": ["Jane Doe"]}, settings, FakeMailer(fail=True))

"""
Tests for webhook notifications.
"""

import json

import requests
import responses

from deadlinks.models import BrokenLink
from deadlinks.notify import NullNotifier, WebhookNotifier, format_message

WEBHOOK = "https://hooks.example.com/webhook"
LINK = BrokenLink("https://example.com/b", "https://example.com/a", 404, "Not Found")


def test_format_message():
    message = format_message(LINK)
    assert "[URL](https://example.com/b)" in message
    assert "status code 404" in message
    assert message.endswith("URL appears on page: https://example.com/a")


def test_format_message_transport_error_uses_code():
    link = BrokenLink("https://down.example/", "https://example.com/", None, "ETIMEDOUT")
    assert "status code ETIMEDOUT" in format_message(link)


@responses.activate
def test_webhook_posts_json_payload():
    responses.add(responses.POST, WEBHOOK, status=204)

    notifier = WebhookNotifier(WEBHOOK)
    notifier.notify(LINK)
    notifier.close()

    assert len(responses.calls) == 1
    request = responses.calls[0].request
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.body) == {"content": format_message(LINK)}


@responses.activate
def test_webhook_failure_does_not_raise(caplog):
    responses.add(responses.POST, WEBHOOK, body=requests.exceptions.ConnectionError("unreachable"))

    notifier = WebhookNotifier(WEBHOOK)
    notifier.notify(LINK)
    notifier.close()

    assert "Webhook delivery failed" in caplog.text


@responses.activate
def test_webhook_error_status_logged(caplog):
    responses.add(responses.POST, WEBHOOK, status=500)

    notifier = WebhookNotifier(WEBHOOK)
    notifier.notify(LINK)
    notifier.close()

    assert "Webhook delivery failed" in caplog.text


def test_null_notifier_is_noop():
    notifier = NullNotifier()
    notifier.notify(LINK)
    notifier.close()


@responses.activate
def test_close_without_wait_still_delivers_queued():
    responses.add(responses.POST, WEBHOOK, status=204)

    notifier = WebhookNotifier(WEBHOOK)
    notifier.notify(LINK)
    notifier.close(wait=False)
    notifier._executor.shutdown(wait=True)

    assert len(responses.calls) == 1

from unittest.mock import patch

from amazon_shopping.errors import ProviderRejected
from amazon_shopping.sentry import (
    _enrich_sentry_event,
    capture_provider_error,
    initialize_sentry,
)


def test_initialize_skips_without_dsn():
    with patch("amazon_shopping.sentry.config.SENTRY_DSN", ""), \
         patch("amazon_shopping.sentry.sentry_sdk.init") as mock_init:
        assert initialize_sentry() is False
        mock_init.assert_not_called()


def test_initialize_with_dsn():
    with patch("amazon_shopping.sentry.config.SENTRY_DSN", "https://key@sentry.example/1"), \
         patch("amazon_shopping.sentry.sentry_sdk.init") as mock_init:
        assert initialize_sentry() is True
        assert mock_init.call_args.kwargs["dsn"] == "https://key@sentry.example/1"
        assert mock_init.call_args.kwargs["send_default_pii"] is False


def test_enrich_event_adds_tags_and_fingerprint():
    event = {"exception": {"values": [{"type": "ProviderRejected", "module": "amazon_shopping.errors"}]}}

    enriched = _enrich_sentry_event(event, {})

    assert enriched["tags"]["system"] == "amazon-shopping"
    assert enriched["fingerprint"] == ["{{ default }}", "ProviderRejected", "amazon_shopping.errors"]


def test_capture_is_noop_without_dsn():
    with patch("amazon_shopping.sentry.config.SENTRY_DSN", ""), \
         patch("amazon_shopping.sentry.sentry_sdk.capture_exception") as mock_capture:
        capture_provider_error("search_products", ProviderRejected("AccessDenied: nope"))
        mock_capture.assert_not_called()

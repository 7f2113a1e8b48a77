"""Tests for log redaction and request id handling."""

import pytest

from nativespeak.middleware.logging import REDACTED, redact_secrets
from nativespeak.middleware.request_id import resolve_request_id


class TestRedaction:
    def test_masks_credential_keys(self):
        event = {"event": "login", "password": "senha123", "token": "abc", "user_id": "u1"}
        result = redact_secrets(None, "info", event)
        assert result["password"] == REDACTED
        assert result["token"] == REDACTED
        assert result["user_id"] == "u1"
        assert result["event"] == "login"

    def test_leaves_clean_events_alone(self):
        event = {"event": "credits_adjusted", "amount": 5}
        assert redact_secrets(None, "info", dict(event)) == event


class TestResolveRequestId:
    def test_keeps_well_formed_id(self):
        assert resolve_request_id("abc-123.x:y_z") == "abc-123.x:y_z"

    @pytest.mark.parametrize("incoming", [None, "", "has space", "x" * 129, "line\nbreak"])
    def test_mints_uuid_for_missing_or_malformed(self, incoming):
        minted = resolve_request_id(incoming)
        assert minted != incoming
        assert len(minted) == 36

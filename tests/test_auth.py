"""Unit tests for the shared-secret rate limit bypass."""

from unittest.mock import patch

from app.core.auth import has_bypass_key, hash_api_key


class TestHasBypassKey:
    """Test bypass key matching."""

    @patch("app.core.auth.settings")
    def test_matching_key(self, mock_settings) -> None:
        mock_settings.app.api_key = "s3cret"
        assert has_bypass_key("s3cret") is True

    @patch("app.core.auth.settings")
    def test_wrong_key(self, mock_settings) -> None:
        mock_settings.app.api_key = "s3cret"
        assert has_bypass_key("guess") is False

    @patch("app.core.auth.settings")
    def test_missing_header(self, mock_settings) -> None:
        mock_settings.app.api_key = "s3cret"
        assert has_bypass_key(None) is False
        assert has_bypass_key("") is False

    @patch("app.core.auth.settings")
    def test_no_key_configured_never_bypasses(self, mock_settings) -> None:
        """An unset secret must not match an empty or missing header."""
        for configured in (None, ""):
            mock_settings.app.api_key = configured
            assert has_bypass_key("") is False
            assert has_bypass_key(None) is False
            assert has_bypass_key("anything") is False

    @patch("app.core.auth.settings")
    def test_key_is_case_sensitive(self, mock_settings) -> None:
        mock_settings.app.api_key = "S3cret"
        assert has_bypass_key("s3cret") is False

    @patch("app.core.auth.settings")
    def test_mismatch_logs_hash_only(self, mock_settings, caplog) -> None:
        mock_settings.app.api_key = "s3cret"

        with caplog.at_level("WARNING", logger="app.core.auth"):
            has_bypass_key("leaked-guess")

        record = next(r for r in caplog.records if r.getMessage() == "auth.bypass_key_mismatch")
        assert record.api_key_hash == hash_api_key("leaked-guess")
        assert "leaked-guess" not in caplog.text


def test_hash_api_key_is_short_and_stable() -> None:
    assert hash_api_key("abc") == hash_api_key("abc")
    assert len(hash_api_key("abc")) == 16

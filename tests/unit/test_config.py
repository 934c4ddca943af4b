"""Unit tests for application settings."""

import pydantic
import pytest

from finetrack.config import CommentSettings, Settings
from finetrack.domain.value import MAX_COMMENT_LENGTH


class TestCommentSettings:
    """Tests for comment length configuration."""

    def test_default_matches_stored_limit(self):
        assert CommentSettings().max_length == MAX_COMMENT_LENGTH

    def test_shorter_limit_is_accepted(self):
        assert CommentSettings(max_length=500).max_length == 500

    @pytest.mark.parametrize("max_length", [0, MAX_COMMENT_LENGTH + 1, 10_000])
    def test_out_of_range_limit_is_rejected(self, max_length):
        with pytest.raises(pydantic.ValidationError):
            CommentSettings(max_length=max_length)

    def test_nested_env_override_is_bounded(self, monkeypatch):
        # Arrange
        monkeypatch.setenv("COMMENTS__MAX_LENGTH", str(MAX_COMMENT_LENGTH * 2))

        # Act & Assert
        with pytest.raises(pydantic.ValidationError):
            Settings()

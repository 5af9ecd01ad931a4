"""
Unit tests for bearer token extraction in teamtasks/api/token.py
"""

import pytest

from teamtasks.api.token import RawToken, VerifiedToken
from teamtasks.core.errors import ApiError, AuthenticationError


class TestRawToken:

    def test_bearer_header(self):
        assert RawToken.from_header("Bearer abc123").value == "abc123"

    def test_scheme_is_not_checked(self):
        assert RawToken.from_header("Token abc123").value == "abc123"

    @pytest.mark.parametrize("header", [None, "", "abc123", "Bearer"])
    def test_missing_token_is_empty(self, header):
        token = RawToken.from_header(header)

        assert token.value == ""
        assert not token

    def test_only_second_word_is_used(self):
        assert RawToken.from_header("Bearer abc 123").value == "abc"


async def test_empty_token_is_rejected_without_database():
    with pytest.raises(ApiError) as exc_info:
        await VerifiedToken.from_raw(None, RawToken())

    assert exc_info.value.status_code == 401
    assert exc_info.value.error is AuthenticationError.InvalidToken

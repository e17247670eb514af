# Tests for the authorization code exchange

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from github_oauth import (
    NetworkError,
    ProviderDenialError,
    TOKEN_URL,
    TokenExchangeError,
    TokenResponse,
    exchange_code_for_token,
    parse_token_payload,
)

REDIRECT_URI = "http://localhost:4567/"


def _response(status_code=200, payload=None, json_error=False):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = json.dumps(payload) if payload is not None else ""
    if json_error:
        resp.json.side_effect = json.JSONDecodeError("Expecting value", "", 0)
    else:
        resp.json.return_value = payload
    return resp


def _install_client(mock_client_cls, post):
    mock_client = AsyncMock()
    mock_client.post = post
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_client_cls.return_value = mock_client
    return mock_client


class TestParseTokenPayload:
    def test_success(self):
        token = parse_token_payload({"access_token": "tok_123", "token_type": "bearer", "scope": "repo"})
        assert token == TokenResponse(access_token="tok_123", token_type="bearer", scope=frozenset({"repo"}))

    def test_comma_separated_scopes(self):
        token = parse_token_payload({"access_token": "t", "token_type": "bearer", "scope": "repo,read:org, gist"})
        assert token.scope == frozenset({"repo", "read:org", "gist"})

    def test_missing_optional_fields(self):
        token = parse_token_payload({"access_token": "t"})
        assert token.token_type == "bearer"
        assert token.scope == frozenset()

    def test_error_payload(self):
        with pytest.raises(ProviderDenialError) as excinfo:
            parse_token_payload({
                "error": "bad_verification_code",
                "error_description": "The code passed is incorrect or expired.",
            })
        assert excinfo.value.error == "bad_verification_code"
        assert "The code passed is incorrect or expired." in str(excinfo.value)

    @pytest.mark.parametrize("payload", [
        {}, {"token_type": "bearer"}, [], "tok", {"access_token": 5},
        {"access_token": "t", "scope": ["repo"]},
        {"access_token": "t", "scope": 7},
        {"access_token": "t", "token_type": {"kind": "bearer"}},
    ])
    def test_malformed_payload(self, payload):
        with pytest.raises(TokenExchangeError):
            parse_token_payload(payload)

    def test_repr_hides_token(self):
        token = parse_token_payload({"access_token": "tok_123"})
        assert "tok_123" not in repr(token)


class TestExchangeCodeForToken:
    @pytest.mark.asyncio
    async def test_success_sends_form_fields(self, credentials):
        post = AsyncMock(return_value=_response(payload={
            "access_token": "tok_123", "token_type": "bearer", "scope": "repo",
        }))
        with patch("httpx.AsyncClient") as mock_client_cls:
            _install_client(mock_client_cls, post)
            token = await exchange_code_for_token(credentials, "code-1", REDIRECT_URI)

        assert token == TokenResponse(access_token="tok_123", token_type="bearer", scope=frozenset({"repo"}))
        post.assert_awaited_once()
        args, kwargs = post.call_args
        assert args[0] == TOKEN_URL
        assert kwargs["data"] == {
            "client_id": "abc",
            "client_secret": "shh-very-secret",
            "code": "code-1",
            "redirect_uri": REDIRECT_URI,
        }
        assert kwargs["headers"]["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_provider_error_is_not_retried(self, credentials):
        post = AsyncMock(return_value=_response(payload={"error": "incorrect_client_credentials"}))
        with patch("httpx.AsyncClient") as mock_client_cls:
            _install_client(mock_client_cls, post)
            with pytest.raises(ProviderDenialError):
                await exchange_code_for_token(credentials, "code-1", REDIRECT_URI, retries=3, backoff=0)

        assert post.await_count == 1

    @pytest.mark.parametrize("status_code", [400, 401, 404, 500, 503])
    @pytest.mark.asyncio
    async def test_non_2xx_is_fatal(self, credentials, status_code):
        post = AsyncMock(return_value=_response(status_code=status_code, payload={"message": "nope"}))
        with patch("httpx.AsyncClient") as mock_client_cls:
            _install_client(mock_client_cls, post)
            with pytest.raises(TokenExchangeError, match=str(status_code)):
                await exchange_code_for_token(credentials, "code-1", REDIRECT_URI, retries=3, backoff=0)

        assert post.await_count == 1

    @pytest.mark.asyncio
    async def test_non_json_body_is_fatal(self, credentials):
        post = AsyncMock(return_value=_response(json_error=True))
        with patch("httpx.AsyncClient") as mock_client_cls:
            _install_client(mock_client_cls, post)
            with pytest.raises(TokenExchangeError, match="not JSON"):
                await exchange_code_for_token(credentials, "code-1", REDIRECT_URI, backoff=0)

        assert post.await_count == 1

    @pytest.mark.asyncio
    async def test_unexpected_scope_type_is_fatal(self, credentials):
        post = AsyncMock(return_value=_response(payload={"access_token": "tok_123", "scope": ["repo"]}))
        with patch("httpx.AsyncClient") as mock_client_cls:
            _install_client(mock_client_cls, post)
            with pytest.raises(TokenExchangeError) as excinfo:
                await exchange_code_for_token(credentials, "code-1", REDIRECT_URI, backoff=0)

        assert post.await_count == 1
        assert "tok_123" not in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_transport_error_is_retried(self, credentials):
        post = AsyncMock(side_effect=[
            httpx.ConnectError("connection refused"),
            httpx.ReadTimeout("timed out"),
            _response(payload={"access_token": "tok_123", "token_type": "bearer", "scope": "repo"}),
        ])
        with patch("httpx.AsyncClient") as mock_client_cls:
            _install_client(mock_client_cls, post)
            token = await exchange_code_for_token(credentials, "code-1", REDIRECT_URI, retries=2, backoff=0)

        assert token.access_token == "tok_123"
        assert post.await_count == 3

    @pytest.mark.asyncio
    async def test_retries_back_off_exponentially(self, credentials):
        post = AsyncMock(side_effect=httpx.ConnectError("connection refused"))
        with patch("httpx.AsyncClient") as mock_client_cls, \
                patch("github_oauth.token_exchange.asyncio.sleep", new=AsyncMock()) as mock_sleep:
            _install_client(mock_client_cls, post)
            with pytest.raises(NetworkError):
                await exchange_code_for_token(credentials, "code-1", REDIRECT_URI, retries=3, backoff=0.5)

        assert post.await_count == 4
        assert [c.args[0] for c in mock_sleep.await_args_list] == [0.5, 1.0, 2.0]

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_network_error(self, credentials):
        post = AsyncMock(side_effect=httpx.ConnectError("connection refused"))
        with patch("httpx.AsyncClient") as mock_client_cls:
            _install_client(mock_client_cls, post)
            with pytest.raises(NetworkError, match="2 attempt"):
                await exchange_code_for_token(credentials, "code-1", REDIRECT_URI, retries=1, backoff=0)

        assert post.await_count == 2

    @pytest.mark.asyncio
    async def test_secrets_stay_out_of_errors_and_logs(self, credentials, caplog):
        caplog.set_level("DEBUG")
        post = AsyncMock(side_effect=httpx.ConnectError("shh-very-secret code-1"))
        with patch("httpx.AsyncClient") as mock_client_cls:
            _install_client(mock_client_cls, post)
            with pytest.raises(NetworkError) as excinfo:
                await exchange_code_for_token(credentials, "code-1", REDIRECT_URI, retries=0, backoff=0)

        assert "shh-very-secret" not in str(excinfo.value)
        assert "shh-very-secret" not in caplog.text
        assert "code-1" not in caplog.text
        assert excinfo.value.__cause__ is None

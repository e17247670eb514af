"""OAuth token exchange for GitHub authentication"""

import asyncio
import json
import logging

import httpx

from settings import EXCHANGE_BACKOFF, EXCHANGE_RETRIES, EXCHANGE_TIMEOUT
from .constants import GRANTED_SCOPE_DELIMITER, TOKEN_URL
from .errors import NetworkError, ProviderDenialError, TokenExchangeError
from .models import AppCredentials, TokenResponse


logger = logging.getLogger(__name__)


def parse_token_payload(payload) -> TokenResponse:
    """Turn a token endpoint JSON body into a TokenResponse

    Raises:
        ProviderDenialError: If the body carries an ``error`` field
        TokenExchangeError: If the body is malformed
    """
    if not isinstance(payload, dict):
        raise TokenExchangeError("Token endpoint returned an unexpected response body")

    # GitHub reports exchange failures with HTTP 200 and an error field
    if payload.get("error"):
        raise ProviderDenialError(payload["error"], payload.get("error_description"))

    access_token = payload.get("access_token")
    if not access_token or not isinstance(access_token, str):
        raise TokenExchangeError("Token endpoint response is missing the access token")

    token_type = payload.get("token_type") or "bearer"
    granted = payload.get("scope") or ""
    if not isinstance(token_type, str) or not isinstance(granted, str):
        raise TokenExchangeError("Token endpoint returned an unexpected token type or scope value")

    scope = frozenset(
        part.strip() for part in granted.split(GRANTED_SCOPE_DELIMITER) if part.strip()
    )

    return TokenResponse(
        access_token=access_token,
        token_type=token_type,
        scope=scope,
    )


async def exchange_code_for_token(
    credentials: AppCredentials,
    code: str,
    redirect_uri: str,
    token_url: str = TOKEN_URL,
    retries: int = EXCHANGE_RETRIES,
    backoff: float = EXCHANGE_BACKOFF,
    timeout: float = EXCHANGE_TIMEOUT,
) -> TokenResponse:
    """Exchange authorization code for an access token

    Args:
        credentials: OAuth App credentials
        code: Authorization code from the verified callback
        redirect_uri: Callback address used in the authorization request
        token_url: Token endpoint
        retries: Extra attempts after a transport failure
        backoff: Base delay in seconds, doubled after every failed attempt
        timeout: Per-request timeout in seconds

    Returns:
        TokenResponse

    Raises:
        NetworkError: If every attempt failed at the transport level
        TokenExchangeError: On a non-2xx or malformed response (not retried)
        ProviderDenialError: If GitHub answered with an error payload (not retried)
    """
    data = {
        "client_id": credentials.client_id,
        "client_secret": credentials.client_secret,
        "code": code,
        "redirect_uri": redirect_uri,
    }
    attempts = max(0, retries) + 1

    for attempt in range(attempts):
        logger.info(f"Exchanging authorization code at {token_url} (attempt {attempt + 1}/{attempts})")
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    token_url,
                    data=data,
                    headers={"Accept": "application/json"},
                    timeout=timeout,
                )
        except httpx.TransportError as e:
            # Exception text can echo the request; log the class only
            logger.warning(f"Token exchange request failed: {type(e).__name__}")
            if attempt + 1 >= attempts:
                raise NetworkError(
                    f"Could not reach GitHub after {attempts} attempt(s) ({type(e).__name__})"
                ) from None
            delay = backoff * (2 ** attempt)
            if delay > 0:
                await asyncio.sleep(delay)
            continue

        logger.debug(f"Token exchange response status: {response.status_code}")

        if not 200 <= response.status_code < 300:
            raise TokenExchangeError(f"Token exchange failed with HTTP {response.status_code}")

        try:
            payload = response.json()
        except (json.JSONDecodeError, ValueError):
            raise TokenExchangeError("Token endpoint returned a response that is not JSON") from None

        token = parse_token_payload(payload)
        logger.info("Successfully exchanged authorization code for a token")
        return token

    # Unreachable: the loop either returns or raises
    raise NetworkError("Token exchange was not attempted")

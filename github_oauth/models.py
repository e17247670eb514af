"""Data models for the GitHub OAuth web application flow"""

import json
from dataclasses import dataclass, field
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class AppCredentials:
    """Identity of one registered GitHub OAuth App

    Attributes:
        client_id: OAuth App client id
        client_secret: OAuth App client secret
        alias: Name the credentials are stored under, if any
    """
    client_id: str
    client_secret: str = field(repr=False)
    alias: Optional[str] = None

    def to_json(self) -> str:
        """Serialize for the keychain (the alias is the keychain key, not stored)"""
        return json.dumps({"client_id": self.client_id, "client_secret": self.client_secret})

    @classmethod
    def from_json(cls, value: str, alias: Optional[str] = None) -> "AppCredentials":
        """Load from a keychain entry

        Raises:
            ValueError: If the entry is not a JSON object with both fields
        """
        data = json.loads(value)
        if not isinstance(data, dict):
            raise ValueError("credential entry is not a JSON object")
        client_id = data.get("client_id")
        client_secret = data.get("client_secret")
        if not client_id or not client_secret:
            raise ValueError("credential entry is missing client_id or client_secret")
        return cls(client_id=client_id, client_secret=client_secret, alias=alias)


@dataclass(frozen=True)
class AuthorizationRequest:
    """One authorization attempt, bound to its state token"""
    state: str = field(repr=False)
    scopes: FrozenSet[str]
    redirect_uri: str
    client_id: str
    url: str = field(repr=False, default="")


@dataclass(frozen=True)
class CallbackResult:
    """Query parameters of the OAuth redirect

    Either ``code`` and ``state`` are set, or ``error`` (with an optional
    ``error_description``) is.
    """
    code: Optional[str] = field(default=None, repr=False)
    state: Optional[str] = field(default=None, repr=False)
    error: Optional[str] = None
    error_description: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class TokenResponse:
    """Successful result of the code-for-token exchange"""
    access_token: str = field(repr=False)
    token_type: str = "bearer"
    scope: FrozenSet[str] = frozenset()

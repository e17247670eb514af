"""OAuth App credential storage in the OS keychain"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from settings import KEYRING_SERVICE
from github_oauth.errors import ConfigurationError
from github_oauth.models import AppCredentials

logger = logging.getLogger(__name__)


class CredentialStore(ABC):
    """Where OAuth App credentials live, keyed by alias"""

    @abstractmethod
    def get(self, alias: str) -> Optional[AppCredentials]:
        """Return the credentials stored under alias, or None"""
        pass

    @abstractmethod
    def set(self, alias: str, credentials: AppCredentials) -> None:
        """Store credentials under alias, replacing any previous entry"""
        pass

    @abstractmethod
    def delete(self, alias: str) -> bool:
        """Forget the credentials stored under alias

        Returns:
            True if an entry was removed
        """
        pass


class KeyringCredentialStore(CredentialStore):
    """Credentials as one JSON entry per alias in the platform keychain

    The backend (macOS Keychain, Secret Service, Windows Credential Locker)
    is whatever ``keyring`` resolves for the host.
    """

    def __init__(self, service: str = KEYRING_SERVICE):
        self.service = service

    def get(self, alias: str) -> Optional[AppCredentials]:
        try:
            value = keyring.get_password(self.service, alias)
        except KeyringError as e:
            logger.warning(f"Could not read keychain entry for '{alias}': {e}")
            return None

        if value is None:
            logger.debug(f"No keychain entry for '{alias}'")
            return None

        try:
            return AppCredentials.from_json(value, alias=alias)
        except ValueError as e:
            # Unreadable entries are re-prompted and overwritten
            logger.warning(f"Ignoring unreadable keychain entry for '{alias}': {e}")
            return None

    def set(self, alias: str, credentials: AppCredentials) -> None:
        try:
            keyring.set_password(self.service, alias, credentials.to_json())
        except KeyringError as e:
            raise ConfigurationError(f"Could not save app credentials to the keychain: {e}") from e
        logger.debug(f"Saved keychain entry for '{alias}'")

    def delete(self, alias: str) -> bool:
        try:
            keyring.delete_password(self.service, alias)
        except PasswordDeleteError:
            return False
        except KeyringError as e:
            raise ConfigurationError(f"Could not remove app credentials from the keychain: {e}") from e
        logger.debug(f"Deleted keychain entry for '{alias}'")
        return True


class MemoryCredentialStore(CredentialStore):
    """Process-local store, for runs where no keychain should be touched"""

    def __init__(self, entries: Optional[Dict[str, AppCredentials]] = None):
        self._entries: Dict[str, AppCredentials] = dict(entries or {})

    def get(self, alias: str) -> Optional[AppCredentials]:
        return self._entries.get(alias)

    def set(self, alias: str, credentials: AppCredentials) -> None:
        self._entries[alias] = credentials

    def delete(self, alias: str) -> bool:
        return self._entries.pop(alias, None) is not None

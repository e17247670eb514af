"""Shared utilities package for octopat"""

from .credential_store import CredentialStore, KeyringCredentialStore, MemoryCredentialStore
from .clipboard import copy_token
from .debug_console import (
    DebugCapturingConsole,
    SecretRedactingFilter,
    configure_logging,
    create_debug_console,
    setup_debug_logger,
)

__all__ = [
    "CredentialStore",
    "KeyringCredentialStore",
    "MemoryCredentialStore",
    "copy_token",
    "DebugCapturingConsole",
    "SecretRedactingFilter",
    "configure_logging",
    "create_debug_console",
    "setup_debug_logger",
]

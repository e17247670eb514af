"""GitHub OAuth App scopes"""

import re
from typing import FrozenSet, Iterable

from .errors import ConfigurationError

# https://docs.github.com/en/apps/oauth-apps/building-oauth-apps/scopes-for-oauth-apps
GITHUB_SCOPES = (
    "repo",
    "repo:status",
    "repo_deployment",
    "public_repo",
    "repo:invite",
    "security_events",
    "admin:repo_hook",
    "write:repo_hook",
    "read:repo_hook",
    "admin:org",
    "write:org",
    "read:org",
    "admin:public_key",
    "write:public_key",
    "read:public_key",
    "admin:org_hook",
    "gist",
    "notifications",
    "user",
    "read:user",
    "user:email",
    "user:follow",
    "project",
    "read:project",
    "delete_repo",
    "write:packages",
    "read:packages",
    "delete:packages",
    "admin:gpg_key",
    "write:gpg_key",
    "read:gpg_key",
    "codespace",
    "workflow",
    "copilot",
    "write:discussion",
    "read:discussion",
    "admin:enterprise",
    "manage_runners:enterprise",
    "manage_billing:enterprise",
    "read:enterprise",
    "audit_log",
    "read:audit_log",
    "admin:ssh_signing_key",
    "write:ssh_signing_key",
    "read:ssh_signing_key",
)

DEFAULT_SCOPES = ("repo",)

_SPLIT_RE = re.compile(r"[\s,]+")


def parse_scopes(text: str) -> FrozenSet[str]:
    """Split a comma and/or whitespace separated scope string

    Args:
        text: e.g. "repo, read:org" or "repo read:org"

    Returns:
        Set of non-empty scope names
    """
    if not text:
        return frozenset()
    return frozenset(part for part in _SPLIT_RE.split(text.strip()) if part)


def validate_scopes(scopes: Iterable[str]) -> FrozenSet[str]:
    """Check requested scopes against the known GitHub scopes

    Raises:
        ConfigurationError: If the set is empty or contains unknown names
    """
    requested = frozenset(scopes)
    if not requested:
        raise ConfigurationError("At least one scope must be requested")

    unknown = sorted(requested.difference(GITHUB_SCOPES))
    if unknown:
        raise ConfigurationError(f"Unknown GitHub scope(s): {', '.join(unknown)}")
    return requested

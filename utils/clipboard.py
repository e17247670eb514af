"""Hand the dispensed token to the system clipboard"""

import logging

import pyperclip

from github_oauth.errors import ClipboardError

logger = logging.getLogger(__name__)


def copy_token(token: str) -> None:
    """Copy the token to the clipboard

    Raises:
        ClipboardError: If no clipboard mechanism is available
    """
    try:
        pyperclip.copy(token)
    except pyperclip.PyperclipException as e:
        # pyperclip's messages name the missing tool, never the copied text
        raise ClipboardError(f"Could not copy the token to the clipboard: {e}") from None
    logger.debug("Token copied to clipboard")

# Tests for handing the token to the clipboard

from unittest.mock import patch

import pyperclip
import pytest

from github_oauth import ClipboardError
from utils.clipboard import copy_token


def test_copies_token():
    with patch("utils.clipboard.pyperclip.copy") as copy:
        copy_token("tok_123")
    copy.assert_called_once_with("tok_123")


def test_missing_mechanism_is_a_clipboard_error():
    error = pyperclip.PyperclipException("Pyperclip could not find a copy/paste mechanism for your system.")
    with patch("utils.clipboard.pyperclip.copy", side_effect=error):
        with pytest.raises(ClipboardError, match="copy/paste mechanism") as excinfo:
            copy_token("tok_123")

    assert "tok_123" not in str(excinfo.value)

"""
Local OAuth callback listener

Receives exactly one terminal redirect from GitHub. Requests with a wrong or
missing state are answered with a generic failure page and do not end the
wait; the first valid callback (or a provider-reported error) does.
"""
import asyncio
import enum
import hmac
import html
import logging
from typing import Optional

from aiohttp import web

from settings import BIND_ADDRESS
from .constants import APP_SETTINGS_URL, CALLBACK_PATH, FAVICON_PATH
from .errors import (
    AuthorizationTimeoutError,
    ConfigurationError,
    ProviderDenialError,
    SecurityValidationError,
)
from .models import CallbackResult

logger = logging.getLogger(__name__)


class ListenerState(enum.Enum):
    """Lifecycle of a CallbackListener"""
    IDLE = "idle"
    LISTENING = "listening"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self in (ListenerState.COMPLETED, ListenerState.FAILED, ListenerState.TIMED_OUT)


_PAGE = """<!DOCTYPE html>
<html>
    <head>
        <meta charset="utf-8">
        <title>octopat</title>
        <style>
            body {{ font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Helvetica, Arial, sans-serif;
                   text-align: center; margin-top: 15vh; color: #24292f; }}
            p {{ color: #57606a; }}
        </style>
    </head>
    <body>
        <h1>{title}</h1>
        {body}
    </body>
</html>
"""


def _success_page(client_id: Optional[str]) -> str:
    body = "<p>Your token is on its way to the terminal. You can close this tab now.</p>"
    if client_id:
        link = html.escape(f"{APP_SETTINGS_URL}/{client_id}", quote=True)
        body += f'<p>Review or revoke this authorization <a href="{link}">on GitHub</a>.</p>'
    return _PAGE.format(title="&#10024; Authorized", body=body)


def _denied_page(error: str) -> str:
    body = (
        f"<p>GitHub reported: <code>{html.escape(error)}</code></p>"
        "<p>Return to the terminal for details. You can close this tab.</p>"
    )
    return _PAGE.format(title="Authorization failed", body=body)


_INVALID_PAGE = _PAGE.format(
    title="Invalid request",
    body="<p>This request could not be verified. Return to the terminal and try again.</p>",
)

_COMPLETED_PAGE = _PAGE.format(
    title="Nothing to do",
    body="<p>This authorization has already been handled. You can close this tab.</p>",
)

_ERROR_PAGE = _PAGE.format(
    title="Something went wrong",
    body="<p>The request could not be processed. Return to the terminal.</p>",
)


class CallbackListener:
    """Single-use local HTTP endpoint for the OAuth redirect"""

    def __init__(
        self,
        expected_state: str,
        port: int,
        host: str = BIND_ADDRESS,
        path: str = CALLBACK_PATH,
        client_id: Optional[str] = None,
    ):
        """
        Args:
            expected_state: State of the active authorization request
            port: Local port to bind
            host: Local address to bind (loopback only)
            path: Callback path registered with the OAuth App
            client_id: Shown on the success page as a link to the app's grant
        """
        if not expected_state:
            raise ConfigurationError("The callback listener needs an expected state")

        self.expected_state = expected_state
        self.port = port
        self.host = host
        self.path = path
        self.client_id = client_id
        self.state = ListenerState.IDLE
        self.rejected_count = 0

        self.app = web.Application()
        self.runner: Optional[web.AppRunner] = None
        self._outcome: Optional["asyncio.Future[CallbackResult]"] = None

        self.app.router.add_get(FAVICON_PATH, self._handle_favicon)
        self.app.router.add_get(self.path, self._handle_callback)

    async def __aenter__(self) -> "CallbackListener":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    def _transition(self, new_state: ListenerState, outcome=None) -> bool:
        """
        Move from LISTENING to a terminal state.

        Runs without awaiting, so on the event loop only one caller can win.

        Returns:
            True if this call performed the transition
        """
        if self.state is not ListenerState.LISTENING:
            return False

        self.state = new_state
        if self._outcome is not None and not self._outcome.done():
            if isinstance(outcome, BaseException):
                self._outcome.set_exception(outcome)
            elif outcome is not None:
                self._outcome.set_result(outcome)
            else:
                self._outcome.cancel()
        return True

    async def _handle_favicon(self, request: web.Request) -> web.Response:
        """Browsers always request this; it is never a callback"""
        return web.Response(status=204)

    def _html(self, page: str, status: int = 200) -> web.Response:
        return web.Response(
            text=page,
            content_type="text/html",
            status=status,
            headers={"Cache-Control": "no-store", "Referrer-Policy": "no-referrer"},
        )

    async def _handle_callback(self, request: web.Request) -> web.Response:
        """Handle OAuth callback request"""
        if self.state is not ListenerState.LISTENING:
            logger.debug("Ignoring callback received after the listener finished")
            return self._html(_COMPLETED_PAGE)

        try:
            result = CallbackResult(
                code=request.query.get("code"),
                state=request.query.get("state"),
                error=request.query.get("error"),
                error_description=request.query.get("error_description"),
            )

            if result.is_error:
                denial = ProviderDenialError(result.error, result.error_description)
                if self._transition(ListenerState.FAILED, denial):
                    logger.info(f"GitHub redirected with error '{result.error}'")
                    return self._html(_denied_page(result.error), status=400)
                return self._html(_COMPLETED_PAGE)

            try:
                self._validate(result)
            except SecurityValidationError as e:
                self.rejected_count += 1
                logger.warning(f"Rejected callback: {e}")
                return self._html(_INVALID_PAGE, status=400)

            if self._transition(ListenerState.COMPLETED, result):
                logger.info("Received a valid authorization callback")
                return self._html(_success_page(self.client_id))
            return self._html(_COMPLETED_PAGE)

        except Exception:
            # Never log request values, they carry the code
            logger.error("Unexpected error while handling callback")
            logger.debug("Callback handler failure", exc_info=True)
            return self._html(_ERROR_PAGE, status=500)

    def _validate(self, result: CallbackResult) -> None:
        """
        Check the callback against the active request.

        Raises:
            SecurityValidationError: If code or state is missing, or the state
                does not match
        """
        if not result.code or not result.state:
            raise SecurityValidationError("callback is missing the code or state parameter")

        if not hmac.compare_digest(result.state.encode("utf-8"), self.expected_state.encode("utf-8")):
            raise SecurityValidationError("callback state does not match the active request")

    async def start(self) -> None:
        """
        Bind the listener socket.

        Raises:
            ConfigurationError: If the port cannot be bound
        """
        if self.state is not ListenerState.IDLE:
            raise RuntimeError(f"Callback listener cannot start from state {self.state.value}")

        self._outcome = asyncio.get_running_loop().create_future()
        self.runner = web.AppRunner(self.app, access_log=None)
        await self.runner.setup()

        site = web.TCPSite(self.runner, host=self.host, port=self.port)
        try:
            await site.start()
        except OSError as e:
            await self.stop()
            raise ConfigurationError(
                f"Could not listen on {self.host}:{self.port} ({e.strerror or e}). "
                "Choose another port with --port."
            ) from e

        self.state = ListenerState.LISTENING
        logger.info(f"OAuth callback listener bound to {self.host}:{self.port}")

    async def wait(self, timeout: float) -> CallbackResult:
        """
        Wait for the terminal callback.

        Args:
            timeout: Maximum time to wait in seconds

        Returns:
            CallbackResult carrying a verified code

        Raises:
            AuthorizationTimeoutError: If no terminal callback arrived in time
            ProviderDenialError: If GitHub redirected with an error
        """
        if self._outcome is None:
            raise RuntimeError("Callback listener was not started")

        try:
            return await asyncio.wait_for(asyncio.shield(self._outcome), timeout=timeout)
        except asyncio.TimeoutError:
            self._transition(ListenerState.TIMED_OUT)
            logger.info(f"OAuth callback timeout after {timeout} seconds")
            raise AuthorizationTimeoutError(timeout) from None

    async def stop(self) -> None:
        """Release the socket. Safe to call more than once."""
        if self.state is ListenerState.LISTENING:
            self._transition(ListenerState.TIMED_OUT)

        runner, self.runner = self.runner, None
        if runner is not None:
            await runner.cleanup()
            logger.debug(f"OAuth callback listener on port {self.port} released")

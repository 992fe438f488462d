# api_client.py
"""
Power client for the Pterodactyl client API.
"""

import asyncio
import logging
import threading
from concurrent.futures import Future, wait
from typing import Any, Dict, List, Optional, Set
from urllib.parse import quote, urljoin

import aiohttp

from .config import EndpointConfig
from .const import LOG_BODY_LIMIT, LOOP_THREAD_NAME, POWER_PATH, SIGNAL_FIELD
from .exceptions import ProtocolError, TransportError
from .logger import SmartLogger
from .signals import PowerSignal

class PowerClient:
    """Sends power signals to panel servers looked up by their logical name.

    ``send_power_signal`` never blocks: the request runs on a background
    event loop owned by the client and the returned future is resolved from
    that thread. Coroutine callers can await ``async_send_power_signal``
    instead, which runs on their own loop.
    """

    def __init__(
        self,
        config: EndpointConfig,
        logger: Optional[logging.Logger] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self._config = config
        self._logger = SmartLogger(logger or logging.getLogger(__name__))
        # Caller-owned session, only used by the coroutine API
        self._session = session

        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._loop_session: Optional[aiohttp.ClientSession] = None
        self._pending: Set[Future] = set()
        self._closed = False

    @property
    def config(self) -> EndpointConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    def get_server_id(self, server_name: str) -> Optional[str]:
        """Return the panel server ID for a logical server name, or None."""
        return self._config.servers.get(server_name)

    def server_names(self) -> List[str]:
        return sorted(self._config.servers)

    def power_url(self, server_id: str) -> str:
        path = POWER_PATH.format(server_id=quote(server_id, safe=""))
        return urljoin(self._config.base_url, path)

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {self._config.token}",
        }

    @staticmethod
    def _check_request(server_id: str, signal: PowerSignal):
        if not isinstance(signal, PowerSignal):
            raise TypeError(f"signal must be a PowerSignal, got {signal!r}")
        if not server_id:
            raise ValueError("server_id must be a non-empty string")

    # -------------------------------------------------------------------------
    # Request
    # -------------------------------------------------------------------------

    async def _post_signal(
        self,
        session: aiohttp.ClientSession,
        server_name: str,
        server_id: str,
        signal: PowerSignal,
    ) -> None:
        """POST one power signal and translate the outcome."""
        url = self.power_url(server_id)
        self._logger.info(
            "Sending %s signal to server: %s (Pterodactyl server ID: %s)",
            signal.token, server_name, server_id,
        )

        kwargs: Dict[str, Any] = {}
        if self._config.request_timeout is not None:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=self._config.request_timeout)

        try:
            async with session.post(
                url,
                data={SIGNAL_FIELD: signal.token},
                headers=self._headers(),
                allow_redirects=False,
                **kwargs,
            ) as resp:
                if 200 <= resp.status < 300:
                    self._logger.success(
                        "Successfully sent %s signal to server: %s", signal.token, server_name
                    )
                    return

                try:
                    body = await resp.text(errors="replace")
                except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                    self._logger.debug("Could not read error body from %s: %s", url, e)
                    body = ""
                error = ProtocolError(
                    server_name, server_id, signal, resp.status, resp.reason, body
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.failure(
                "Failed to send %s signal to server: %s (%s)",
                signal.token, server_name, str(e) or e.__class__.__name__,
                exc=e,
            )
            raise TransportError(server_name, server_id, signal, e) from e

        self._logger.failure(
            "Failed to send %s signal to server: %s. Response: HTTP %s %s; body=%s",
            signal.token, server_name, error.status, error.reason or "",
            error.body[:LOG_BODY_LIMIT],
            exc=error,
        )
        raise error

    async def async_send_power_signal(
        self, server_name: str, server_id: str, signal: PowerSignal
    ) -> None:
        """Send a power signal from a coroutine.

        Raises TransportError or ProtocolError when the signal is not accepted,
        and RuntimeError once the client is closed, like send_power_signal.
        """
        self._check_request(server_id, signal)
        if self._closed:
            raise RuntimeError("PowerClient is closed")
        if self._session is not None:
            await self._post_signal(self._session, server_name, server_id, signal)
            return

        async with aiohttp.ClientSession() as session:
            await self._post_signal(session, server_name, server_id, signal)

    # -------------------------------------------------------------------------
    # Background loop
    # -------------------------------------------------------------------------

    @staticmethod
    def _run_loop(loop: asyncio.AbstractEventLoop):
        asyncio.set_event_loop(loop)
        loop.run_forever()

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        """Start the loop thread on first use. Caller holds the lock."""
        if self._loop is None:
            loop = asyncio.new_event_loop()
            thread = threading.Thread(
                target=self._run_loop, args=(loop,), name=LOOP_THREAD_NAME, daemon=True
            )
            thread.start()
            self._loop = loop
            self._thread = thread
        return self._loop

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Runs on the loop thread only."""
        if self._loop_session is None or self._loop_session.closed:
            self._loop_session = aiohttp.ClientSession()
            self._logger.debug("Created new aiohttp session")
        return self._loop_session

    async def _dispatch(self, server_name: str, server_id: str, signal: PowerSignal) -> None:
        session = await self._ensure_session()
        await self._post_signal(session, server_name, server_id, signal)

    def _discard_pending(self, future: Future):
        with self._lock:
            self._pending.discard(future)

    def send_power_signal(
        self, server_name: str, server_id: str, signal: PowerSignal
    ) -> "Future[None]":
        """Send a power signal to a panel server without blocking.

        Returns a future that resolves to None once the panel accepts the
        signal, or fails with TransportError / ProtocolError. It resolves
        exactly once, on the client's loop thread. The handle is already
        running, so ``cancel()`` returns False and the request always runs to
        its outcome; callers wanting a bounded wait use ``result(timeout)``.
        """
        self._check_request(server_id, signal)
        handle: Future = Future()
        handle.set_running_or_notify_cancel()

        def relay(task_future: Future):
            # Runs on the loop thread once the request coroutine finishes
            if task_future.cancelled():
                handle.set_exception(TransportError(
                    server_name, server_id, signal,
                    asyncio.CancelledError("event loop shut down before the request finished"),
                ))
                return
            exc = task_future.exception()
            if exc is not None:
                handle.set_exception(exc)
            else:
                handle.set_result(None)

        with self._lock:
            if self._closed:
                raise RuntimeError("PowerClient is closed")
            loop = self._ensure_loop()
            self._pending.add(handle)
            task_future = asyncio.run_coroutine_threadsafe(
                self._dispatch(server_name, server_id, signal), loop
            )
        handle.add_done_callback(self._discard_pending)
        task_future.add_done_callback(relay)
        return handle

    # -------------------------------------------------------------------------
    # Shutdown
    # -------------------------------------------------------------------------

    async def _close_session(self):
        if self._loop_session is not None:
            await self._loop_session.close()
            self._loop_session = None
            self._logger.debug("API session closed")

    def close(self, timeout: Optional[float] = None):
        """Wait for in-flight signals, then close the session and stop the loop.

        Must not be called from the loop thread (e.g. a future's done callback).
        """
        with self._lock:
            if self._closed:
                return
            loop, thread = self._loop, self._thread
            if thread is not None and threading.current_thread() is thread:
                raise RuntimeError("close() cannot be called from the client's loop thread")
            self._closed = True
            pending = list(self._pending)

        if loop is None:
            return

        try:
            wait(pending, timeout=timeout)
            asyncio.run_coroutine_threadsafe(self._close_session(), loop).result(timeout)
        finally:
            loop.call_soon_threadsafe(loop.stop)
            thread.join(timeout)
            if not thread.is_alive():
                loop.close()
            self._loop = None
            self._thread = None

    def __enter__(self) -> "PowerClient":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

"""Exceptions raised by the pteropower client."""

from typing import Optional

from .signals import PowerSignal


class ConfigError(Exception):
    """The endpoint configuration is missing or invalid."""


class PowerSignalError(Exception):
    """Base error for a power signal that could not be delivered."""

    def __init__(self, message: str, server_name: str, server_id: str, signal: PowerSignal):
        self.message = message
        self.server_name = server_name
        self.server_id = server_id
        self.signal = signal
        super().__init__(self.message)


class TransportError(PowerSignalError):
    """No response was received from the panel."""

    def __init__(self, server_name: str, server_id: str, signal: PowerSignal, cause: BaseException):
        self.cause = cause
        detail = str(cause) or cause.__class__.__name__
        super().__init__(
            f"Failed to send {signal.token} to server {server_name}: {detail}",
            server_name, server_id, signal,
        )


class ProtocolError(PowerSignalError):
    """The panel answered with a non-2xx status."""

    def __init__(
        self,
        server_name: str,
        server_id: str,
        signal: PowerSignal,
        status: int,
        reason: Optional[str] = None,
        body: str = "",
    ):
        self.status = status
        self.reason = reason
        self.body = body
        super().__init__(
            f"Failed to send {signal.token} to server {server_name}: "
            f"HTTP {status} {reason or ''}".rstrip(),
            server_name, server_id, signal,
        )

"""Power signals understood by the panel's power endpoint."""

from enum import Enum


class PowerSignal(Enum):
    """Power signal type."""

    START = "start"
    STOP = "stop"
    RESTART = "restart"
    KILL = "kill"

    @property
    def token(self) -> str:
        """Lowercase token sent as the ``signal`` form field."""
        return self.value

    @classmethod
    def from_token(cls, token: str) -> "PowerSignal":
        try:
            return cls(token.strip().lower())
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown power signal {token!r} (expected one of: {valid})") from None

    def __str__(self) -> str:
        return self.value

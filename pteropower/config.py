"""Endpoint configuration for the pteropower client."""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

import voluptuous as vol

from .const import (
    CONF_ID,
    CONF_PTERODACTYL,
    CONF_REQUEST_TIMEOUT,
    CONF_SERVERS,
    CONF_TOKEN,
    CONF_URL,
)
from .exceptions import ConfigError


def _http_url(value: Any) -> str:
    url = vol.Url()(value)
    if urlparse(url).scheme not in ("http", "https"):
        raise vol.Invalid("expected an http or https URL")
    return url


SERVER_SCHEMA = vol.Schema(
    {vol.Required(CONF_ID): str},
    extra=vol.ALLOW_EXTRA,
)

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_PTERODACTYL): vol.Schema(
            {
                vol.Required(CONF_URL): _http_url,
                vol.Required(CONF_TOKEN): vol.All(str, vol.Length(min=1)),
            }
        ),
        vol.Optional(CONF_SERVERS, default={}): vol.Any(None, {str: SERVER_SCHEMA}),
        vol.Optional(CONF_REQUEST_TIMEOUT): vol.All(vol.Coerce(float), vol.Range(min=0, min_included=False)),
    },
    extra=vol.ALLOW_EXTRA,
)


@dataclass(frozen=True)
class EndpointConfig:
    """Panel address, API token and the server name to panel ID mapping.

    The mapping is copied on construction and exposed read-only, so one
    config can be shared between threads without locking.
    """

    base_url: str
    token: str = field(repr=False)
    servers: Mapping[str, str] = field(default_factory=dict)
    request_timeout: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "servers", MappingProxyType(dict(self.servers)))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EndpointConfig":
        """Validate persisted configuration and build a config from it."""
        try:
            validated = CONFIG_SCHEMA(data)
        except vol.Invalid as err:
            raise ConfigError(f"Invalid configuration: {err}") from err

        panel = validated[CONF_PTERODACTYL]
        servers = validated[CONF_SERVERS] or {}
        return cls(
            base_url=panel[CONF_URL],
            token=panel[CONF_TOKEN],
            servers={name: server[CONF_ID] for name, server in servers.items()},
            request_timeout=validated.get(CONF_REQUEST_TIMEOUT),
        )


def load_config(path: str) -> EndpointConfig:
    """Read a JSON configuration file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as err:
        raise ConfigError(f"Cannot read configuration {path}: {err}") from err
    return EndpointConfig.from_dict(data)

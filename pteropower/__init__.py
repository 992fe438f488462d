# pteropower/__init__.py
"""
Pterodactyl power signal client.
"""

# Re-export the client and its types
from .api_client import PowerClient
from .config import EndpointConfig, load_config
from .exceptions import ConfigError, PowerSignalError, ProtocolError, TransportError
from .logger import SmartLogger, setup_logging
from .signals import PowerSignal

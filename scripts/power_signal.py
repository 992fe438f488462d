"""Send a power signal to a panel server from the command line.

Usage:
    py scripts/power_signal.py <config.json> <server-name> <signal>
    py scripts/power_signal.py <server-name> <signal>   # config from .env

<signal> is one of start, stop, restart, kill. Exits non-zero when the
server name is unknown or the panel rejects the signal.
"""

import os
import sys

# ---------------------------------------------------------------------------
# Reuse the pteropower package directly
# ---------------------------------------------------------------------------
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pteropower import (
    ConfigError,
    PowerClient,
    PowerSignal,
    PowerSignalError,
    load_config,
    setup_logging,
)


def load_env(path=".env"):
    """Load key=value pairs from a .env file into os.environ."""
    if not os.path.exists(path):
        return
    with open(path) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                k, v = line.split("=", 1)
                os.environ.setdefault(k.strip(), v.strip())


def main(config_path, server_name, signal_name):
    try:
        config = load_config(config_path)
        signal = PowerSignal.from_token(signal_name)
    except (ConfigError, ValueError) as e:
        print(f"  {e}")
        return 1

    with PowerClient(config) as client:
        server_id = client.get_server_id(server_name)
        if server_id is None:
            print(f"  Unknown server: {server_name}")
            print(f"  Known servers: {', '.join(client.server_names()) or '(none)'}")
            return 1

        future = client.send_power_signal(server_name, server_id, signal)
        try:
            future.result()
        except PowerSignalError as e:
            print(f"  {e}")
            return 1

    print(f"  {signal.token} sent to {server_name} ({server_id})")
    return 0


if __name__ == "__main__":
    load_env()
    setup_logging(os.environ.get("PTERODACTYL_LOG_LEVEL", "INFO"))

    if len(sys.argv) == 4:
        cfg, name, sig = sys.argv[1], sys.argv[2], sys.argv[3]
    elif len(sys.argv) == 3:
        cfg = os.environ.get("PTERODACTYL_CONFIG", "")
        name, sig = sys.argv[1], sys.argv[2]
    else:
        cfg = name = sig = ""

    if not cfg or not name or not sig:
        print(f"Usage: py {sys.argv[0]} <config.json> <server-name> <start|stop|restart|kill>")
        print("  or set PTERODACTYL_CONFIG in .env and pass <server-name> <signal>")
        sys.exit(1)

    sys.exit(main(cfg, name, sig))

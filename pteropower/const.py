"""Constants for the Pterodactyl client API."""

POWER_PATH = "/api/client/servers/{server_id}/power"
SIGNAL_FIELD = "signal"

CONF_PTERODACTYL = "pterodactyl"
CONF_URL = "url"
CONF_TOKEN = "token"
CONF_SERVERS = "servers"
CONF_ID = "id"
CONF_REQUEST_TIMEOUT = "request_timeout"

# Characters of an error body kept in log lines
LOG_BODY_LIMIT = 300

LOOP_THREAD_NAME = "pteropower-loop"

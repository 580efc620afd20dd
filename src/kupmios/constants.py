"""Service defaults and call budgets."""

DEFAULT_KUPO_URL = "http://localhost:1442"
DEFAULT_OGMIOS_URL = "http://localhost:1337"

# Seconds
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_CALL_TIMEOUT = 10.0
DEFAULT_AWAIT_TX_TIMEOUT = 160.0

DEFAULT_CHECK_INTERVAL_MS = 20_000
DEFAULT_MAX_CONCURRENT_REQUESTS = 10

CONFIG_ENV_VAR = "KUPMIOS_CONFIG"
CONFIG_TABLE = "kupmios"

"""Internal constants shared across the package."""

TRELLO_BASE_URL = "https://api.trello.com/1"
MESSAGING_BASE_URL = "https://api-krolik.telezapy.tech"
USER_AGENT = "trellowatch/0.1"

SERVICE_NAME = "trello-monitor"
HEALTH_PATH = "/health"
RUNNING_TEXT = "Trello Monitor is running!"

SNAPSHOT_FILENAME = "trello-state.json"
MARKER_FILENAME = "trello-state.initialized"

# Stored as listName when a card's list could not be resolved.
UNKNOWN_LIST_NAME = "Unknown"

# ------------------------------------------------------------------
# Scheduling (seconds)
# ------------------------------------------------------------------

POLL_INTERVAL_S = 30.0
NOTIFY_DELAY_S = 2.0
HTTP_TIMEOUT_S = 30.0
SHUTDOWN_GRACE_S = 10.0

# ------------------------------------------------------------------
# Messaging API request body
# ------------------------------------------------------------------

CONNECTION_FROM = 5
TICKET_STRATEGY = "create"

"""Constants for Gmail Inbox Buckets."""

from pathlib import Path

# --- Config paths ---
CONFIG_DIR = Path.home() / ".gmail-inbox-buckets"
CREDENTIALS_FILENAME = "credentials.json"
TOKEN_FILENAME = "token.json"
RULES_FILENAME = "rules.json"

# --- Environment overrides ---
ENV_HOME = "INBOX_BUCKETS_HOME"
ENV_CREDENTIALS_PATH = "CREDENTIALS_PATH"
ENV_TOKEN_PATH = "TOKEN_PATH"
ENV_RULES_PATH = "RULES_PATH"
ENV_REDIRECT_URI = "REDIRECT_URI"
ENV_PORT = "PORT"
ENV_LOG_LEVEL = "LOG_LEVEL"

# --- Gmail API ---
SCOPES = ["https://www.googleapis.com/auth/gmail.readonly"]
USER_ID = "me"
METADATA_HEADERS = ["Subject", "From", "Date"]
DEFAULT_MAX_RESULTS = 25  # one page, as served by the dashboard
MAX_RESULTS_CEILING = 500  # Gmail's per-page maximum
DEFAULT_MAX_WORKERS = 10  # concurrent message hydrations per fetch

# --- Classification ---
UNASSIGNED = "Unassigned"

# --- Web ---
DEFAULT_PORT = 8080

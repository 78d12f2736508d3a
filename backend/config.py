"""Application-wide configuration constants."""

import os
from pathlib import Path

# --- Storage ---
DROP_SPOT_DIR = Path(
    os.environ.get("DROP_SPOT_DIR", str(Path.home() / "drop-spot"))
).expanduser()
RECEIVED_FILES_DIRNAME = "received-files"
HOSTED_FILES_DIRNAME = "hosted-files"
RECEIVED_MESSAGES_DIRNAME = "received-messages"

MESSAGE_ENCODING = "utf-8"
UPLOAD_CHUNK_SIZE = 131072  # 128 KB
MAX_MESSAGE_BYTES = 102400  # 100 KB, larger text submissions get 413
UPLOAD_FIELD = "uploads"  # form field name used by the web client
UPLOAD_TEMP_PREFIX = ".upload-"

# --- Networking ---
# 0.0.0.0 makes the service reachable from other devices on the LAN,
# 127.0.0.1 keeps it local to this machine
API_HOST = os.environ.get("DROP_SPOT_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("DROP_SPOT_PORT", "8443"))

# --- TLS ---
TLS_DIR = Path(
    os.environ.get("DROP_SPOT_TLS_DIR", str(DROP_SPOT_DIR / "tls"))
).expanduser()
TLS_KEY_FILE = "private-key.pem"
TLS_CERT_FILE = "certificate.pem"
TLS_PASSPHRASE_FILE = "passphrase"
TLS_CERT_DAYS = 1825

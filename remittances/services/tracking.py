# remittances/services/tracking.py

import secrets

# Sans I ni O (confusion avec 1 et 0)
TRACKING_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ0123456789"
TRACKING_PREFIX = "REM-"
TRACKING_LENGTH = 6


def generate_tracking_code():
    suffix = "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(TRACKING_LENGTH))
    return f"{TRACKING_PREFIX}{suffix}"


def normalize_tracking_code(code):
    return str(code or "").strip().upper()

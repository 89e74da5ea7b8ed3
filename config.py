# --- File: config.py ---
import os
from dotenv import load_dotenv
import logging

load_dotenv()

LOG_LEVEL_FROM_ENV = os.getenv("LOG_LEVEL", "INFO").upper()
numeric_level = getattr(logging, LOG_LEVEL_FROM_ENV, logging.INFO)

logging.basicConfig(
    level=numeric_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not an integer. Using default {default}.")
        return default


# --- Key Settings ---
RSA_KEY_SIZE = _int_from_env("RSA_KEY_SIZE", 2048)
MIN_RSA_KEY_SIZE = _int_from_env("MIN_RSA_KEY_SIZE", 2048)
RSA_PUBLIC_EXPONENT = 65537
KEY_EXPORT_FORMAT = os.getenv("KEY_EXPORT_FORMAT", "jwk").lower() # "jwk" or "pem"
IDENTITY_KEYS_FILE = os.getenv("IDENTITY_KEYS_FILE", "identity_private_keys.json") # Local to the owning party only

# --- Envelope Settings ---
AES_KEY_BYTES = 32 # AES-256 session key
GCM_NONCE_BYTES = 12 # 96-bit IV
GCM_TAG_BYTES = 16
ENVELOPE_WRAP_POLICY = os.getenv("ENVELOPE_WRAP_POLICY", "best-effort").lower()
WRAP_MAX_WORKERS = _int_from_env("WRAP_MAX_WORKERS", 4)


# --- Basic Validation ---
if RSA_KEY_SIZE < MIN_RSA_KEY_SIZE:
    logger.warning(f"RSA_KEY_SIZE ({RSA_KEY_SIZE}) is below MIN_RSA_KEY_SIZE ({MIN_RSA_KEY_SIZE}). Using {MIN_RSA_KEY_SIZE}.")
    RSA_KEY_SIZE = MIN_RSA_KEY_SIZE

if KEY_EXPORT_FORMAT not in ("jwk", "pem"):
    logger.warning(f"Unknown KEY_EXPORT_FORMAT '{KEY_EXPORT_FORMAT}'. Falling back to 'jwk'.")
    KEY_EXPORT_FORMAT = "jwk"

if ENVELOPE_WRAP_POLICY not in ("strict", "best-effort"):
    logger.warning(f"Unknown ENVELOPE_WRAP_POLICY '{ENVELOPE_WRAP_POLICY}'. Falling back to 'best-effort'.")
    ENVELOPE_WRAP_POLICY = "best-effort"
elif ENVELOPE_WRAP_POLICY == "best-effort":
    logger.debug("Envelope wrap policy is best-effort: recipients whose key cannot be wrapped are excluded.")

if WRAP_MAX_WORKERS < 1:
    logger.warning(f"WRAP_MAX_WORKERS must be at least 1. Got {WRAP_MAX_WORKERS}; using 1.")
    WRAP_MAX_WORKERS = 1

# --- File: security/secure_envelope.py ---
import binascii
import json
import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

import config
from hybrid_crypto_package import MalformedEnvelope, b64decode

logger = logging.getLogger(__name__)


class Envelope(BaseModel):
    """
    The transmissible result of one encryption: AES-GCM ciphertext plus the session
    key wrapped separately for every recipient.
    All binary fields are carried as standard base64 text.
    """
    model_config = {"frozen": True}

    iv: str = Field(..., description="96-bit AES-GCM nonce (base64).")
    content: str = Field(..., description="AES-GCM ciphertext followed by the 16-byte tag (base64).")
    keys: Dict[str, str] = Field(
        default_factory=dict,
        description="Recipient identity -> session key wrapped with that recipient's RSA public key (base64).",
    )

    @field_validator('iv')
    @classmethod
    def validate_iv(cls, v: str) -> str:
        raw = _decode_field(v, "iv")
        if len(raw) != config.GCM_NONCE_BYTES:
            raise ValueError(f"iv must be {config.GCM_NONCE_BYTES} bytes. Got {len(raw)}.")
        return v

    @field_validator('content')
    @classmethod
    def validate_content(cls, v: str) -> str:
        raw = _decode_field(v, "content")
        if len(raw) < config.GCM_TAG_BYTES:
            raise ValueError(f"content must hold at least the {config.GCM_TAG_BYTES}-byte tag. Got {len(raw)} bytes.")
        return v

    @field_validator('keys')
    @classmethod
    def validate_keys(cls, v: Dict[str, str]) -> Dict[str, str]:
        for identity, wrapped in v.items():
            if not identity:
                raise ValueError("Recipient identity must not be empty.")
            if not _decode_field(wrapped, f"keys[{identity}]"):
                raise ValueError(f"Wrapped key for '{identity}' is empty.")
        return v

    def iv_bytes(self) -> bytes:
        return b64decode(self.iv)

    def content_bytes(self) -> bytes:
        return b64decode(self.content)

    def wrapped_key_for(self, identity: str) -> Optional[bytes]:
        wrapped = self.keys.get(identity)
        return b64decode(wrapped) if wrapped is not None else None

    def recipients(self) -> List[str]:
        """Identities holding a wrapped session key, in insertion order."""
        return list(self.keys.keys())


def _decode_field(value: str, name: str) -> bytes:
    try:
        return b64decode(value)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"{name} is not valid base64: {e}") from e


def serialize_envelope(envelope: Envelope) -> str:
    """Compact JSON text {"iv": ..., "content": ..., "keys": {...}}."""
    return envelope.model_dump_json()


def deserialize_envelope(text: str) -> Envelope:
    """
    Parses envelope text without performing any cryptographic operation.
    Raises:
        MalformedEnvelope: invalid JSON, missing fields, wrong types or invalid base64.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedEnvelope(f"Envelope is not valid UTF-8 text: {e}") from e
    if not isinstance(text, str):
        raise MalformedEnvelope(f"Envelope must be text, got {type(text).__name__}.")

    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise MalformedEnvelope(f"Envelope is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedEnvelope("Envelope must be a JSON object.")
    missing = [f for f in ("iv", "content", "keys") if f not in data]
    if missing:
        raise MalformedEnvelope(f"Envelope is missing fields: {', '.join(missing)}")

    try:
        # strict mode: no coercion of numbers or other types into the text fields
        return Envelope.model_validate(data, strict=True)
    except ValidationError as e:
        logger.debug(f"Rejected envelope with {e.error_count()} validation error(s).")
        raise MalformedEnvelope(f"Envelope failed validation: {e}") from e

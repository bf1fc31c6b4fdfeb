from __future__ import annotations

import hashlib
import hmac
from typing import Optional

from lavender.services.exceptions import ApiKeyEmptyError, ApiKeyInvalidError, ApiKeyMissingError

API_KEY_HEADER = "lav-api-key"


def hash_api_key(key: str) -> str:
    return hashlib.sha3_256(key.encode("utf-8")).hexdigest()


def verify_api_key(supplied: Optional[str], stored_hash: Optional[str]) -> None:
    """Raise unless ``supplied`` hashes to ``stored_hash``.

    With no stored hash every key is rejected.
    """
    if supplied is None:
        raise ApiKeyMissingError("Lavender API key is missing")
    if supplied == "":
        raise ApiKeyEmptyError("Lavender API key is empty")
    if not stored_hash:
        raise ApiKeyInvalidError("Invalid Lavender API key")
    if not hmac.compare_digest(hash_api_key(supplied), stored_hash.strip().lower()):
        raise ApiKeyInvalidError("Invalid Lavender API key")

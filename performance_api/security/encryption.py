"""AES-based encryption wrapper for secrets at rest (TOTP seeds). Fail if key missing. No global state."""

import base64
import os
from functools import lru_cache
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from performance_api.security.exceptions import EncryptionError

# Fernet uses AES-128-CBC; we derive a key from the raw secret.
DEFAULT_SALT = b"performance_api_encryption_v1"


@lru_cache(maxsize=8)
def _derive_key(secret: str, salt: bytes = DEFAULT_SALT) -> bytes:
    """Derive a 32-byte key for Fernet from a variable-length secret."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=480000,
    )
    return base64.urlsafe_b64encode(kdf.derive(secret.encode("utf-8")))


class EncryptionService:
    """
    Fernet encryption. Key is passed in (from settings) or read from
    ENCRYPTION_KEY; raises EncryptionError if neither is set.
    """

    def __init__(self, key: Optional[str] = None) -> None:
        raw = key or os.environ.get("ENCRYPTION_KEY")
        if not raw or not raw.strip():
            raise EncryptionError(
                "Encryption key is required. Set ENCRYPTION_KEY in environment."
            )
        self._fernet = Fernet(_derive_key(raw.strip()))

    def encrypt(self, data: str) -> str:
        """Encrypt string; return Fernet token as text."""
        try:
            return self._fernet.encrypt(data.encode("utf-8")).decode("ascii")
        except Exception as e:
            raise EncryptionError(f"Encryption failed: {e}") from e

    def decrypt(self, data: str) -> str:
        """Decrypt Fernet token. Raises EncryptionError if wrong key/corrupt."""
        try:
            return self._fernet.decrypt(data.encode("ascii")).decode("utf-8")
        except InvalidToken as e:
            raise EncryptionError("Decryption failed: invalid or wrong key") from e
        except Exception as e:
            raise EncryptionError(f"Decryption failed: {e}") from e

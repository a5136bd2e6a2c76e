"""
Password Hashing

Salted scrypt hashes, encoded as 'scrypt$n$r$p$salt$digest' with urlsafe base64.
"""
import base64
import logging
import os
from typing import Optional
from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

logger = logging.getLogger("taskwatch.users.passwords")

ALGORITHM = "scrypt"


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode()


def _b64decode(text: str) -> bytes:
    return base64.urlsafe_b64decode(text.encode())


class PasswordHasher:
    """Hashes and checks passwords."""

    def __init__(self, n: int = 2 ** 14, r: int = 8, p: int = 1, length: int = 32, salt_size: int = 16):
        self.n = n
        self.r = r
        self.p = p
        self.length = length
        self.salt_size = salt_size

    def hash(self, plaintext: str) -> str:
        salt = os.urandom(self.salt_size)
        kdf = Scrypt(salt=salt, length=self.length, n=self.n, r=self.r, p=self.p)
        digest = kdf.derive(plaintext.encode("utf-8"))
        return f"{ALGORITHM}${self.n}${self.r}${self.p}${_b64encode(salt)}${_b64encode(digest)}"

    def check(self, plaintext: str, password_hash: Optional[str]) -> bool:
        """
        Return True when `plaintext` matches `password_hash`.

        Absent or malformed hashes never match. The cost parameters stored in
        the hash are used, so hashes made with other settings still verify.
        """
        if not password_hash or plaintext is None:
            return False

        try:
            algorithm, n, r, p, salt, digest = password_hash.split("$")
            if algorithm != ALGORITHM:
                return False
            expected = _b64decode(digest)
            if not expected:
                return False
            kdf = Scrypt(salt=_b64decode(salt), length=len(expected), n=int(n), r=int(r), p=int(p))
        except ValueError:
            logger.warning("[PasswordHasher.check] Unreadable password hash")
            return False

        try:
            kdf.verify(plaintext.encode("utf-8"), expected)
        except InvalidKey:
            return False
        return True

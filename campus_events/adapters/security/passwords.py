"""
bcrypt password hasher - Implements PasswordHasher protocol.

Timing Oracle Prevention:
------------------------
verify() always runs one bcrypt comparison. When there is no stored hash
(unknown email at login) it compares against a pre-computed dummy hash,
so response time does not reveal whether an account exists.
"""

import bcrypt

# bcrypt only reads the first 72 bytes; newer releases refuse longer input
MAX_PASSWORD_BYTES = 72

# Hash of "dummy_password_for_timing_safety" with cost factor 10.
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(10))


def _secret(password: str) -> bytes:
    return password.encode()[:MAX_PASSWORD_BYTES]


class BcryptPasswordHasher:
    """
    Implements PasswordHasher protocol via bcrypt.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, cost: int = 10) -> None:
        """
        Initialize hasher.

        Args:
            cost: bcrypt work factor (log2 rounds), at least 4
        """
        self._cost = cost

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(_secret(password), bcrypt.gensalt(rounds=self._cost)).decode()

    def verify(self, password: str, password_hash: str | None) -> bool:
        if password_hash is None:
            bcrypt.checkpw(_secret(password), _DUMMY_BCRYPT_HASH)
            return False
        return bcrypt.checkpw(_secret(password), password_hash.encode())

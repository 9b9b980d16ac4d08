"""bcrypt password hashing, run in a worker thread to keep the event loop free."""

import bcrypt
from starlette.concurrency import run_in_threadpool

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Opaque one-way hash and compare primitive."""

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    async def hash(self, password: str) -> str:
        """Hash a password.

        Raises:
            ValueError: If the password is longer than bcrypt accepts
        """
        secret = password.encode("utf-8")
        if len(secret) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        hashed = await run_in_threadpool(bcrypt.hashpw, secret, bcrypt.gensalt(self._rounds))
        return hashed.decode("ascii")

    async def verify(self, password: str, hashed: str) -> bool:
        """Compare a password with a stored hash."""
        secret = password.encode("utf-8")
        if len(secret) > MAX_PASSWORD_BYTES:
            return False
        try:
            return await run_in_threadpool(bcrypt.checkpw, secret, hashed.encode("ascii"))
        except ValueError:
            # stored value is not a bcrypt hash
            return False

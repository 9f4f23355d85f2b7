"""Password generation strategies for new deployments."""

import base64
import secrets
from typing import Callable

import structlog

from redis_adapter.core.exceptions import PasswordGenerationError

logger = structlog.get_logger()

PASSWORD_BYTES = 20

# A generator returns a password usable directly as a Redis credential.
PasswordGenerator = Callable[[], str]


def random_password() -> str:
    """Return 20 CSPRNG bytes as standard base64 text (28 characters)."""
    try:
        random_bytes = secrets.token_bytes(PASSWORD_BYTES)
    except OSError as e:
        logger.error("Error generating random bytes", error=str(e))
        raise PasswordGenerationError(f"failed to generate password: {e}") from e
    return base64.b64encode(random_bytes).decode("ascii")


def fixed_password(password: str) -> PasswordGenerator:
    """Return a generator that always yields ``password``."""
    if not password:
        raise ValueError("password must not be empty")

    def _generate() -> str:
        return password

    return _generate

"""Config-store secret reference handling."""

import re
from typing import Any, Mapping, Optional

from redis_adapter.core.exceptions import SecretReferenceError, SecretResolutionError

GENERATED_SECRET_KEY = "secret_pass"

_SECRET_REF_RE = re.compile(r"^\(\(([^()]+)\)\)$")


def parse_secret_reference(value: Any) -> str:
    """Return the name inside a ``((name))`` reference."""
    if not isinstance(value, str):
        raise SecretReferenceError("secret in manifest was not a string. expecting a credhub ref string")

    match = _SECRET_REF_RE.match(value)
    if not match:
        raise SecretReferenceError(f"expecting a credhub ref string with format ((xxx)), but got: {value}")
    return match.group(1)


def resolve_secret_reference(value: Any, secrets: Optional[Mapping[str, str]]) -> str:
    name = parse_secret_reference(value)
    if secrets is None or name not in secrets:
        raise SecretResolutionError(f"secret '{name}' not present in manifest secrets passed to bind")
    return secrets[name]


def generated_secret(secrets: Optional[Mapping[str, str]]) -> str:
    """Per-binding secret; empty when no secrets were passed at all."""
    if secrets is None:
        return ""
    if GENERATED_SECRET_KEY not in secrets:
        raise SecretResolutionError(
            f"manifest wasn't correctly interpolated: missing value for `{GENERATED_SECRET_KEY}`"
        )
    return secrets[GENERATED_SECRET_KEY]

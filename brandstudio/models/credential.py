"""Credential passed explicitly into every paid operation."""

from dataclasses import dataclass, field

from ..errors import ConfigurationError


@dataclass(frozen=True)
class Credential:
    """A verified API key. Shared read-only; never mutated by the core."""

    api_key: str = field(repr=False)


def require_credential(credential: Credential | None) -> Credential:
    """Fail before any network call if no usable credential is present."""
    if credential is None or not credential.api_key or not credential.api_key.strip():
        raise ConfigurationError("API key not found. Please select a key.")
    return credential

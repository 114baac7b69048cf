"""Protocol definitions for the collaborators the core depends on.

These protocols enable type-safe mocking in tests and decouple the manager
from concrete signing libraries and storage engines.
"""

from typing import Any, Protocol, runtime_checkable


class Driver(Protocol):
    """Signs claim maps into tokens and verifies tokens back into claim maps."""

    def encode(self, claims: dict[str, Any]) -> str:
        """Raises ``JWTException`` wrapping the signing error."""
        ...

    def decode(self, token: str) -> dict[str, Any]:
        """Raises ``TokenInvalidException`` if the token cannot be verified."""
        ...


class Storage(Protocol):
    """Key/value store with per-key TTL used by the blacklist.

    Implementations raise ``StorageException`` when the backend fails.
    """

    def get(self, key: str) -> Any | None: ...

    def put(self, key: str, value: Any, ttl_seconds: int) -> None: ...

    def put_forever(self, key: str, value: Any) -> None: ...

    def destroy(self, key: str) -> bool: ...

    def flush(self) -> None: ...


@runtime_checkable
class Subject(Protocol):
    """Anything a token can be issued for."""

    def get_jwt_identifier(self) -> Any:
        """Value stored in the ``sub`` claim."""
        ...

    def get_jwt_custom_claims(self) -> dict[str, Any]:
        """Extra claims to embed in tokens issued for this subject."""
        ...

"""Raw token value object."""

from dataclasses import dataclass

from tokenguard.exceptions import TokenInvalidException


@dataclass(frozen=True)
class Token:
    """A compact-serialised JWT string.

    Only the shape is checked here (three dot-separated segments);
    signature verification is the driver's job.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TokenInvalidException("The token must be a string")
        parts = self.value.split(".")
        if len(parts) != 3:
            raise TokenInvalidException("Wrong number of segments")
        if any(not part.strip() for part in parts):
            raise TokenInvalidException("Malformed token")

    @classmethod
    def coerce(cls, token: "Token | str") -> "Token":
        return token if isinstance(token, Token) else cls(token)

    def get(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value

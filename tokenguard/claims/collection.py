"""Immutable, ordered set of claims keyed by name."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from tokenguard.claims.claim import Claim


class ClaimCollection(Mapping[str, Claim]):
    """
    Ordered claims, unique by name.

    Every operation that changes the contents returns a new collection; an
    existing collection is never mutated. Insertion order is preserved, and
    when the same name is supplied twice the later claim wins but keeps the
    position of the first.
    """

    __slots__ = ("_claims",)

    def __init__(self, claims: Iterable[Claim] = ()):
        ordered: dict[str, Claim] = {}
        for claim in claims:
            ordered[claim.name] = claim
        self._claims = ordered

    @classmethod
    def make(cls, claims: Iterable[Claim]) -> ClaimCollection:
        return cls(claims)

    def __getitem__(self, name: str) -> Claim:
        return self._claims[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._claims)

    def __len__(self) -> int:
        return len(self._claims)

    def __repr__(self) -> str:
        return f"ClaimCollection({list(self._claims.values())!r})"

    def get_by_name(self, name: str, default: Claim | None = None) -> Claim | None:
        return self._claims.get(name, default)

    def has(self, name: str) -> bool:
        return name in self._claims

    def has_all(self, names: Iterable[str]) -> bool:
        return all(name in self._claims for name in names)

    def first_missing(self, names: Iterable[str]) -> str | None:
        """Return the first name in *names* not present, or ``None``."""
        for name in names:
            if name not in self._claims:
                return name
        return None

    def merge(self, other: Iterable[Claim]) -> ClaimCollection:
        """Return a new collection where claims in *other* override same-named ones."""
        return ClaimCollection([*self._claims.values(), *other])

    def with_claim(self, claim: Claim) -> ClaimCollection:
        return self.merge([claim])

    def without(self, *names: str) -> ClaimCollection:
        return ClaimCollection(c for n, c in self._claims.items() if n not in names)

    def claims(self) -> list[Claim]:
        return list(self._claims.values())

    def to_payload_dict(self) -> dict[str, Any]:
        """Return the ``name -> value`` map that gets signed into a token."""
        return {name: claim.value for name, claim in self._claims.items() if claim.serializable}

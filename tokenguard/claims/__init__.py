"""Claim model: individual claims, collections of claims, and their factory."""
from tokenguard.claims.claim import TIME_KINDS, Claim, ClaimKind
from tokenguard.claims.collection import ClaimCollection
from tokenguard.claims.factory import DEFAULT_CLAIMS, ClaimFactory

__all__ = [
    "DEFAULT_CLAIMS",
    "TIME_KINDS",
    "Claim",
    "ClaimCollection",
    "ClaimFactory",
    "ClaimKind",
]

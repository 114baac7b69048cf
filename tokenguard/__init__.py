"""Issue, validate, refresh and revoke signed identity tokens."""
from tokenguard.auth import JWTAuth
from tokenguard.blacklist import Blacklist
from tokenguard.claims import Claim, ClaimCollection, ClaimFactory, ClaimKind
from tokenguard.config import Settings, get_settings
from tokenguard.exceptions import (
    InvalidClaimException,
    JWTException,
    StorageException,
    TokenBlacklistedException,
    TokenExpiredException,
    TokenInvalidException,
)
from tokenguard.manager import Manager
from tokenguard.payload import Payload, PayloadFactory
from tokenguard.providers import build_auth, build_manager
from tokenguard.token import Token
from tokenguard.utils.logging import setup_logging
from tokenguard.validators import PayloadValidator, ValidationMode

__all__ = [
    "Blacklist",
    "Claim",
    "ClaimCollection",
    "ClaimFactory",
    "ClaimKind",
    "InvalidClaimException",
    "JWTAuth",
    "JWTException",
    "Manager",
    "Payload",
    "PayloadFactory",
    "PayloadValidator",
    "Settings",
    "StorageException",
    "Token",
    "TokenBlacklistedException",
    "TokenExpiredException",
    "TokenInvalidException",
    "ValidationMode",
    "build_auth",
    "build_manager",
    "get_settings",
    "setup_logging",
]

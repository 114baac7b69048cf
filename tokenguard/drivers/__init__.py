"""Signing drivers."""
from tokenguard.drivers.jose_driver import JoseDriver

__all__ = ["JoseDriver"]

"""Core abstractions for the lanyard signing framework."""

from lanyard.core.signing_provider import ParsedToken, SigningProvider
from lanyard.core.factory import create_provider

__all__ = [
    "ParsedToken",
    "SigningProvider",
    "create_provider",
]

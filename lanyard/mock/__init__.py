"""Mock implementation of the lanyard signing provider for testing."""

from lanyard.mock.provider import MockParsedToken, MockSigningProvider

__all__ = [
    "MockParsedToken",
    "MockSigningProvider",
]

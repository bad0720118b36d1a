"""Factory for signing providers."""

from lanyard.core.signing_provider import SigningProvider


def create_provider(provider_type: str = "pyjwt", **kwargs) -> SigningProvider:
    """Create a signing provider of the specified type.

    Args:
        provider_type: The signing provider to use.
            Valid values: "pyjwt", "mock"

        **kwargs: Provider-specific configuration arguments. Neither
            built-in provider accepts any.

    Returns:
        SigningProvider: A provider to pass to TokenSigner.

    Raises:
        ValueError: If provider_type is unknown or arguments are given.

    Examples:
        Real tokens:
            >>> provider = create_provider("pyjwt")
            >>> signer = TokenSigner(b"secret", provider=provider)

        Mock tokens for unit tests:
            >>> signer = TokenSigner("k1", "k2", provider=create_provider("mock"))
    """
    if kwargs:
        raise ValueError(
            f"Provider '{provider_type}' does not accept arguments, but got: {list(kwargs.keys())}. "
            f"Use: create_provider('{provider_type}')"
        )

    if provider_type == "pyjwt":
        from lanyard.providers.pyjwt import PyJWTProvider

        return PyJWTProvider()
    elif provider_type == "mock":
        from lanyard.mock import MockSigningProvider

        return MockSigningProvider()
    else:
        raise ValueError(
            f"Unknown provider type: '{provider_type}'. "
            f"Valid types: 'pyjwt', 'mock'. "
            f"Example: create_provider('pyjwt')"
        )

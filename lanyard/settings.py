"""Signer settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from lanyard.models import DEFAULT_METHOD

EXPIRES_IN_DEFAULT = 0


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class SignerSettings(BaseSettings):
    """Symmetric signing configuration for a TokenSigner.

    Keys are comma-separated secrets, newest first: the first one signs and
    all of them verify. Leave ``keys`` empty for an unsecured signer.
    """

    model_config = SettingsConfigDict(env_prefix="LANYARD_")

    keys: str = ""
    method: str = DEFAULT_METHOD
    backup_keys: str = ""
    backup_method: str = DEFAULT_METHOD
    issuer: str = ""
    audience: str = ""
    expires_in: int = EXPIRES_IN_DEFAULT

    def get_key_list(self) -> list[str]:
        """Parse comma-separated primary keys."""
        return _split(self.keys)

    def get_backup_key_list(self) -> list[str]:
        """Parse comma-separated backup keys."""
        return _split(self.backup_keys)

    def get_audience_list(self) -> list[str]:
        """Parse comma-separated audiences."""
        return _split(self.audience)

"""Authorization settings loaded from the environment.

The signing secret is shared by the login handlers (issuing) and the
interceptors (verifying), so both must be handed the same AuthSettings.
"""

import logging
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jobly_auth.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

HMAC_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})


class AuthSettings(BaseSettings):
    """Immutable token configuration.

    Attributes:
        secret_key: Shared HMAC signing secret (``JOBLY_SECRET_KEY``).
        algorithm: JWT signature algorithm; only HMAC algorithms are accepted.
        token_ttl_seconds: Lifetime of issued tokens.
        leeway_seconds: Clock skew tolerated when checking ``exp``.
        token_header: Request header carrying the raw token.
    """

    model_config = SettingsConfigDict(
        env_prefix="JOBLY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    secret_key: str = Field(min_length=1)
    algorithm: str = "HS256"
    token_ttl_seconds: int = Field(default=24 * 60 * 60, gt=0)
    leeway_seconds: int = Field(default=0, ge=0)
    token_header: str = "authorization"

    @field_validator("algorithm")
    @classmethod
    def _check_algorithm(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in HMAC_ALGORITHMS:
            raise ValueError(
                f"algorithm must be one of {sorted(HMAC_ALGORITHMS)}, got {value!r}"
            )
        return normalized

    @field_validator("token_header")
    @classmethod
    def _check_header(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("token_header must not be empty")
        return value.strip().lower()


def load_settings(**overrides: Any) -> AuthSettings:
    """Load AuthSettings from the environment (and ``.env``).

    Args:
        **overrides: Field values that take precedence over the environment.

    Returns:
        A validated, frozen AuthSettings instance.

    Raises:
        ConfigurationError: If the secret is missing or any field is invalid.
    """
    try:
        settings = AuthSettings(**overrides)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigurationError(f"Invalid authorization settings: {problems}") from exc

    logger.info(
        "Loaded authorization settings",
        extra={
            "algorithm": settings.algorithm,
            "token_ttl_seconds": settings.token_ttl_seconds,
            "token_header": settings.token_header,
        },
    )
    return settings

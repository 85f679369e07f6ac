"""Environment-sourced service configuration.

Read once at startup through ``python-decouple`` and frozen into a
``ServiceEnvs`` instance.  Settings, the broker listener and the direct
listener all receive this object instead of re-reading the environment.

Fail Fast: a missing or malformed required variable raises
``ImproperlyConfigured`` while settings are being loaded.
"""

from __future__ import annotations

from decouple import Csv, UndefinedValueError, config
from django.core.exceptions import ImproperlyConfigured
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ServiceEnvs(BaseModel):
    """Immutable snapshot of the variables the service depends on."""

    model_config = ConfigDict(frozen=True)

    port: int = Field(ge=1, le=65535)
    broker_servers: list[str] = Field(min_length=1)

    @field_validator("broker_servers")
    @classmethod
    def servers_must_not_be_blank(cls, v: list[str]) -> list[str]:
        servers = [s.strip() for s in v if s and s.strip()]
        if not servers:
            raise ValueError("At least one broker server is required.")
        return servers

    @property
    def broker_url(self) -> str:
        """Kombu failover URL: servers separated by ``;``."""
        return ";".join(self.broker_servers)


def load_envs() -> ServiceEnvs:
    """Build ``ServiceEnvs`` from the process environment (or ``.env``)."""
    try:
        return ServiceEnvs(
            port=config("PORT", cast=int),
            broker_servers=config("PRODUCTS_BROKER_SERVERS", cast=Csv()),
        )
    except (UndefinedValueError, ValueError) as exc:
        # pydantic.ValidationError subclasses ValueError
        raise ImproperlyConfigured(f"Config validation error: {exc}") from exc

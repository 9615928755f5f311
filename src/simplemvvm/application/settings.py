"""Application layer - Host configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HostSettings(BaseSettings):
    """Runtime options of the service host.

    Values can be supplied directly or through ``SIMPLEMVVM_*`` environment
    variables, e.g. ``SIMPLEMVVM_AUTO_WIRE=true``.

    Attributes:
        auto_wire: Resolve unregistered concrete classes as transient services.
        allow_scoped_from_root: Allow scoped services to be resolved from the root scope.
        validate_on_build: Check every registered dependency graph when the host is built.
    """

    model_config = SettingsConfigDict(env_prefix="SIMPLEMVVM_", frozen=True)

    auto_wire: bool = Field(
        default=False,
        description="Resolve unregistered concrete classes as transient services.",
    )
    allow_scoped_from_root: bool = Field(
        default=False,
        description="Allow scoped services to be resolved from the root scope.",
    )
    validate_on_build: bool = Field(
        default=False,
        description="Verify all dependency graphs eagerly when the host is built.",
    )

"""Server infrastructure settings."""

from pydantic import Field, field_validator

from infrastructure.configuration.base import InfrastructureSettings


class ServerSettings(InfrastructureSettings):
    """HTTP listener configuration.

    Environment Variables:
        PLUGIN_ADDR: Host/interface the HTTP server binds to (default: 0.0.0.0)
        PLUGIN_PORT: TCP port the HTTP server binds to (default: 7200, 0 = any free port)
        ROOT_DIR: Root directory used to resolve static assets (default: .)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        bind_address = f"{settings.server.PLUGIN_ADDR}:{settings.server.PLUGIN_PORT}"
        ```
    """

    PLUGIN_ADDR: str = Field(default="0.0.0.0", alias="PLUGIN_ADDR")
    PLUGIN_PORT: int = Field(default=7200, alias="PLUGIN_PORT")
    ROOT_DIR: str = Field(default=".", alias="ROOT_DIR")

    @field_validator("PLUGIN_PORT")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate the PLUGIN_PORT field."""
        if not 0 <= v <= 65535:
            raise ValueError(f"PLUGIN_PORT must be between 0 and 65535, got {v}")
        return v

    @property
    def bind_address(self) -> str:
        """Return the host:port pair the listener binds to."""
        return f"{self.PLUGIN_ADDR}:{self.PLUGIN_PORT}"

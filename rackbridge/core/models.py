"""Domain models for the rack bridge.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass, replace

DEFAULT_RACK_CONFIG_PATH = "rack/config.py"

WSGI_VERSION = (1, 0)

# Bridge-specific environ keys
LOGGER_KEY = "rackbridge.logger"
REQUEST_KEY = "rackbridge.request"

# Headers carried in the CGI variables instead of HTTP_* keys
CGI_HEADERS = {
    "content-type": "CONTENT_TYPE",
    "content-length": "CONTENT_LENGTH",
}


@dataclass(frozen=True)
class RackServletConfig:
    """Configuration for a RackServlet.

    rack_config_path names the rackup script evaluated at construction
    to produce the WSGI application.
    """

    rack_config_path: str = DEFAULT_RACK_CONFIG_PATH

    def __post_init__(self) -> None:
        """Validate config invariants on creation."""
        if not isinstance(self.rack_config_path, str):
            raise TypeError(
                f"rack_config_path must be a string, got {type(self.rack_config_path).__name__}"
            )
        if not self.rack_config_path.strip():
            raise ValueError("rack_config_path must be a non-empty string")

    def with_rack_config_path(self, rack_config_path: str) -> "RackServletConfig":
        """Return a copy of this config pointing at another rackup script."""
        return replace(self, rack_config_path=rack_config_path)

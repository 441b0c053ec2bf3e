from pathlib import Path

import pytest

from rackbridge.core.models import RackServletConfig
from rackbridge.core.servlet import RackServlet

APPS_DIR = Path(__file__).resolve().parent / "apps"


@pytest.fixture
def hello_config_path() -> str:
    """Path to the sample rackup script."""
    return str(APPS_DIR / "hello" / "config.py")


@pytest.fixture
def servlet(hello_config_path: str) -> RackServlet:
    """RackServlet serving the sample application."""
    return RackServlet(RackServletConfig().with_rack_config_path(hello_config_path))

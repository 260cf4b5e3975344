import pytest

from shadow_watch import extension
from shadow_watch.config.settings import ConfigurationManager, reset_configuration_manager
from shadow_watch.logging.logger import LoggingConfig


@pytest.fixture(autouse=True)
def clean_state():
    """Reset process-wide singletons between tests."""
    reset_configuration_manager()
    extension.deactivate()
    yield
    extension.deactivate()
    reset_configuration_manager()
    LoggingConfig.reset()


@pytest.fixture
def make_config():
    def _make(**env):
        return ConfigurationManager(environ={k: str(v) for k, v in env.items()})

    return _make

"""Shared test fixtures for tsbridge."""
import pytest

from config.settings import ProgressUiConfig, reset_settings
from native.factory import reset_backend
from native.memory_backend import InMemoryBackend
from native.null_backend import NullBackend
from tasksequence.environment import TsEnvironment
from tasksequence.progress import TsProgressUi

ENV_CLASS_ID = "Microsoft.SMS.TSEnvironment"
PROGRESS_CLASS_ID = "Microsoft.SMS.TsProgressUI"


@pytest.fixture(autouse=True)
def _reset_singletons():
    reset_settings()
    reset_backend()
    yield
    reset_settings()
    reset_backend()


@pytest.fixture
def sample_variables() -> dict[str, str]:
    """Variables a freshly started deployment typically carries."""
    return {
        "OSDComputerName": "PC01",
        "_SMSTSOrgName": "Acme",
    }


@pytest.fixture
def backend(sample_variables) -> InMemoryBackend:
    return InMemoryBackend(variables=sample_variables)


@pytest.fixture
def null_backend() -> NullBackend:
    return NullBackend()


@pytest.fixture
def progress_config() -> ProgressUiConfig:
    return ProgressUiConfig()


@pytest.fixture
def env(backend) -> TsEnvironment:
    return TsEnvironment(ENV_CLASS_ID, backend)


@pytest.fixture
def progress_ui(backend, progress_config) -> TsProgressUi:
    return TsProgressUi(PROGRESS_CLASS_ID, backend, progress_config)


@pytest.fixture
def offline_env(null_backend) -> TsEnvironment:
    return TsEnvironment(ENV_CLASS_ID, null_backend)


@pytest.fixture
def offline_progress_ui(null_backend, progress_config) -> TsProgressUi:
    return TsProgressUi(PROGRESS_CLASS_ID, null_backend, progress_config)

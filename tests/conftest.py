import pytest

from flashdeck.application.config import AppConfig
from flashdeck.application.study_session import StudyService
from flashdeck.domain.scheduling.models import ReviewState
from flashdeck.infrastructure.memory_repository import InMemoryCardRepository


@pytest.fixture(autouse=True)
def mock_home(tmp_path, monkeypatch):
    """Points HOME at a temp dir so no real config file leaks into tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in ("FLASHDECK_SESSION_LIMIT", "FLASHDECK_VERBOSE", "FLASHDECK_HOST", "FLASHDECK_PORT"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def repo():
    return InMemoryCardRepository()


@pytest.fixture
def service(repo):
    return StudyService(repo, AppConfig())


@pytest.fixture
def fresh_state():
    return ReviewState(easiness=2.5, interval=0, repetition=0, due_at=1000)

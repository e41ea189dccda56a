import pytest
from sqlmodel import Session, SQLModel

from ..core.config import Settings
from ..core.db import create_engine_for_url, get_engine, set_engine
from ..core.dependencies import get_custody_service


class FakeClock:
    def __init__(self, now: int = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def engine(tmp_path):
    test_db = tmp_path / "test.db"
    engine = create_engine_for_url(f"sqlite:///{test_db}")
    original_engine = get_engine()
    set_engine(engine)
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)

    yield engine

    set_engine(original_engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        contract_namespace="custody",
        retention_min_extent=5000,
        retention_target_extent=5000,
    )


@pytest.fixture
def service_for(session, settings, clock):
    def _make(caller):
        return get_custody_service(session, caller, settings=settings, clock=clock)

    return _make

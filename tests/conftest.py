# tests/conftest.py

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.labgen.db import Base
from backend.labgen.errors import GenerationUnavailable
from backend.labgen.history import MemoryHistorySink, SqlHistorySink
from backend.labgen.ids import CounterIds


class FakeGenerator:
    """Stands in for GenerationClient: replays canned responses or errors."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if not self.responses:
            raise GenerationUnavailable("backend down")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def aclose(self):
        pass


@pytest.fixture
def ids():
    return CounterIds()


@pytest.fixture
def down_backend():
    return FakeGenerator()


@pytest.fixture
def memory_history():
    return MemoryHistorySink(limit=50)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
    engine.dispose()


@pytest.fixture
def sql_history(session_factory):
    return SqlHistorySink(session_factory, limit=50)


@pytest.fixture
def fake_backend():
    return FakeGenerator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from plate_pipeline.infrastructure.Database.base import Base
from plate_pipeline.infrastructure.Database.site_repository import SqlSiteRepository


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def test_default_when_nothing_saved(session_factory):
    repo = SqlSiteRepository(session_factory=session_factory, default="없음")
    assert repo.get_site_id() == "없음"


def test_save_and_read_back(session_factory):
    repo = SqlSiteRepository(session_factory=session_factory, default="없음")
    repo.save_site_id("  camping-07 ")
    assert repo.get_site_id() == "camping-07"


def test_save_overwrites(session_factory):
    repo = SqlSiteRepository(session_factory=session_factory, default="없음")
    repo.save_site_id("A")
    repo.save_site_id("B")
    assert repo.get_site_id() == "B"

    # otra instancia sobre la misma BD ve el valor persistido
    assert SqlSiteRepository(session_factory=session_factory).get_site_id() == "B"


def test_blank_value_reads_as_default(session_factory):
    repo = SqlSiteRepository(session_factory=session_factory, default="없음")
    repo.save_site_id("A")
    repo.save_site_id("   ")
    assert repo.get_site_id() == "없음"

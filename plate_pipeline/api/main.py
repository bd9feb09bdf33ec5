from functools import lru_cache

from fastapi import Depends, FastAPI
from pydantic import BaseModel
from plate_pipeline.core.config import settings
from plate_pipeline.domain.Interfaces.site_repository import ISiteRepository
from plate_pipeline.infrastructure.Notification.status_board import StatusBoard

app = FastAPI(title=settings.app_name)

status_board = StatusBoard()


class SiteIdBody(BaseModel):
    site_id: str


def _open_site_repository() -> ISiteRepository:
    from plate_pipeline.infrastructure.Database.session import init_db
    from plate_pipeline.infrastructure.Database.site_repository import SqlSiteRepository
    init_db()
    return SqlSiteRepository()


@lru_cache(maxsize=1)
def get_site_repository() -> ISiteRepository:
    """Las tablas se crean una sola vez; el repositorio se comparte entre requests."""
    return _open_site_repository()


def get_status_board() -> StatusBoard:
    return status_board


@app.get("/health")
def health_check():
    return {"status": "ok", "env": settings.app_env}


@app.get("/status")
def status(board: StatusBoard = Depends(get_status_board)):
    return board.snapshot()


@app.get("/site-id")
def read_site_id(repo: ISiteRepository = Depends(get_site_repository)):
    return {"site_id": repo.get_site_id()}


@app.put("/site-id")
def update_site_id(body: SiteIdBody, repo: ISiteRepository = Depends(get_site_repository)):
    repo.save_site_id(body.site_id)
    return {"site_id": repo.get_site_id()}

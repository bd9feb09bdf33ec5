# plate_pipeline/infrastructure/Database/site_repository.py
import logging
from typing import Optional
from sqlalchemy.orm import sessionmaker
from plate_pipeline.core.config import settings
from plate_pipeline.domain.Interfaces.site_repository import ISiteRepository
from plate_pipeline.infrastructure.Database.entities.site_setting_entity import SiteSettingEntity

logger = logging.getLogger(__name__)

SITE_ID_KEY = "site_id"


class SqlSiteRepository(ISiteRepository):
    """Identificador de sitio persistido con SQLAlchemy (tabla clave/valor)."""

    def __init__(self, session_factory: Optional[sessionmaker] = None, default: Optional[str] = None):
        if session_factory is None:
            from plate_pipeline.infrastructure.Database.session import SessionLocal
            session_factory = SessionLocal
        self.session_factory = session_factory
        self.default = default if default is not None else settings.site_id_default

    def get_site_id(self) -> str:
        with self.session_factory() as db:
            entity = db.get(SiteSettingEntity, SITE_ID_KEY)
            if entity is None or not entity.value:
                return self.default
            return entity.value

    def save_site_id(self, site_id: str) -> None:
        site_id = (site_id or "").strip()
        with self.session_factory() as db:
            entity = db.get(SiteSettingEntity, SITE_ID_KEY)
            if entity is None:
                db.add(SiteSettingEntity(key=SITE_ID_KEY, value=site_id))
            else:
                entity.value = site_id
            db.commit()
        logger.info("Sitio guardado: %r", site_id)

# plate_pipeline/infrastructure/Database/session.py
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from plate_pipeline.core.config import settings
from plate_pipeline.infrastructure.Database.base import Base
import logging

logger = logging.getLogger(__name__)

# Intentar conectar con la BD configurada
DATABASE_URL = settings.db_url
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

try:
    engine = create_engine(DATABASE_URL, connect_args=connect_args)
    # Probar una conexión mínima
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info(f"✅ Conectado correctamente a la BD: {DATABASE_URL}")
except Exception as e:
    logger.warning(f"⚠️ No se pudo conectar a {DATABASE_URL}. Usando fallback SQLite. Error: {e}")
    DATABASE_URL = "sqlite:///./plate_pipeline.db"
    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})
    logger.info("💾 Base local SQLite inicializada como fallback")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    # registra las entidades en Base.metadata antes de crear tablas
    from plate_pipeline.infrastructure.Database.entities import site_setting_entity  # noqa: F401
    Base.metadata.create_all(bind=engine)

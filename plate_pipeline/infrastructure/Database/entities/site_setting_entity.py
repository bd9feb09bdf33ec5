# plate_pipeline/infrastructure/Database/entities/site_setting_entity.py
from sqlalchemy import Column, String
from plate_pipeline.infrastructure.Database.base import Base

class SiteSettingEntity(Base):
    __tablename__ = "site_settings"

    key = Column(String(100), primary_key=True)
    value = Column(String(255), nullable=False, default="")

    def __repr__(self):
        return f"<SiteSettingEntity(key='{self.key}', value='{self.value}')>"

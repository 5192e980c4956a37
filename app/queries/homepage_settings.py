from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import HomepageSetting

_active = HomepageSetting.is_deleted.is_(False)


def get_homepage_setting_by_id(db: Session, setting_id: int) -> Optional[HomepageSetting]:
    return db.scalar(select(HomepageSetting).where(HomepageSetting.id == setting_id, _active))


def get_homepage_setting_by_section_name(db: Session, section_name: str) -> Optional[HomepageSetting]:
    return db.scalar(select(HomepageSetting).where(HomepageSetting.section_name == section_name, _active))


def list_homepage_settings(db: Session, is_active: Optional[bool] = None) -> List[HomepageSetting]:
    stmt = select(HomepageSetting).where(_active)
    if is_active is not None:
        stmt = stmt.where(HomepageSetting.is_active.is_(is_active))
    stmt = stmt.order_by(HomepageSetting.section_position.asc(), HomepageSetting.id)
    return list(db.execute(stmt).scalars())


def insert_homepage_setting(db: Session, **values) -> HomepageSetting:
    setting = HomepageSetting(**values)
    db.add(setting)
    db.flush()
    return setting

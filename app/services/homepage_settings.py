import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError
from app.db.models import HomepageSetting, Product
from app.queries import homepage_settings as queries
from app.queries import products as product_queries
from app.schemas.homepage_settings import HomepageSettingCreate, HomepageSettingOut, HomepageSettingUpdate
from app.services.products import to_product_out

logger = logging.getLogger("app.homepage_settings")


def to_homepage_setting_out(setting: HomepageSetting, products: Dict[int, Product]) -> HomepageSettingOut:
    """Expand ``product_ids`` in their stored order, skipping products that no longer exist."""
    product_ids = list(setting.product_ids or [])
    return HomepageSettingOut(
        id=setting.id,
        section_name=setting.section_name,
        section_title=setting.section_title,
        section_description=setting.section_description,
        section_position=setting.section_position,
        is_active=setting.is_active,
        section_images=list(setting.section_images or []),
        product_ids=product_ids,
        products=[to_product_out(products[pid]) for pid in product_ids if pid in products],
        created_at=setting.created_at,
        updated_at=setting.updated_at,
    )


def _expand(db: Session, settings: List[HomepageSetting]) -> List[HomepageSettingOut]:
    wanted = [pid for setting in settings for pid in (setting.product_ids or [])]
    products = product_queries.get_products_by_ids(db, wanted)
    return [to_homepage_setting_out(setting, products) for setting in settings]


def require_homepage_setting(db: Session, setting_id: int) -> HomepageSetting:
    setting = queries.get_homepage_setting_by_id(db, setting_id)
    if not setting:
        raise NotFoundError("Homepage setting not found")
    return setting


def _ensure_section_name_available(db: Session, section_name: str, exclude_id: Optional[int] = None) -> None:
    existing = queries.get_homepage_setting_by_section_name(db, section_name)
    if existing and existing.id != exclude_id:
        raise ConflictError("Homepage setting with this section name already exists")


def list_homepage_settings(db: Session, is_active: Optional[bool] = None) -> List[HomepageSettingOut]:
    return _expand(db, queries.list_homepage_settings(db, is_active))


def get_homepage_setting(db: Session, setting_id: int) -> HomepageSettingOut:
    return _expand(db, [require_homepage_setting(db, setting_id)])[0]


def create_homepage_setting(db: Session, payload: HomepageSettingCreate) -> HomepageSettingOut:
    _ensure_section_name_available(db, payload.section_name)
    setting = queries.insert_homepage_setting(db, **payload.model_dump())
    db.commit()
    db.refresh(setting)
    logger.info("homepage_setting_created", extra={"homepage_setting_id": setting.id})
    return _expand(db, [setting])[0]


def update_homepage_setting(db: Session, setting_id: int, payload: HomepageSettingUpdate) -> HomepageSettingOut:
    setting = require_homepage_setting(db, setting_id)
    changes = payload.changes()
    if changes.get("section_name"):
        _ensure_section_name_available(db, changes["section_name"], exclude_id=setting.id)
    for field, value in changes.items():
        setattr(setting, field, value)
    db.commit()
    db.refresh(setting)
    return _expand(db, [setting])[0]


def delete_homepage_setting(db: Session, setting_id: int) -> int:
    setting = require_homepage_setting(db, setting_id)
    setting.mark_deleted()
    db.commit()
    logger.info("homepage_setting_deleted", extra={"homepage_setting_id": setting_id})
    return setting_id

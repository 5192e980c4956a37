import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.errors import BadRequestError, NotFoundError
from app.db.models import PricingConfig
from app.queries import pricing_config as queries
from app.schemas.common import money
from app.schemas.pricing_config import PricingConfigCreate, PricingConfigOut, PricingConfigUpdate
from app.services.product_types import require_product_type

logger = logging.getLogger("app.pricing_config")


def to_pricing_config_out(config: PricingConfig) -> PricingConfigOut:
    return PricingConfigOut(
        id=config.id,
        min_price=money(config.min_price),
        max_price=money(config.max_price),
        product_type_id=config.product_type_id,
        created_at=config.created_at,
    )


def require_pricing_config(db: Session, config_id: int) -> PricingConfig:
    config = queries.get_pricing_config_by_id(db, config_id)
    if not config:
        raise NotFoundError("Pricing config not found")
    return config


def parse_product_type_id(raw: Optional[str]) -> Optional[int]:
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise BadRequestError("Invalid product_type_id") from None


def list_pricing_configs(db: Session, product_type_id: Optional[int] = None) -> List[PricingConfigOut]:
    return [to_pricing_config_out(config) for config in queries.list_pricing_configs(db, product_type_id)]


def get_pricing_config(db: Session, config_id: int) -> PricingConfigOut:
    return to_pricing_config_out(require_pricing_config(db, config_id))


def create_pricing_config(db: Session, payload: PricingConfigCreate) -> PricingConfigOut:
    if payload.product_type_id is not None:
        require_product_type(db, payload.product_type_id)
    config = queries.insert_pricing_config(db, **payload.model_dump())
    db.commit()
    db.refresh(config)
    logger.info("pricing_config_created", extra={"pricing_config_id": config.id})
    return to_pricing_config_out(config)


def update_pricing_config(db: Session, config_id: int, payload: PricingConfigUpdate) -> PricingConfigOut:
    config = require_pricing_config(db, config_id)
    changes = payload.changes()
    if changes.get("product_type_id") is not None:
        require_product_type(db, changes["product_type_id"])
    min_price = changes.get("min_price", config.min_price)
    max_price = changes.get("max_price", config.max_price)
    if max_price is not None and max_price < min_price:
        raise BadRequestError("max_price must be greater than or equal to min_price")
    for field, value in changes.items():
        setattr(config, field, value)
    db.commit()
    db.refresh(config)
    return to_pricing_config_out(config)


def delete_pricing_config(db: Session, config_id: int) -> PricingConfigOut:
    config = require_pricing_config(db, config_id)
    config.mark_deleted()
    db.commit()
    logger.info("pricing_config_deleted", extra={"pricing_config_id": config_id})
    return to_pricing_config_out(config)

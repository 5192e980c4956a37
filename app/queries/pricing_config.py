from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import PricingConfig

_active = PricingConfig.is_deleted.is_(False)


def get_pricing_config_by_id(db: Session, config_id: int) -> Optional[PricingConfig]:
    return db.scalar(select(PricingConfig).where(PricingConfig.id == config_id, _active))


def list_pricing_configs(db: Session, product_type_id: Optional[int] = None) -> List[PricingConfig]:
    stmt = select(PricingConfig).where(_active)
    if product_type_id is not None:
        stmt = stmt.where(PricingConfig.product_type_id == product_type_id)
    stmt = stmt.order_by(PricingConfig.min_price.asc(), PricingConfig.id)
    return list(db.execute(stmt).scalars())


def insert_pricing_config(db: Session, **values) -> PricingConfig:
    config = PricingConfig(**values)
    db.add(config)
    db.flush()
    return config

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

NOT_DELETED = text("is_deleted = false")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def unique_among_active(name: str, *columns: str) -> Index:
    """Unique index that ignores soft-deleted rows, so deleted values can be reused."""
    return Index(name, *columns, unique=True, postgresql_where=NOT_DELETED, sqlite_where=NOT_DELETED)


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class SoftDeleteMixin:
    is_deleted = Column(Boolean, default=False, server_default=text("false"), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    def mark_deleted(self) -> None:
        self.is_deleted = True
        self.deleted_at = utcnow()


class User(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "users"
    __table_args__ = (
        unique_among_active("uq_users_username_active", "username"),
        unique_among_active("uq_users_email_active", "email"),
    )

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(80), nullable=False)
    email = Column(String(120), nullable=False)
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="admin")
    phone = Column(String(20), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)


class Customer(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "customers"
    __table_args__ = (unique_among_active("uq_customers_email_active", "email"),)

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    zip_code = Column(String(20), nullable=True)
    country = Column(String(100), nullable=True)
    email = Column(String(120), nullable=False)
    password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    email_verified = Column(Boolean, default=False, nullable=False)
    verification_code = Column(String(6), nullable=True)
    verification_code_expires = Column(DateTime(timezone=True), nullable=True)
    reset_code = Column(String(6), nullable=True)
    reset_code_expires = Column(DateTime(timezone=True), nullable=True)


class ProductType(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "product_types"
    __table_args__ = (unique_among_active("uq_product_types_name_active", "name"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    allowed_types = Column(JSON, nullable=True)

    products = relationship("Product", back_populates="product_type")


class SubCategory(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "sub_categories"
    __table_args__ = (unique_among_active("uq_sub_categories_type_name_active", "product_type_id", "name"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    product_type_id = Column(Integer, ForeignKey("product_types.id"), nullable=False, index=True)


class Product(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "products"
    __table_args__ = (
        unique_among_active("uq_products_name_active", "name"),
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    product_type_id = Column(Integer, ForeignKey("product_types.id"), nullable=False, index=True)
    sub_category_id = Column(Integer, ForeignKey("sub_categories.id", ondelete="SET NULL"), nullable=True, index=True)
    images = Column(JSON, nullable=True)
    extra_properties = Column(JSON, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    product_type = relationship("ProductType", back_populates="products")


class DeliveryOption(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "delivery_options"
    __table_args__ = (unique_among_active("uq_delivery_options_name_active", "name"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)


class Order(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("customers.id"), nullable=True, index=True)
    quantity = Column(Integer, nullable=False, default=0)
    subtotal = Column(Numeric(10, 2), nullable=False, default=0)
    delivery_cost = Column(Numeric(10, 2), nullable=False, default=0)
    total_price = Column(Numeric(10, 2), nullable=False)
    delivery_option_id = Column(Integer, ForeignKey("delivery_options.id"), nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    payment_status = Column(String(20), nullable=False, default="pending")
    payment_reference = Column(String(100), nullable=True)
    reference = Column(String(50), nullable=False, unique=True)
    delivery_address = Column(Text, nullable=True)
    customer_email = Column(String(120), nullable=True)
    customer_phone = Column(String(20), nullable=True)
    customer_name = Column(String(200), nullable=True)
    order_metadata = Column("metadata", JSON, nullable=True)

    items = relationship("OrderItem", back_populates="order", order_by="OrderItem.id")
    delivery_option = relationship("DeliveryOption")


class OrderItem(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    item_metadata = Column("metadata", JSON, nullable=True)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")


class PersonalizedOrder(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "personalized_orders"

    id = Column(Integer, primary_key=True, index=True)
    custom_message = Column(Text, nullable=False)
    selected_colors = Column(JSON, nullable=True)
    product_type = Column(String(100), nullable=False)
    order_metadata = Column("metadata", JSON, nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    order_status = Column(String(20), nullable=False, default="pending")
    delivery_status = Column(String(20), nullable=False, default="pending")
    customer_email = Column(String(120), nullable=False)
    customer_phone = Column(String(20), nullable=True)
    customer_name = Column(String(200), nullable=True)
    delivery_address = Column(Text, nullable=True)
    payment_status = Column(String(20), nullable=False, default="pending")
    payment_reference = Column(String(100), nullable=True)
    reference = Column(String(50), nullable=False, unique=True)


class Bundle(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "bundles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    discount_percentage = Column(Numeric(5, 2), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)


class BundleProduct(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "bundle_products"
    __table_args__ = (unique_among_active("uq_bundle_products_pair_active", "bundle_id", "product_id"),)

    id = Column(Integer, primary_key=True, index=True)
    bundle_id = Column(Integer, ForeignKey("bundles.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)


class Collection(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "collections"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    image = Column(JSON, nullable=True)
    product_type_id = Column(Integer, ForeignKey("product_types.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    product_type = relationship("ProductType")


class CollectionProduct(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "collection_products"
    __table_args__ = (
        unique_among_active("uq_collection_products_pair_active", "collection_id", "product_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    collection_id = Column(Integer, ForeignKey("collections.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)


class PricingConfig(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "pricing_config"

    id = Column(Integer, primary_key=True, index=True)
    min_price = Column(Numeric(10, 2), nullable=False, default=0)
    max_price = Column(Numeric(10, 2), nullable=True)
    product_type_id = Column(Integer, ForeignKey("product_types.id"), nullable=True)


class HomepageSetting(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "homepage_settings"
    __table_args__ = (unique_among_active("uq_homepage_settings_section_name_active", "section_name"),)

    id = Column(Integer, primary_key=True, index=True)
    section_name = Column(String(100), nullable=False)
    section_title = Column(String(255), nullable=False)
    section_description = Column(Text, nullable=True)
    section_position = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)
    section_images = Column(JSON, nullable=True)
    product_ids = Column(JSON, nullable=True)


class MailingListEntry(Base):
    __tablename__ = "mailing_list"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(120), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

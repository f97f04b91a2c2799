from sqlalchemy import BigInteger, Column, Integer, ForeignKey, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"
    #created_at comes back with the INSERT
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    total_cents = Column(BigInteger, nullable=False)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        order_by="OrderItemModel.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False)

    #snapshot taken at checkout, independent of later catalog changes
    name = Column(String(255), nullable=False)
    qty = Column(Integer, nullable=False)
    price_cents = Column(BigInteger, nullable=False)
    subtotal_cents = Column(BigInteger, nullable=False)

    order = relationship("OrderModel", back_populates="items")

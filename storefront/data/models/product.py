from sqlalchemy import BigInteger, Column, Integer, String, Text

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price_cents = Column(BigInteger, nullable=False)
    image_url = Column(Text, nullable=True)

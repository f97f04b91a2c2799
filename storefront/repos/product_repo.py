from typing import Dict, Iterable, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_products(self) -> List[ProductModel]:
        return list(
            self.db.execute(select(ProductModel).order_by(ProductModel.id)).scalars().all()
        )

    def get_products_by_ids(self, product_ids: Iterable[int]) -> Dict[int, ProductModel]:
        ids = sorted(set(product_ids))
        if not ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(ids))
        ).scalars().all()
        return {p.id: p for p in rows}

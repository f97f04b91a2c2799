# storefront/services/catalog_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.repos.product_repo import ProductRepo


class CatalogService:
    """Read-only catalog queries."""

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def list_products(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": p.id,
                "name": p.name,
                "description": p.description,
                "price_cents": p.price_cents,
                "image_url": p.image_url,
            }
            for p in self.repo.list_products()
        ]

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import ProductListOut
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=ProductListOut)
def list_products(db: Session = Depends(get_db)):
    return {"products": CatalogService(db).list_products()}

# storefront/data/seed.py
from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from storefront.data.database import Base, engine
from storefront.data import models  # noqa: F401  registers tables
from storefront.data.models.product import ProductModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_PRODUCTS = [
    {
        "name": "Aurelia Silk Gown",
        "description": "Floor-length silk evening gown with a timeless silhouette.",
        "price_cents": 12999,
        "image_url": "https://images.unsplash.com/photo-1519741497674-611481863552?q=80&w=1200&auto=format&fit=crop",
    },
    {
        "name": "Nocturne Velvet Dress",
        "description": "Midnight velvet with subtle shimmer, long sleeves.",
        "price_cents": 9999,
        "image_url": "https://images.unsplash.com/photo-1520975682031-ae1e76607f66?q=80&w=1200&auto=format&fit=crop",
    },
    {
        "name": "Éclat Cocktail Dress",
        "description": "Knee-length satin dress with minimalist lines.",
        "price_cents": 7999,
        "image_url": "https://images.unsplash.com/photo-1503341455253-b2e723bb3dbb?q=80&w=1200&auto=format&fit=crop",
    },
    {
        "name": "Seraphina Lace Midi",
        "description": "Delicate lace midi dress in pearl white.",
        "price_cents": 10999,
        "image_url": "https://images.unsplash.com/photo-1506863530036-1efeddceb993?q=80&w=1200&auto=format&fit=crop",
    },
    {
        "name": "Valencia Slip Dress",
        "description": "Silky slip dress with adjustable straps.",
        "price_cents": 6999,
        "image_url": "https://images.unsplash.com/photo-1541099649105-f69ad21f3246?q=80&w=1200&auto=format&fit=crop",
    },
]


def init_schema(bind: Engine | None = None, seed: bool = False) -> None:
    """Create missing tables; optionally seed the demo catalog."""
    bind = bind or engine
    logger.info("provisioning_tables", tables=sorted(Base.metadata.tables.keys()))
    Base.metadata.create_all(bind=bind)
    if seed:
        with Session(bind) as db:
            seed_products(db)


def seed_products(db: Session) -> int:
    # not forcing: only seed if empty
    count = db.execute(select(func.count()).select_from(ProductModel)).scalar_one()
    if count:
        logger.info("seed_skipped", existing_products=count)
        return 0
    try:
        db.add_all([ProductModel(**p) for p in DEMO_PRODUCTS])
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("catalog_seeded", products=len(DEMO_PRODUCTS))
    return len(DEMO_PRODUCTS)

# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.domain.errors import AppError
from storefront.domain.schemas import OrderEnvelope, OrderListOut
from storefront.services.order_service import OrderService
from storefront.utils.security import TokenClaims

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=OrderListOut)
def list_orders(
    claims: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Orders of the caller, newest first.
    """
    return {"orders": OrderService(db).list_orders(claims.sub)}


@router.post("/checkout", response_model=OrderEnvelope)
def checkout(
    claims: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Converts the caller's cart into an order.
    Cart missing/empty and unavailable products are 400, storage failures 500.
    """
    svc = OrderService(db)
    try:
        return {"order": svc.checkout(claims.sub)}
    except AppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

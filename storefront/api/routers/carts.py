# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.domain.errors import AppError
from storefront.domain.schemas import CartAddIn, CartOut, CartRemoveIn, OkOut
from storefront.services.cart_service import CartService
from storefront.utils.security import TokenClaims

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("", response_model=CartOut)
def get_cart(
    claims: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"items": CartService(db).get_cart(claims.sub)}


@router.post("/add", response_model=OkOut)
def add_item(
    payload: CartAddIn,
    claims: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    try:
        svc.add_item(claims.sub, payload.product_id, payload.qty)
    except AppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"ok": True}


@router.post("/remove", response_model=OkOut)
def remove_item(
    payload: CartRemoveIn,
    claims: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    try:
        svc.remove_item(claims.sub, payload.product_id)
    except AppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"ok": True}

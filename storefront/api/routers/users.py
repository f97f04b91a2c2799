from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import MeOut
from storefront.services.user_service import UserService
from storefront.utils.security import TokenClaims

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/me", response_model=MeOut)
def me(claims: TokenClaims = Depends(get_current_user), db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return {"user": service.get_user(claims.sub)}
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import AppError
from storefront.domain.schemas import AuthOut, LoginIn, SignupIn
from storefront.services.user_service import UserService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=AuthOut)
def signup(payload: SignupIn, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        token, user = service.signup(payload)
    except AppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"token": token, "user": user}


@router.post("/login", response_model=AuthOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        token, user = service.login(payload)
    except AppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"token": token, "user": user}

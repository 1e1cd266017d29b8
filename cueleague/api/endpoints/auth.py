from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cueleague.services import auth_service
from cueleague.schemas import auth_schemas
from cueleague.api.dependencies import get_db, get_current_organizer

router = APIRouter()

@router.post("/login", response_model=auth_schemas.Token)
def login(request: auth_schemas.LoginRequest):
    access_token = auth_service.login(request.password)
    return {"access_token": access_token, "token_type": "bearer"}

@router.post("/keys", response_model=auth_schemas.AccessKeyBatch, status_code=status.HTTP_201_CREATED)
def generate_access_keys(
    request: auth_schemas.KeyBatchRequest,
    db: Session = Depends(get_db),
    organizer: auth_schemas.TokenData = Depends(get_current_organizer),
):
    """Mints single-use organizer keys. The plain keys are only shown once."""
    return {"keys": auth_service.generate_keys(db, count=request.count)}

@router.post("/redeem", response_model=auth_schemas.Token)
def redeem_access_key(request: auth_schemas.RedeemRequest, db: Session = Depends(get_db)):
    access_token = auth_service.redeem_key(db, request.key)
    return {"access_token": access_token, "token_type": "bearer"}

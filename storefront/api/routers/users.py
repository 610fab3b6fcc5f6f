from fastapi import APIRouter, Depends, HTTPException
from storefront.api.dependencies import get_user_service
from storefront.domain.errors import ServiceError
from storefront.services.user_service import UserService
from storefront.domain.schemas import UserCreate, UserRead

router = APIRouter(prefix="/users", tags=["users"])

@router.post("/", response_model=UserRead)
def create_user(payload: UserCreate, svc: UserService = Depends(get_user_service)):
    try:
        return svc.create_user(payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())

@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, svc: UserService = Depends(get_user_service)):
    try:
        return svc.get_user(user_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())

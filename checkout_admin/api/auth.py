from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from checkout_admin.api.deps import get_db, get_settings
from checkout_admin.config import Settings
from checkout_admin.schemas.auth import LoginRequest, LoginResponse
from checkout_admin.schemas.common import ErrorResponse
from checkout_admin.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    responses={
        401: {
            "model": ErrorResponse,
            "description": "Invalid credentials",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "message": "Invalid credentials",
                        "error": "http_401",
                        "details": None,
                        "request_id": "3f1c9a0e-5b7d-4c2e-9a61-0d8e2f4b7c11",
                    }
                }
            },
        },
    },
)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    s: Settings = Depends(get_settings),
):
    return auth_service.login(db, payload.email, payload.password, s)

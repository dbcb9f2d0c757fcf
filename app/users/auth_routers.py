# app/users/auth_routers.py

from fastapi import APIRouter, Depends, HTTPException

from app.clinical_store.authorization import Principal
from app.users.auth_dependencies import get_current_principal, get_identity_provider
from app.users.auth_services import IdentityProvider
from app.users.user_models.schemas import UserLogin, UserLoginResponse, UserRegister, UserResponse

router = APIRouter()


# ============================================================
# ✅ REGISTER
# ============================================================
@router.post("/register", response_model=UserLoginResponse, status_code=201)
def register_user(
    user_data: UserRegister,
    identity: IdentityProvider = Depends(get_identity_provider),
) -> UserLoginResponse:
    access_token, user = identity.register(user_data)
    return UserLoginResponse(access_token=access_token, token_type="bearer", user=user)


# ============================================================
# ✅ AUTHENTICATE USER (LOGIN)
# ============================================================
@router.post("/login", response_model=UserLoginResponse)
def login(
    user_data: UserLogin,
    identity: IdentityProvider = Depends(get_identity_provider),
) -> UserLoginResponse:
    access_token, user = identity.login(user_data)
    return UserLoginResponse(access_token=access_token, token_type="bearer", user=user)


# ============================================================
# ✅ CURRENT USER
# ============================================================
@router.get("/me", response_model=UserResponse)
def me(
    principal: Principal = Depends(get_current_principal),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> UserResponse:
    user = identity.get_account(principal.account_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user

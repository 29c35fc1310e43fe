from fastapi import APIRouter, Depends, HTTPException

from signdesk.dependencies import get_auth_service, require_user
from signdesk.schemas.auth import DemoUser, LoginRequest, LoginResponse
from signdesk.services.auth_service import AuthService, InvalidCredentialsError

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(req: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    if not req.email or not req.password:
        raise HTTPException(status_code=400, detail="Email and password are required")
    try:
        token, user = await auth.login(req.email, req.password)
    except InvalidCredentialsError:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return LoginResponse(token=token, user=user)


@router.post("/logout")
async def logout(
    _user: DemoUser = Depends(require_user),
    auth: AuthService = Depends(get_auth_service),
):
    auth.logout()
    return {"message": "Logged out"}


@router.get("/me", response_model=DemoUser)
async def me(user: DemoUser = Depends(require_user)):
    return user

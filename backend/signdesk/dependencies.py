from fastapi import Depends, Header, HTTPException, Request

from signdesk.schemas.auth import DemoUser
from signdesk.services.auth_service import AuthService
from signdesk.services.document_store import DocumentStore


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth


async def require_user(
    authorization: str = Header(...),
    auth: AuthService = Depends(get_auth_service),
) -> DemoUser:
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    user = auth.validate_token(authorization[7:])
    if user is None:
        raise HTTPException(status_code=401, detail="Not logged in or token expired")
    return user


async def require_admin(user: DemoUser = Depends(require_user)) -> DemoUser:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from docsync.core.security import verify_token
from docsync.domains.identity.entities import Identity

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> Identity:
    """Зависимость для получения текущего пользователя"""
    payload = verify_token(credentials.credentials) if credentials else None

    if not payload or not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Identity(id=str(payload["sub"]), email=payload.get("email"))

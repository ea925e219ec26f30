from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from craft_pricing.core.security import ADMIN_ROLE, decode_access_token
from craft_pricing.database.connection import get_db
from craft_pricing.models.user import AdminUser
from craft_pricing.services.admin_service import get_admin_by_username
from craft_pricing.services.price_update_service import PriceUpdateService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/admin/login")


def get_current_admin(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> AdminUser:
    token_data = decode_access_token(token)

    if not token_data.username:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    admin = get_admin_by_username(db, token_data.username)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not admin.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    if token_data.role != ADMIN_ROLE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return admin


def require_admin(admin: AdminUser = Depends(get_current_admin)) -> AdminUser:
    return admin


def get_price_update_service(request: Request) -> PriceUpdateService:
    """The service built at startup; shared by routes and the scheduler."""
    service = getattr(request.app.state, "price_update_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Price update service not ready")
    return service

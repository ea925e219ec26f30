from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from craft_pricing.core.security import ADMIN_ROLE, create_access_token
from craft_pricing.database.connection import get_db
from craft_pricing.schemas.user import AdminLogin, Token
from craft_pricing.services.admin_service import authenticate

router = APIRouter(prefix="/api/admin", tags=["Auth"])


@router.post("/login", response_model=Token)
def login(data: AdminLogin, db: Session = Depends(get_db)):
    admin = authenticate(db, data.username, data.password)
    if not admin:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    access_token = create_access_token({"sub": admin.username, "role": ADMIN_ROLE})
    return Token(access_token=access_token)

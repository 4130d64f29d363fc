"""
Authentication Routes

Verification of identity-provider tokens and the current-employee endpoint.
Token issuance and passwords belong to the identity provider.
"""
import jwt
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Depends, Header

from ..config import Config
from ..models.employee import Actor, EmployeeRole
from ..services.engine_service import get_engine_service, EngineService

logger = logging.getLogger("dashchat.routes.auth")
router = APIRouter(prefix="/auth", tags=["auth"])


# ============================================
# Helpers
# ============================================

def create_token(user_id: UUID, role: str = EmployeeRole.EMPLOYEE.value, expires_in_hours: Optional[int] = None) -> str:
    """Create JWT token for an employee (identity provider format)"""
    hours = expires_in_hours if expires_in_hours is not None else Config.JWT_EXPIRATION_HOURS
    payload = {
        "user_id": str(user_id),
        "role": role,
        "exp": datetime.now(timezone.utc) + timedelta(hours=hours),
    }
    return jwt.encode(payload, Config.JWT_SECRET, algorithm=Config.JWT_ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """Verify and decode JWT token"""
    try:
        payload = jwt.decode(token, Config.JWT_SECRET, algorithms=[Config.JWT_ALGORITHM])
        return payload
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def actor_from_token(token: Optional[str]) -> Optional[Actor]:
    """Build the caller identity from a token; None if missing or invalid"""
    if not token:
        return None
    payload = verify_token(token)
    if not payload:
        return None
    try:
        user_id = UUID(payload["user_id"])
    except (KeyError, TypeError, ValueError):
        return None
    try:
        role = EmployeeRole(payload.get("role", EmployeeRole.EMPLOYEE.value))
    except ValueError:
        role = EmployeeRole.EMPLOYEE
    return Actor(user_id=user_id, role=role)


async def get_current_user(authorization: str = Header(None)) -> Actor:
    """Dependency to get current authenticated employee"""
    if not authorization:
        raise HTTPException(status_code=401, detail="Authorization header required")

    # Expect "Bearer <token>"
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    actor = actor_from_token(parts[1])
    if not actor:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return actor


# ============================================
# Routes
# ============================================

@router.get("/me")
async def get_current_user_info(
    current_user: Actor = Depends(get_current_user),
    engine: EngineService = Depends(get_engine_service),
):
    """Get current authenticated employee's public information"""
    employee = await engine.directory.get_employee(current_user.user_id)
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee.to_dict()

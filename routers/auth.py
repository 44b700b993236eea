from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from db.init import get_db
from models.branch import Branch
from utils.errors import AuthError, ValidationError
from utils.security import create_access_token, verify_password
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


@router.post("/login")
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """
    Branch login. `username` is the branch name. The token carries the
    branch id, name, role and client id used by every protected route.
    """
    if not data.username or not data.password:
        raise ValidationError("Username and password are required")

    branch = db.query(Branch).filter(Branch.name == data.username).first()
    if not branch or not verify_password(data.password, branch.password):
        logger.info(f"Failed login for branch {data.username!r}")
        raise AuthError("Invalid credentials")

    token = create_access_token(
        {
            "branchId": branch.id,
            "name": branch.name,
            "role": branch.role,
            "clientId": branch.client_id,
        }
    )
    logger.info(f"Login successful for branch {branch.name!r}")
    return {
        "token": token,
        "user": {
            "id": branch.id,
            "name": branch.name,
            "email": branch.email,
            "role": branch.role,
            "client_id": branch.client_id,
        },
    }

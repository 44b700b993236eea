from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from db.init import Base
from pydantic import BaseModel


class Branch(Base):
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"))
    name = Column(String(150), unique=True, index=True, nullable=False)
    email = Column(String(150))
    phone = Column(String(30))
    address = Column(String(250))
    password = Column(String(255), nullable=False)  # bcrypt hash
    role = Column(String(30), default="branch")
    created_at = Column(DateTime, default=datetime.utcnow)


class BranchIn(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


# Columns safe to send back; the password hash never leaves the API.
BRANCH_PUBLIC_FIELDS = ("id", "client_id", "name", "email", "phone", "address", "role", "created_at")


def branch_to_dict(branch: Branch) -> dict:
    return {f: getattr(branch, f) for f in BRANCH_PUBLIC_FIELDS}

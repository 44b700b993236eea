from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, DateTime
from db.init import Base
from pydantic import BaseModel, Field


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    email = Column(String(150))
    phone = Column(String(30))
    address = Column(String(250))
    created_at = Column(DateTime, default=datetime.utcnow)


class ClientIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

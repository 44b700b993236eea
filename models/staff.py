from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, DateTime
from db.init import Base
from pydantic import BaseModel


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    photo_url = Column(String(512))
    empl_no = Column(String(50), nullable=False)
    id_no = Column(String(50), nullable=False)
    role = Column(String(50), nullable=False)
    status = Column(Integer, default=1)  # 1 active / 0 inactive
    created_at = Column(DateTime, default=datetime.utcnow)


class StaffIn(BaseModel):
    name: Optional[str] = None
    photo_url: Optional[str] = None
    empl_no: Optional[str] = None
    id_no: Optional[str] = None
    role: Optional[str] = None


class StaffStatusIn(BaseModel):
    status: int

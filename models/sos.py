from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime
from db.init import Base
from pydantic import BaseModel

SOS_STATUSES = ("pending", "in_progress", "resolved")


class Sos(Base):
    __tablename__ = "sos"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id"))
    latitude = Column(Numeric(10, 7))
    longitude = Column(Numeric(10, 7))
    status = Column(String(20), default="pending")
    comment = Column(String(500))
    created_at = Column(DateTime, default=datetime.utcnow)


class SosStatusIn(BaseModel):
    status: str
    comment: Optional[str] = None

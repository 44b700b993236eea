from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime
from db.init import Base
from pydantic import BaseModel


class Notice(Base):
    __tablename__ = "notices"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    created_by = Column(Integer, ForeignKey("staff.id"))
    status = Column(Integer, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)


class NoticeIn(BaseModel):
    title: str
    content: str
    created_by: Optional[int] = None


class NoticeStatusIn(BaseModel):
    status: int

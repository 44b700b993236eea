from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, Integer, ForeignKey, Numeric, DateTime
from db.init import Base
from pydantic import BaseModel


class ServiceCharge(Base):
    __tablename__ = "service_charges"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    service_type_id = Column(Integer, ForeignKey("service_types.id"), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class ServiceChargeIn(BaseModel):
    service_type_id: Optional[int] = None
    price: Optional[Decimal] = None

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Literal, Optional

from sqlalchemy import Column, Integer, String, Text, ForeignKey, Numeric, DateTime
from db.init import Base
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from models.status import RequestStatus

Priority = Literal["low", "medium", "high"]


class Request(Base):
    __tablename__ = "requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    service_type_id = Column(Integer, ForeignKey("service_types.id"), nullable=False)
    pickup_location = Column(String(255), nullable=False)
    delivery_location = Column(String(255), nullable=False)
    pickup_date = Column(DateTime, nullable=False, index=True)
    description = Column(Text)
    priority = Column(String(10), default="medium")
    status = Column(String(20), default=RequestStatus.PENDING.value, index=True)
    my_status = Column(Integer, default=0, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    latitude = Column(Numeric(10, 7))
    longitude = Column(Numeric(10, 7))
    team_id = Column(Integer, ForeignKey("teams.id"))
    staff_id = Column(Integer, ForeignKey("staff.id"))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class RequestCreate(BaseModel):
    """
    Body of POST /api/requests. Every field is optional here; the store
    reports which required ones are missing in a single error.
    """
    branch_id: Optional[int] = Field(None, alias="branchId")
    branch_name: Optional[str] = Field(None, alias="branchName")
    service_type_id: Optional[int] = Field(None, alias="serviceTypeId")
    pickup_location: Optional[str] = Field(None, alias="pickupLocation")
    delivery_location: Optional[str] = Field(None, alias="deliveryLocation")
    pickup_date: Optional[datetime] = Field(None, alias="pickupDate")
    description: Optional[str] = None
    priority: Optional[Priority] = None
    my_status: Optional[int] = Field(0, alias="myStatus")
    price: Optional[Decimal] = None
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None


class RequestPatch(BaseModel):
    """
    Body of PATCH /api/requests/{id}. Only keys present in the body are
    written; keys outside this allow-list are rejected.
    """
    model_config = ConfigDict(extra="forbid")

    service_type_id: Optional[int] = Field(None, alias="serviceTypeId")
    pickup_location: Optional[str] = Field(None, alias="pickupLocation")
    delivery_location: Optional[str] = Field(None, alias="deliveryLocation")
    pickup_date: Optional[datetime] = Field(None, alias="pickupDate")
    description: Optional[str] = None
    priority: Optional[Priority] = None
    status: Optional[str] = None
    my_status: Optional[int] = Field(None, alias="myStatus")
    team_id: Optional[int] = Field(None, validation_alias=AliasChoices("team_id", "teamId"))
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None

    def has(self, field: str) -> bool:
        return field in self.model_fields_set

    def changes(self) -> Dict[str, Any]:
        """Column name -> value for every field the caller supplied."""
        return {name: getattr(self, name) for name in self.model_fields_set}


# storage column -> API field; anything not listed passes through as-is.
# team_id keeps its storage name on the way out.
REQUEST_FIELD_MAP = {
    "user_id": "userId",
    "user_name": "userName",
    "service_type_id": "serviceTypeId",
    "service_type_name": "serviceTypeName",
    "pickup_location": "pickupLocation",
    "delivery_location": "deliveryLocation",
    "pickup_date": "pickupDate",
    "my_status": "myStatus",
    "branch_id": "branchId",
    "branch_name": "branchName",
    "client_name": "clientName",
    "staff_id": "staffId",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}


def map_request_fields(row: Dict[str, Any]) -> Dict[str, Any]:
    return {REQUEST_FIELD_MAP.get(key, key): value for key, value in row.items()}

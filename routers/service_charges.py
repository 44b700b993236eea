from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from db.init import as_dict, get_db, transaction
from models.client import Client
from models.service_charge import ServiceCharge, ServiceChargeIn
from models.service_type import ServiceType
from utils.deps import ADMIN_ROLE, get_current_user, role_required
from utils.errors import NotFoundError, ValidationError

router = APIRouter()


def _charge_row(db: Session, charge_id: int) -> dict:
    charge, service_type_name = (
        db.query(ServiceCharge, ServiceType.name)
        .outerjoin(ServiceType, ServiceType.id == ServiceCharge.service_type_id)
        .filter(ServiceCharge.id == charge_id)
        .one()
    )
    return {**as_dict(charge), "service_type_name": service_type_name}


def _check_refs(db: Session, client_id: int, service_type_id=None):
    if not db.query(Client.id).filter(Client.id == client_id).first():
        raise NotFoundError("Client not found")
    if service_type_id is not None:
        if not db.query(ServiceType.id).filter(ServiceType.id == service_type_id).first():
            raise ValidationError("Invalid service type")


@router.get("/{client_id}/service-charges", dependencies=[Depends(get_current_user)])
def get_service_charges(client_id: int, db: Session = Depends(get_db)):
    _check_refs(db, client_id)
    rows = (
        db.query(ServiceCharge, ServiceType.name)
        .outerjoin(ServiceType, ServiceType.id == ServiceCharge.service_type_id)
        .filter(ServiceCharge.client_id == client_id)
        .order_by(ServiceType.name.asc())
        .all()
    )
    return [{**as_dict(c), "service_type_name": name} for c, name in rows]


@router.post(
    "/{client_id}/service-charges",
    dependencies=[Depends(role_required(ADMIN_ROLE))],
    status_code=status.HTTP_201_CREATED,
)
def create_service_charge(client_id: int, data: ServiceChargeIn, db: Session = Depends(get_db)):
    if data.service_type_id is None or data.price is None:
        raise ValidationError("Missing required fields")
    with transaction(db):
        _check_refs(db, client_id, data.service_type_id)
        charge = ServiceCharge(
            client_id=client_id,
            service_type_id=data.service_type_id,
            price=data.price,
        )
        db.add(charge)
        db.flush()
        result = _charge_row(db, charge.id)
    return result


@router.put(
    "/{client_id}/service-charges/{charge_id}",
    dependencies=[Depends(role_required(ADMIN_ROLE))],
)
def update_service_charge(client_id: int, charge_id: int, data: ServiceChargeIn, db: Session = Depends(get_db)):
    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    with transaction(db):
        _check_refs(db, client_id, updates.get("service_type_id"))
        charge = (
            db.query(ServiceCharge)
            .filter(ServiceCharge.id == charge_id, ServiceCharge.client_id == client_id)
            .first()
        )
        if not charge:
            raise NotFoundError("Service charge not found")
        for k, v in updates.items():
            setattr(charge, k, v)
        db.flush()
        result = _charge_row(db, charge.id)
    return result


@router.delete(
    "/{client_id}/service-charges/{charge_id}",
    dependencies=[Depends(role_required(ADMIN_ROLE))],
)
def delete_service_charge(client_id: int, charge_id: int, db: Session = Depends(get_db)):
    with transaction(db):
        charge = (
            db.query(ServiceCharge)
            .filter(ServiceCharge.id == charge_id, ServiceCharge.client_id == client_id)
            .first()
        )
        if not charge:
            raise NotFoundError("Service charge not found")
        db.delete(charge)
    return {"deleted": True}

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from db.init import as_dict, get_db
from models.service_type import ServiceType
from utils.errors import NotFoundError

router = APIRouter()


@router.get("")
def get_all(db: Session = Depends(get_db)):
    return [as_dict(s) for s in db.query(ServiceType).order_by(ServiceType.name.asc()).all()]


@router.get("/{id}")
def get_by_id(id: int, db: Session = Depends(get_db)):
    s = db.query(ServiceType).filter(ServiceType.id == id).first()
    if not s:
        raise NotFoundError("Service type not found")
    return as_dict(s)

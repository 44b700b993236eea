from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from db.init import as_dict, get_db, transaction
from models.staff import Staff, StaffIn, StaffStatusIn
from utils.deps import get_current_user
from utils.errors import NotFoundError, ValidationError

router = APIRouter(dependencies=[Depends(get_current_user)])

REQUIRED_FIELDS = ("name", "empl_no", "id_no", "role")


def _require(data: StaffIn):
    missing = [f for f in REQUIRED_FIELDS if not getattr(data, f)]
    if missing:
        raise ValidationError("Missing required fields", error={"missing": missing})


def _get_staff(db: Session, staff_id: int) -> Staff:
    member = db.query(Staff).filter(Staff.id == staff_id).first()
    if not member:
        raise NotFoundError("Staff member not found")
    return member


@router.get("")
def get_all_staff(db: Session = Depends(get_db)):
    rows = db.query(Staff).order_by(Staff.created_at.desc(), Staff.id.desc()).all()
    return [as_dict(s) for s in rows]


@router.get("/{staff_id}")
def get_staff_by_id(staff_id: int, db: Session = Depends(get_db)):
    return as_dict(_get_staff(db, staff_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_staff(data: StaffIn, db: Session = Depends(get_db)):
    _require(data)
    with transaction(db):
        member = Staff(
            name=data.name,
            photo_url=data.photo_url or None,
            empl_no=data.empl_no,
            id_no=data.id_no,
            role=data.role,
            status=1,
        )
        db.add(member)
        db.flush()
        result = as_dict(member)
    return result


@router.put("/{staff_id}")
def update_staff(staff_id: int, data: StaffIn, db: Session = Depends(get_db)):
    _require(data)
    with transaction(db):
        member = _get_staff(db, staff_id)
        member.name = data.name
        member.photo_url = data.photo_url or None
        member.empl_no = data.empl_no
        member.id_no = data.id_no
        member.role = data.role
        db.flush()
        result = as_dict(member)
    return result


@router.put("/{staff_id}/status")
def update_staff_status(staff_id: int, data: StaffStatusIn, db: Session = Depends(get_db)):
    if data.status not in (0, 1):
        raise ValidationError("Status must be 0 or 1")
    with transaction(db):
        member = _get_staff(db, staff_id)
        member.status = data.status
        db.flush()
        result = as_dict(member)
    return result


@router.delete("/{staff_id}")
def delete_staff(staff_id: int, db: Session = Depends(get_db)):
    with transaction(db):
        db.delete(_get_staff(db, staff_id))
    return {"deleted": True}

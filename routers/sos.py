from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from db.init import as_dict, get_db, transaction
from models.sos import SOS_STATUSES, Sos, SosStatusIn
from models.staff import Staff
from utils.deps import get_current_user
from utils.errors import NotFoundError, ValidationError

router = APIRouter(dependencies=[Depends(get_current_user)])


def _with_guard(db: Session):
    return (
        db.query(Sos, Staff.name.label("guard_name"))
        .outerjoin(Staff, Staff.id == Sos.staff_id)
    )


@router.get("")
def get_sos_list(db: Session = Depends(get_db)):
    rows = _with_guard(db).order_by(Sos.created_at.desc(), Sos.id.desc()).all()
    return [{**as_dict(s), "guard_name": guard} for s, guard in rows]


@router.patch("/{sos_id}/status")
def update_sos_status(sos_id: int, data: SosStatusIn, db: Session = Depends(get_db)):
    if data.status not in SOS_STATUSES:
        raise ValidationError("Invalid status")

    with transaction(db):
        alert = db.query(Sos).filter(Sos.id == sos_id).first()
        if not alert:
            raise NotFoundError("SOS alert not found")
        alert.status = data.status
        alert.comment = data.comment or None
        db.flush()
        sos, guard = _with_guard(db).filter(Sos.id == sos_id).one()
        result = {**as_dict(sos), "guard_name": guard}
    return result

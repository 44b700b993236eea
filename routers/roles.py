from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from db.init import as_dict, get_db
from models.role import Role
from utils.deps import get_current_user

router = APIRouter()


@router.get("", dependencies=[Depends(get_current_user)])
def get_all(db: Session = Depends(get_db)):
    return [as_dict(r) for r in db.query(Role).order_by(Role.name.asc()).all()]

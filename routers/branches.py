from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from db.init import get_db
from models.branch import Branch, branch_to_dict
from models.client import Client
from utils.deps import get_current_user

router = APIRouter()


@router.get("", dependencies=[Depends(get_current_user)])
def get_all_branches_without_client(db: Session = Depends(get_db)):
    """Every branch across clients, with the owning client's name."""
    rows = (
        db.query(Branch, Client.name.label("client_name"))
        .outerjoin(Client, Client.id == Branch.client_id)
        .order_by(Branch.name.asc())
        .all()
    )
    return [{**branch_to_dict(b), "client_name": client_name} for b, client_name in rows]

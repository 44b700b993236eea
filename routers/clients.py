from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from db.init import as_dict, get_db, transaction
from models.branch import Branch, BranchIn, branch_to_dict
from models.client import Client, ClientIn
from utils.deps import ADMIN_ROLE, get_current_user, role_required
from utils.errors import NotFoundError, ValidationError
from utils.security import hash_password

router = APIRouter()


def _get_client(db: Session, client_id: int) -> Client:
    client = db.query(Client).filter(Client.id == client_id).first()
    if not client:
        raise NotFoundError("Client not found")
    return client


def _get_branch(db: Session, client_id: int, branch_id: int) -> Branch:
    branch = (
        db.query(Branch)
        .filter(Branch.id == branch_id, Branch.client_id == client_id)
        .first()
    )
    if not branch:
        raise NotFoundError("Branch not found")
    return branch


# ---- clients ----
@router.get("", dependencies=[Depends(get_current_user)])
def get_all_clients(db: Session = Depends(get_db)):
    return [as_dict(c) for c in db.query(Client).order_by(Client.name.asc()).all()]


@router.get("/{client_id}", dependencies=[Depends(get_current_user)])
def get_client(client_id: int, db: Session = Depends(get_db)):
    return as_dict(_get_client(db, client_id))


@router.post(
    "",
    dependencies=[Depends(role_required(ADMIN_ROLE))],
    status_code=status.HTTP_201_CREATED,
)
def create_client(data: ClientIn, db: Session = Depends(get_db)):
    client = Client(**data.model_dump())
    with transaction(db):
        db.add(client)
        db.flush()
        result = as_dict(client)
    return result


@router.put("/{client_id}", dependencies=[Depends(role_required(ADMIN_ROLE))])
def update_client(client_id: int, data: ClientIn, db: Session = Depends(get_db)):
    with transaction(db):
        client = _get_client(db, client_id)
        for k, v in data.model_dump().items():
            setattr(client, k, v)
        db.flush()
        result = as_dict(client)
    return result


@router.delete("/{client_id}", dependencies=[Depends(role_required(ADMIN_ROLE))])
def delete_client(client_id: int, db: Session = Depends(get_db)):
    try:
        with transaction(db):
            db.delete(_get_client(db, client_id))
    except IntegrityError as e:
        raise HTTPException(
            status_code=409,
            detail="Client still has branches or service charges",
        ) from e
    return {"deleted": True}


# ---- branches of a client ----
@router.get("/{client_id}/branches", dependencies=[Depends(get_current_user)])
def get_all_branches(client_id: int, db: Session = Depends(get_db)):
    _get_client(db, client_id)
    branches = (
        db.query(Branch)
        .filter(Branch.client_id == client_id)
        .order_by(Branch.name.asc())
        .all()
    )
    return [branch_to_dict(b) for b in branches]


@router.post(
    "/{client_id}/branches",
    dependencies=[Depends(role_required(ADMIN_ROLE))],
    status_code=status.HTTP_201_CREATED,
)
def create_branch(client_id: int, data: BranchIn, db: Session = Depends(get_db)):
    if not data.name or not data.password:
        raise ValidationError("Missing required fields", error={"missing": [
            f for f in ("name", "password") if not getattr(data, f)
        ]})
    try:
        with transaction(db):
            _get_client(db, client_id)
            branch = Branch(
                client_id=client_id,
                name=data.name,
                email=data.email,
                phone=data.phone,
                address=data.address,
                password=hash_password(data.password),
                role=data.role or "branch",
            )
            db.add(branch)
            db.flush()
            result = branch_to_dict(branch)
    except IntegrityError as e:
        raise HTTPException(status_code=409, detail="Branch name already exists") from e
    return result


@router.put("/{client_id}/branches/{branch_id}", dependencies=[Depends(role_required(ADMIN_ROLE))])
def update_branch(client_id: int, branch_id: int, data: BranchIn, db: Session = Depends(get_db)):
    updates = data.model_dump(exclude_unset=True)
    if updates.get("password"):
        updates["password"] = hash_password(updates["password"])
    else:
        updates.pop("password", None)
    if "name" in updates and not updates["name"]:
        raise ValidationError("Branch name cannot be empty")

    try:
        with transaction(db):
            branch = _get_branch(db, client_id, branch_id)
            for k, v in updates.items():
                setattr(branch, k, v)
            db.flush()
            result = branch_to_dict(branch)
    except IntegrityError as e:
        raise HTTPException(status_code=409, detail="Branch name already exists") from e
    return result


@router.delete("/{client_id}/branches/{branch_id}", dependencies=[Depends(role_required(ADMIN_ROLE))])
def delete_branch(client_id: int, branch_id: int, db: Session = Depends(get_db)):
    try:
        with transaction(db):
            db.delete(_get_branch(db, client_id, branch_id))
    except IntegrityError as e:
        raise HTTPException(status_code=409, detail="Branch still has requests") from e
    return {"deleted": True}

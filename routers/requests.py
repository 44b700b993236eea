from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from db.init import get_db
from db.request_store import RequestStore
from models.request import RequestCreate, RequestPatch
from utils.deps import get_current_user

router = APIRouter()


def get_store(db: Session = Depends(get_db)) -> RequestStore:
    return RequestStore(db)


@router.get("")
def list_requests(
    status_: Optional[str] = Query(None, alias="status"),
    my_status: Optional[int] = Query(None, alias="myStatus"),
    branch_id: Optional[int] = Query(None, alias="branchId"),
    pickup_date: Optional[date] = Query(None, alias="pickupDate"),
    store: RequestStore = Depends(get_store),
    payload=Depends(get_current_user),
):
    """
    Requests newest first, joined with branch, client and service type
    names. Filters combine with AND; pickupDate matches the calendar day.
    """
    return store.list_requests(
        status=status_,
        my_status=my_status,
        branch_id=branch_id,
        pickup_date=pickup_date,
    )


@router.get("/{request_id}")
def get_request(request_id: int, store: RequestStore = Depends(get_store), payload=Depends(get_current_user)):
    return store.get_request(request_id)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_request(
    data: RequestCreate,
    store: RequestStore = Depends(get_store),
    payload=Depends(get_current_user),
):
    return store.create_request(data, principal=payload)


@router.patch("/{request_id}")
def patch_request(
    request_id: int,
    data: RequestPatch,
    store: RequestStore = Depends(get_store),
    payload=Depends(get_current_user),
):
    """
    Partial update. Attaching a team (team_id or teamId) also assigns the
    team's crew commander as the request's staff member.
    """
    return store.patch_request(request_id, data)

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from db.init import get_db
from db.run_summary import summarize
from utils.deps import get_current_user

router = APIRouter()


@router.get("/summaries")
def run_summaries(
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    client_id: Optional[int] = Query(None, alias="clientId"),
    branch_id: Optional[int] = Query(None, alias="branchId"),
    db: Session = Depends(get_db),
    payload=Depends(get_current_user),
):
    return summarize(
        db,
        payload,
        year=year,
        month=month,
        client_id=client_id,
        branch_id=branch_id,
    )

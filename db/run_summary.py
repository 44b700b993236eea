from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import case, extract, func
from sqlalchemy.orm import Session

from models.branch import Branch
from models.request import Request
from models.status import COMPLETED_CODE
from utils.deps import is_admin
from utils.errors import ForbiddenError


def summarize(
    db: Session,
    principal: dict,
    year: Optional[int] = None,
    month: Optional[int] = None,
    client_id: Optional[int] = None,
    branch_id: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Daily run totals keyed by the calendar day of pickup_date, newest first.

    A run counts as completed when its my_status is the completed code (3).
    Callers without the admin role only ever see their own branch: their
    token's branchId replaces whatever branchId they asked for.
    """
    if not is_admin(principal):
        branch_id = principal.get("branchId")
        if not branch_id:
            raise ForbiddenError("Not enough privileges")

    day = func.date(Request.pickup_date)
    completed = Request.my_status == COMPLETED_CODE

    q = (
        db.query(
            day.label("date"),
            func.count(Request.id).label("total_runs"),
            func.sum(case((completed, 1), else_=0)).label("total_runs_completed"),
            func.sum(Request.price).label("total_amount"),
            func.sum(case((completed, Request.price), else_=0)).label("total_amount_completed"),
        )
        .outerjoin(Branch, Branch.id == Request.branch_id)
    )

    if year:
        q = q.filter(extract("year", Request.pickup_date) == year)
    if month:
        q = q.filter(extract("month", Request.pickup_date) == month)
    if client_id:
        q = q.filter(Branch.client_id == client_id)
    if branch_id:
        q = q.filter(Request.branch_id == branch_id)

    q = q.group_by(day).order_by(day.desc())

    return [
        {
            "date": d.isoformat() if isinstance(d, date) else d,
            "totalRuns": int(runs or 0),
            "totalRunsCompleted": int(runs_completed or 0),
            "totalAmount": float(amount or 0),
            "totalAmountCompleted": float(amount_completed or 0),
        }
        for d, runs, runs_completed, amount, amount_completed in q.all()
    ]

"""
Storage for delivery requests.

A RequestStore wraps the session it is given; routers build one per HTTP
request from the `get_db` dependency. Every write and its read-back run in
the same transaction.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from db.init import transaction
from models.branch import Branch
from models.client import Client
from models.request import REQUEST_FIELD_MAP, Request, RequestCreate, RequestPatch, map_request_fields
from models.service_type import ServiceType
from models.status import RequestStatus, integrity_warning, resolve_status
from models.team import Team
from utils.deps import is_admin
from utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

REQUEST_COLUMNS = [c.name for c in Request.__table__.columns]

# patchable columns the table declares NOT NULL
NOT_NULL_PATCH_COLUMNS = ("service_type_id", "pickup_location", "delivery_location", "pickup_date")


class RequestStore:
    def __init__(self, db: Session):
        self.db = db

    # ---- reads ----
    def _denormalized(self):
        return (
            self.db.query(
                Request,
                Branch.name.label("branch_name"),
                Client.name.label("client_name"),
                ServiceType.name.label("service_type_name"),
            )
            .outerjoin(Branch, Branch.id == Request.branch_id)
            .outerjoin(Client, Client.id == Branch.client_id)
            .outerjoin(ServiceType, ServiceType.id == Request.service_type_id)
        )

    @staticmethod
    def _to_record(row) -> Dict[str, Any]:
        request, branch_name, client_name, service_type_name = row
        data = {name: getattr(request, name) for name in REQUEST_COLUMNS}
        data["branch_name"] = branch_name
        data["client_name"] = client_name
        data["service_type_name"] = service_type_name
        return map_request_fields(data)

    def get_request(self, request_id: int) -> Dict[str, Any]:
        row = self._denormalized().filter(Request.id == request_id).first()
        if row is None:
            raise NotFoundError("Request not found")
        return self._to_record(row)

    def list_requests(
        self,
        status: Optional[str] = None,
        my_status: Optional[int] = None,
        branch_id: Optional[int] = None,
        pickup_date: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        q = self._denormalized()
        if status:
            q = q.filter(Request.status == status)
        # 0 is a real filter value, so presence rather than truthiness
        if my_status is not None:
            q = q.filter(Request.my_status == my_status)
        if branch_id:
            q = q.filter(Request.branch_id == branch_id)
        if pickup_date:
            q = q.filter(func.date(Request.pickup_date) == pickup_date.isoformat())
        q = q.order_by(Request.created_at.desc(), Request.id.desc())
        return [self._to_record(row) for row in q.all()]

    # ---- writes ----
    def create_request(self, payload: RequestCreate, principal: Optional[dict] = None) -> Dict[str, Any]:
        principal = principal or {}
        branch_id, branch_name = self._owning_branch(payload, principal)
        my_status = payload.my_status if payload.my_status is not None else 0

        required = {
            "branchId": branch_id,
            "serviceTypeId": payload.service_type_id,
            "pickupLocation": payload.pickup_location,
            "deliveryLocation": payload.delivery_location,
            "pickupDate": payload.pickup_date,
        }
        missing = [name for name, value in required.items() if not value]
        if payload.price is None:
            missing.append("price")
        if missing:
            logger.info("Rejected request creation, missing fields: %s", missing)
            raise ValidationError("Missing required fields", error={"missing": missing})

        try:
            RequestStatus.from_code(my_status)
        except ValueError:
            raise ValidationError("Invalid status", error=f"unknown myStatus {my_status!r}")

        with transaction(self.db):
            if not self.db.query(ServiceType.id).filter(ServiceType.id == payload.service_type_id).first():
                logger.warning("Service type not found: %s", payload.service_type_id)
                raise ValidationError("Invalid service type")

            branch = self.db.query(Branch.id, Branch.name).filter(Branch.id == branch_id).first()
            if branch is None:
                logger.warning("Branch not found: %s", branch_id)
                raise ValidationError("Invalid branch")
            branch_name = branch_name or branch.name

            status = RequestStatus.PENDING.value
            warning = integrity_warning(status, my_status)
            if warning:
                logger.warning("New request for branch %s: %s", branch_name, warning)

            request = Request(
                branch_id=branch_id,
                service_type_id=payload.service_type_id,
                pickup_location=payload.pickup_location,
                delivery_location=payload.delivery_location,
                pickup_date=payload.pickup_date,
                description=payload.description or None,
                priority=payload.priority or "medium",
                status=status,
                my_status=my_status,
                price=payload.price,
                latitude=payload.latitude,
                longitude=payload.longitude,
            )
            self.db.add(request)
            self.db.flush()
            record = self.get_request(request.id)

        logger.info("Created request %s for branch %s", record["id"], branch_name)
        return record

    @staticmethod
    def _owning_branch(payload: RequestCreate, principal: dict):
        """
        Branch a new request belongs to, as (branchId, branchName). The
        caller's own branch wins; the body only fills in when the token
        carries no branch, or when an admin files on behalf of a branch.
        """
        token_branch = principal.get("branchId")
        if payload.branch_id and (not token_branch or is_admin(principal)):
            return payload.branch_id, payload.branch_name
        if token_branch:
            return token_branch, principal.get("name") or payload.branch_name
        return payload.branch_id, payload.branch_name

    def patch_request(self, request_id: int, updates: RequestPatch) -> Dict[str, Any]:
        changes = updates.changes()
        if not changes:
            raise ValidationError("No fields to update")
        cleared = [REQUEST_FIELD_MAP[c] for c in NOT_NULL_PATCH_COLUMNS if updates.has(c) and changes[c] is None]
        if cleared:
            raise ValidationError("Required fields cannot be null", error={"fields": cleared})

        with transaction(self.db):
            request = self.db.query(Request).filter(Request.id == request_id).first()
            if request is None:
                raise NotFoundError("Request not found")

            if updates.has("service_type_id"):
                exists = self.db.query(ServiceType.id).filter(ServiceType.id == updates.service_type_id).first()
                if not exists:
                    raise ValidationError("Invalid service type")

            status, my_status = resolve_status(
                updates.status,
                updates.my_status,
                status_given=updates.has("status"),
                my_status_given=updates.has("my_status"),
            )
            if status is not None:
                changes["status"] = status
                changes["my_status"] = my_status

            if updates.has("team_id"):
                changes.update(self._assignment(updates.team_id, status_set=status is not None))

            for column, value in changes.items():
                setattr(request, column, value)
            self.db.flush()
            record = self.get_request(request_id)

        logger.info("Updated request %s: %s", request_id, sorted(changes))
        return record

    def _assignment(self, team_id: Optional[int], status_set: bool) -> Dict[str, Any]:
        """
        Columns implied by attaching a team: its crew commander becomes the
        request's staff member, and an unstated status becomes `assigned`.
        """
        if team_id is None:
            return {"staff_id": None}

        team = self.db.query(Team).filter(Team.id == team_id).first()
        if team is None:
            raise ValidationError("Invalid team")

        implied = {}
        if team.crew_commander_id:
            implied["staff_id"] = team.crew_commander_id
        if not status_set:
            implied["status"] = RequestStatus.ASSIGNED.value
            implied["my_status"] = RequestStatus.ASSIGNED.code
        return implied

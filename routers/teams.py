from collections import defaultdict

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, aliased

from db.init import get_db, transaction
from models.staff import Staff
from models.team import Team, TeamCreate, TeamMember
from utils.deps import get_current_user
from utils.errors import ValidationError

router = APIRouter(dependencies=[Depends(get_current_user)])


def _teams_with_members(db: Session, team_ids=None):
    Commander = aliased(Staff)
    q = (
        db.query(Team, Commander.name.label("crew_commander_name"))
        .outerjoin(Commander, Commander.id == Team.crew_commander_id)
    )
    if team_ids is not None:
        q = q.filter(Team.id.in_(team_ids))
    teams = q.order_by(Team.created_at.desc(), Team.id.desc()).all()

    members = defaultdict(list)
    if teams:
        rows = (
            db.query(TeamMember.team_id, Staff.id, Staff.name, Staff.role)
            .join(Staff, Staff.id == TeamMember.staff_id)
            .filter(TeamMember.team_id.in_([t.id for t, _ in teams]))
            .order_by(Staff.name.asc())
            .all()
        )
        for team_id, staff_id, name, role in rows:
            members[team_id].append({"id": staff_id, "name": name, "role": role})

    return [
        {
            "id": team.id,
            "name": team.name,
            "crew_commander_id": team.crew_commander_id,
            "crew_commander_name": commander_name,
            "created_at": team.created_at,
            "members": members[team.id],
        }
        for team, commander_name in teams
    ]


@router.get("")
def get_teams(db: Session = Depends(get_db)):
    return _teams_with_members(db)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_team(payload: TeamCreate, db: Session = Depends(get_db)):
    """
    Create a team and its memberships in one transaction. The commander is
    always a member; an unknown staff id aborts the whole team.
    """
    member_ids = list(dict.fromkeys([payload.crew_commander_id, *payload.members]))

    with transaction(db):
        rows = db.query(Staff.id).filter(Staff.id.in_(member_ids)).all()
        missing = set(member_ids) - {sid for (sid,) in rows}
        if missing:
            raise ValidationError("Invalid staff ids", error={"missing": sorted(missing)})

        team = Team(name=payload.name, crew_commander_id=payload.crew_commander_id)
        db.add(team)
        db.flush()
        db.add_all(TeamMember(team_id=team.id, staff_id=sid) for sid in member_ids)
        db.flush()
        result = _teams_with_members(db, [team.id])[0]
    return result

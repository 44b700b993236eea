from datetime import datetime

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from db.init import Base
from pydantic import BaseModel, Field


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    crew_commander_id = Column(Integer, ForeignKey("staff.id"))
    created_at = Column(DateTime, default=datetime.utcnow)


class TeamMember(Base):
    __tablename__ = "team_members"

    id = Column(Integer, primary_key=True, index=True)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint("team_id", "staff_id", name="unique_team_staff"),
    )


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    crew_commander_id: int
    members: list[int] = Field(default_factory=list)

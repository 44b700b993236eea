import os
import sys
import unittest
from datetime import datetime

# Add parent directory to path to import modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from db.init import get_db, init_db
from models.branch import Branch
from models.client import Client
from models.request import Request
from models.service_type import ServiceType
from models.staff import Staff
from models.team import Team, TeamMember
from utils.security import create_access_token


class ApiTestCase(unittest.TestCase):
    """Fresh in-memory database per test, wired into the app's get_db."""

    def setUp(self):
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        init_db(seed=False, bind=self.engine)
        self.Session = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

        self.acme = self.add(Client(name="Acme Logistics"))
        self.branch = self.add(Branch(client_id=self.acme.id, name="Westlands", password="x", role="branch"))
        self.admin = self.add(Branch(client_id=self.acme.id, name="HQ", password="x", role="admin"))
        self.service_type = self.add(ServiceType(name="Cash in transit"))

    def tearDown(self):
        app.dependency_overrides.clear()
        self.engine.dispose()

    # ---- fixtures ----
    def add(self, obj):
        db = self.Session()
        try:
            db.add(obj)
            db.commit()
            db.refresh(obj)
            db.expunge(obj)
            return obj
        finally:
            db.close()

    def count(self, model) -> int:
        db = self.Session()
        try:
            return db.query(model).count()
        finally:
            db.close()

    def fetch(self, model, id):
        db = self.Session()
        try:
            return db.query(model).filter(model.id == id).first()
        finally:
            db.close()

    def add_request(self, **overrides) -> Request:
        values = dict(
            branch_id=self.branch.id,
            service_type_id=self.service_type.id,
            pickup_location="Westlands",
            delivery_location="CBD",
            pickup_date=datetime(2024, 5, 1, 9, 0),
            status="pending",
            my_status=0,
            price=100,
        )
        values.update(overrides)
        return self.add(Request(**values))

    def add_team(self, name="Alpha", commander_name="Otieno"):
        commander = self.add(Staff(name=commander_name, empl_no="E1", id_no="ID1", role="crew_commander"))
        team = self.add(Team(name=name, crew_commander_id=commander.id))
        self.add(TeamMember(team_id=team.id, staff_id=commander.id))
        return team, commander

    # ---- auth ----
    def headers_for(self, branch: Branch) -> dict:
        token = create_access_token(
            {
                "branchId": branch.id,
                "name": branch.name,
                "role": branch.role,
                "clientId": branch.client_id,
            }
        )
        return {"Authorization": f"Bearer {token}"}

    @property
    def branch_headers(self) -> dict:
        return self.headers_for(self.branch)

    @property
    def admin_headers(self) -> dict:
        return self.headers_for(self.admin)

# db/init.py
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from dotenv import load_dotenv
import logging
import os

load_dotenv()

logger = logging.getLogger(__name__)

# ---- Database engine & Session ----
DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set in environment (.env)")

engine = create_engine(DATABASE_URL, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ---- Base for ORM models ----
Base = declarative_base()


# ---- DB session dependency ----
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db):
    """
    Run a multi-statement write as one unit: commit when the block
    finishes, roll back if any statement in it raises.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


# ---- Initialization & optional seeding ----
def init_db(seed: bool = True, bind=None):
    """
    Imports all model modules to register tables, creates them,
    and (optionally) seeds the admin branch and default roles.
    """
    # Import models so their metadata is registered on Base
    from models import (  # noqa: F401
        client,
        branch,
        service_type,
        service_charge,
        role,
        staff,
        team,
        request,
        notice,
        sos,
    )

    bind = bind or engine
    Base.metadata.create_all(bind=bind)

    if seed:
        _seed_defaults(sessionmaker(bind=bind)())


DEFAULT_ROLES = ("crew_commander", "driver", "guard")


def _seed_defaults(db):
    """
    Insert the default staff roles and, when ADMIN_BRANCH_NAME and
    ADMIN_BRANCH_PASSWORD are set, an admin branch if it does not exist.
    """
    from models.branch import Branch
    from models.client import Client
    from models.role import Role
    from utils.security import hash_password

    try:
        for name in DEFAULT_ROLES:
            if not db.query(Role).filter(Role.name == name).first():
                db.add(Role(name=name))

        admin_name = os.getenv("ADMIN_BRANCH_NAME")
        admin_password = os.getenv("ADMIN_BRANCH_PASSWORD")
        if admin_name and admin_password:
            if not db.query(Branch).filter(Branch.name == admin_name).first():
                client = db.query(Client).filter(Client.name == admin_name).first()
                if client is None:
                    client = Client(name=admin_name)
                    db.add(client)
                    db.flush()
                db.add(
                    Branch(
                        client_id=client.id,
                        name=admin_name,
                        password=hash_password(admin_password),
                        role="admin",
                    )
                )
                logger.info("Seeded admin branch %s", admin_name)

        db.commit()
    finally:
        db.close()


def as_dict(obj) -> dict:
    """Column name -> value for an ORM row."""
    return {c.name: getattr(obj, c.name) for c in obj.__table__.columns}

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app import config

logger = logging.getLogger(__name__)


def make_engine(url: str):
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


engine = make_engine(config.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

Base = declarative_base()


def get_session_factory():
    # The booking engine opens one session per unit of work; tests override this.
    return SessionLocal


def init_db():
    # Import models here to create tables
    from app.models import Room
    Base.metadata.create_all(bind=engine)

    if not config.SEED_DEMO_DATA:
        return

    db = SessionLocal()
    try:
        if not db.query(Room).first():
            db.add_all([
                Room(room_id="A101", name="Lecture Room A101", location="Building A, Floor 1",
                     capacity=40, features=["projector", "whiteboard"]),
                Room(room_id="A102", name="Seminar Room A102", location="Building A, Floor 1",
                     capacity=20, features=["whiteboard"]),
                Room(room_id="B201", name="Computer Lab B201", location="Building B, Floor 2",
                     capacity=30, features=["computers", "projector"]),
            ])
            logger.info("Seeded demo rooms")
        db.commit()
    finally:
        db.close()

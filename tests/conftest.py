import os

# Must be set before server.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENABLE_SCHEDULER"] = "false"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("TIMEZONE", "America/Phoenix")

import pytest

from server.database import Base, SessionLocal, engine
from server import models


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    def _make_user(email, name="Test User"):
        user = models.User(name=name, email=email)
        db.add(user)
        db.commit()
        return user.id
    return _make_user

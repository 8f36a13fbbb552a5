"""Test fixtures and owner records."""
import pytest
from sqlalchemy.orm import Session

from models import User
from tests.fixtures.models import Member, Team


def create_user(db: Session, email: str) -> User:
    """Persist and return a User with the given email."""
    user = User(email=email)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db):
    """Create a test user."""
    return create_user(db, "johndoe@example.org")


@pytest.fixture
def member(db):
    """Create a member whose model declares every cast tag."""
    member = Member(id=1, email="johndoe@example.org")
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


@pytest.fixture
def team(db):
    """Create a team sharing primary key 1 with the member fixture."""
    team = Team(id=1, name="Platform")
    db.add(team)
    db.commit()
    db.refresh(team)
    return team

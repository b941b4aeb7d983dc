"""Pytest configuration and shared fixtures."""

from collections.abc import Generator

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sqla_timeline import without_timeline
from sqla_timeline.database import Base
from tests.factories.post import PostFactory
from tests.factories.user import UserFactory

# Import all models to ensure they're registered with Base.metadata
from tests.models import Post, User


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Create an in-memory test database with all tables."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session, None, None]:
    """Provide a database session for tests."""
    session_factory = sessionmaker(bind=engine)

    with session_factory() as session:
        yield session


@pytest.fixture
def user(session: Session) -> User:
    """Create a test user.

    Returns:
        A persisted User instance
    """
    user = User(**UserFactory.build().model_dump())
    with without_timeline():
        session.add(user)
        session.commit()
    return user


@pytest.fixture
def post(session: Session) -> Post:
    """Create a test post.

    Returns:
        A persisted Post instance
    """
    post = Post(**PostFactory.build().model_dump())
    with without_timeline():
        session.add(post)
        session.commit()
    return post

"""Shared pytest fixtures.

Provides:
- ``engine`` / ``session_factory``: a fresh in-memory SQLite store per test
- ``pipeline``: the mock question source and scoring service
- ``client``: ``httpx.AsyncClient`` bound to the app with the store and
  pipeline overridden
- ``user`` / ``auth_headers``: a registered user and a live bearer token
"""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ieltsmaster.db import get_db, init_db
from ieltsmaster.main import app
from ieltsmaster.models import AuthUser, Profile
from ieltsmaster.routers.auth import start_session
from ieltsmaster.services import MockQuestionSource, MockScoringService, Pipeline, get_pipeline


@pytest.fixture
def engine():
	engine = create_engine(
		"sqlite://",
		connect_args={"check_same_thread": False},
		poolclass=StaticPool,
		future=True,
	)
	init_db(engine)
	yield engine
	engine.dispose()


@pytest.fixture
def session_factory(engine):
	return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


@pytest.fixture
def pipeline() -> Pipeline:
	return Pipeline(questions=MockQuestionSource(), scoring=MockScoringService(), mock=True)


@pytest.fixture
async def client(session_factory, pipeline):
	def override_get_db():
		db = session_factory()
		try:
			yield db
		finally:
			db.close()

	app.dependency_overrides[get_db] = override_get_db
	app.dependency_overrides[get_pipeline] = lambda: pipeline
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://test") as ac:
		yield ac
	app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
	def _make(username: str, *, full_name: str | None = None) -> str:
		with session_factory() as db:
			# Token tests never check the password
			db.add(AuthUser(username=username, password_hash="unused", email=f"{username}@example.com"))
			db.flush()
			db.add(Profile(id=username, email=f"{username}@example.com", full_name=full_name))
			db.commit()
		return username

	return _make


@pytest.fixture
def bearer(session_factory):
	def _bearer(username: str) -> dict[str, str]:
		with session_factory() as db:
			token = start_session(db, username)
		return {"Authorization": f"Bearer {token}"}

	return _bearer


@pytest.fixture
def user(make_user) -> str:
	return make_user("alice", full_name="Alice Liddell")


@pytest.fixture
def auth_headers(bearer, user) -> dict[str, str]:
	return bearer(user)

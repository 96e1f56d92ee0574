from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Float, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from .db import Base


def _uuid() -> str:
	return str(uuid.uuid4())


class AuthUser(Base):
	__tablename__ = "auth_users"
	# Primary key is username
	username = Column(String(128), primary_key=True, index=True)
	password_hash = Column(String(256), nullable=False)
	email = Column(String(256), nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class AuthSession(Base):
	__tablename__ = "auth_sessions"
	# One row per issued token (jti); deleting the row revokes the token
	session_id = Column(String(64), primary_key=True)
	username = Column(String(128), ForeignKey("auth_users.username"), nullable=False, index=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	last_activity_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Profile(Base):
	__tablename__ = "profiles"
	# 1:1 with auth_users
	id = Column(String(128), ForeignKey("auth_users.username"), primary_key=True)
	email = Column(String(256), nullable=True)
	full_name = Column(String(256), nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class Question(Base):
	__tablename__ = "questions"
	id = Column(String(36), primary_key=True, default=_uuid)
	test_type = Column(String(16), nullable=False)
	task_type = Column(String(16), nullable=False)
	prompt = Column(Text, nullable=False)
	instructions = Column(Text, nullable=False)
	word_count = Column(Integer, nullable=False)
	# Minutes
	time_limit = Column(Integer, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Submission(Base):
	__tablename__ = "submissions"
	id = Column(String(36), primary_key=True, default=_uuid)
	user_id = Column(String(128), ForeignKey("auth_users.username"), nullable=False, index=True)
	question_id = Column(String(36), ForeignKey("questions.id"), nullable=False)
	content = Column(Text, nullable=False)
	word_count = Column(Integer, nullable=False)
	# Seconds
	time_taken = Column(Integer, nullable=False)
	submitted_at = Column(DateTime, default=datetime.utcnow, nullable=False)

	question = relationship("Question")
	score = relationship("Score", uselist=False, back_populates="submission")


class Score(Base):
	__tablename__ = "scores"
	__table_args__ = (UniqueConstraint("submission_id", name="uq_scores_submission_id"),)
	id = Column(String(36), primary_key=True, default=_uuid)
	submission_id = Column(String(36), ForeignKey("submissions.id"), nullable=False)
	task_achievement = Column(Float, nullable=False)
	coherence_cohesion = Column(Float, nullable=False)
	lexical_resource = Column(Float, nullable=False)
	grammatical_range = Column(Float, nullable=False)
	overall_band = Column(Float, nullable=False)
	feedback = Column(Text, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

	submission = relationship("Submission", back_populates="score")

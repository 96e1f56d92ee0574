from datetime import datetime, timedelta, timezone
from typing import Optional
import logging
import uuid

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm, OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import AuthError, ConflictError, UpstreamError, ValidationError
from ..models import AuthUser, AuthSession, Profile
from ..settings import settings

router = APIRouter(prefix="/api/auth", tags=["auth"])

logger = logging.getLogger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)


class Token(BaseModel):
	access_token: str
	token_type: str = "bearer"


class User(BaseModel):
	username: str


class RegisterRequest(BaseModel):
	username: str
	password: str
	email: str
	full_name: Optional[str] = None


def _bcrypt_safe(password: str) -> str:
	# bcrypt only looks at the first 72 bytes
	password_bytes = password.encode("utf-8")
	if len(password_bytes) > 72:
		password_bytes = password_bytes[:72]
	return password_bytes.decode("utf-8", errors="ignore")


def hash_password(password: str) -> str:
	return pwd_context.hash(_bcrypt_safe(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
	return pwd_context.verify(_bcrypt_safe(plain_password), hashed_password)


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
	user_row = db.get(AuthUser, username)
	if user_row and verify_password(password, user_row.password_hash):
		return User(username=username)
	return None


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
	to_encode = data.copy()
	delta = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
	to_encode.update({"exp": datetime.now(timezone.utc) + delta})
	return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def start_session(db: Session, username: str) -> str:
	"""Persist a session row and return a token bound to it."""
	session_id = uuid.uuid4().hex
	db.add(AuthSession(session_id=session_id, username=username))
	db.commit()
	return create_access_token({"sub": username, "jti": session_id})


def _decode(token: str) -> tuple[str, str]:
	try:
		payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
	except JWTError:
		raise AuthError()
	username: str | None = payload.get("sub")
	jti: str | None = payload.get("jti")
	if username is None or jti is None:
		raise AuthError()
	return username, jti


def get_current_user(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
	if not token:
		raise AuthError()
	username, jti = _decode(token)
	# The session row must still exist; logout deletes it
	try:
		row = db.get(AuthSession, jti)
		if not row or row.username != username:
			raise AuthError()
		row.last_activity_at = datetime.utcnow()
		db.commit()
	except SQLAlchemyError:
		db.rollback()
		logger.exception("Session lookup failed for %s", username)
		# On DB errors, fail closed
		raise AuthError()
	return User(username=username)


@router.post("/register", status_code=201)
async def register(req: RegisterRequest, db: Session = Depends(get_db)):
	username = (req.username or "").strip()
	email = (req.email or "").strip()
	missing = [
		{"loc": ["body", name], "msg": "Field required", "type": "missing"}
		for name, value in (("username", username), ("password", req.password), ("email", email))
		if not value
	]
	if missing:
		raise ValidationError(missing)
	if len(username) < 3 or len(username) > 128:
		raise ValidationError([{"loc": ["body", "username"], "msg": "username must be 3-128 characters", "type": "value_error"}])
	if db.get(AuthUser, username) is not None:
		raise ConflictError("username already exists")
	try:
		db.add(AuthUser(username=username, password_hash=hash_password(req.password), email=email))
		db.flush()
		db.add(Profile(id=username, email=email, full_name=(req.full_name or "").strip() or None))
		db.commit()
	except SQLAlchemyError:
		db.rollback()
		logger.exception("Failed to register %s", username)
		raise UpstreamError("Failed to register user")
	return {"ok": True}


@router.post("/token", response_model=Token)
async def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
	user = authenticate_user(db, form_data.username, form_data.password)
	if not user:
		raise AuthError("Incorrect username or password")
	try:
		access_token = start_session(db, user.username)
	except SQLAlchemyError:
		db.rollback()
		logger.exception("Failed to start session for %s", user.username)
		raise UpstreamError("Failed to log in")
	return Token(access_token=access_token)


@router.get("/me", response_model=User)
async def me(user: User = Depends(get_current_user)):
	return user


@router.post("/logout")
async def logout(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)):
	if token:
		try:
			_, jti = _decode(token)
		except AuthError:
			# Nothing to revoke
			return {"success": True}
		try:
			row = db.get(AuthSession, jti)
			if row is not None:
				db.delete(row)
				db.commit()
		except SQLAlchemyError:
			db.rollback()
			logger.exception("Logout failed for session %s", jti)
			raise UpstreamError("Failed to log out")
	return {"success": True}

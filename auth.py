"""
Admin and user authentication checks.

Credentials are compared as plaintext: admin against the configured pair,
users against the password stored on their record. Nothing is issued on
success (no token, no session), so check/logout are stateless.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, EmailStr
from pymongo.database import Database

from config import Settings, get_settings
from database import create_document, find_document, get_db, serialize_doc
from errors import AuthError, DuplicateError
from schemas import Text, User, normalize_email

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])

USERS = "user"


# ----------------------- Models -----------------------
class AdminLoginBody(BaseModel):
    username: Text
    password: Text


class RegisterBody(BaseModel):
    name: Text
    email: EmailStr
    password: Text
    photo: Optional[str] = None
    phone: Optional[str] = None


class LoginBody(BaseModel):
    email: EmailStr
    password: Text


def public_user(doc: dict) -> dict:
    user = serialize_doc(doc)
    user.pop("password", None)
    return user


# ----------------------- Admin -----------------------
@router.post("/admin")
@router.post("/admin-login")
def admin_login(body: AdminLoginBody, settings: Settings = Depends(get_settings)):
    if not settings.admin_configured:
        logger.warning("Admin login attempted but ADMIN_USERNAME/ADMIN_PASSWORD are not set")
        raise AuthError("Please check your username and password")
    if body.username != settings.admin_username or body.password != settings.admin_password:
        logger.warning("Admin login rejected")
        raise AuthError("Please check your username and password")
    return {"success": True}


# ----------------------- Users -----------------------
@router.post("/api/auth/register", status_code=status.HTTP_201_CREATED)
def register(body: RegisterBody, db: Database = Depends(get_db)):
    if find_document(db, USERS, {"email": body.email}):
        raise DuplicateError("User", "email")
    user = User(**body.model_dump(), role="user")
    doc = create_document(db, USERS, user)
    return {"success": True, "message": "User registered successfully", "user": public_user(doc)}


@router.post("/api/auth/login")
def login(body: LoginBody, db: Database = Depends(get_db)):
    user = find_document(db, USERS, {"email": body.email})
    if not user or user.get("password") != body.password:
        logger.warning("User login rejected", extra={"email": body.email})
        raise AuthError("Invalid email or password")
    return {"success": True, "message": "Login successful", "user": public_user(user)}


@router.get("/api/auth/check")
def check(email: Optional[str] = Query(None), db: Database = Depends(get_db)):
    user = find_document(db, USERS, {"email": normalize_email(email)})
    if not user:
        raise AuthError("Not authenticated")
    return {"success": True, "user": public_user(user), "isAdmin": user.get("role") == "admin"}


@router.post("/api/auth/logout")
def logout():
    return {"success": True, "message": "Logged out"}

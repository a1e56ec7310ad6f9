from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from jose import jwt
from sqlmodel import Session
from google.oauth2 import id_token
from google.auth.transport import requests as grequests

from reports_api.config import ACCESS_TOKEN_EXPIRE_MINUTES, GOOGLE_CLIENT_ID, JWT_SECRET
from reports_api.db.db import get_session
from reports_api.models.user import User, UserResponse
from reports_api.repositories.users import google_login
from reports_api.utils.errors import StorageError

router = APIRouter()

ALGORITHM = "HS256"


class GoogleIDToken(BaseModel):
    id_token: str


class TokenResponse(BaseModel):
    access_token: str
    user: UserResponse


def create_access_token(user: User):
    now = datetime.now(timezone.utc)

    jwt_payload = {
        "sub": str(user.id),
        "email": user.email,
        "iat": now,
        "exp": now + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    }

    return jwt.encode(jwt_payload, JWT_SECRET, algorithm=ALGORITHM)


def decode_access_token(token: str):
    return jwt.decode(token, JWT_SECRET, algorithms=[ALGORITHM])


@router.post("/google", response_model=TokenResponse)
def google_auth(payload: GoogleIDToken, session: Session = Depends(get_session)):
    # tokens must never be signed with a guessable key
    if not GOOGLE_CLIENT_ID or not JWT_SECRET:
        raise HTTPException(status_code=503, detail="Login de Google no configurado")

    try:
        idinfo = id_token.verify_oauth2_token(payload.id_token, grequests.Request(), GOOGLE_CLIENT_ID)
    except ValueError:
        raise HTTPException(status_code=401, detail="Token de Google inválido")

    # idinfo now trusted and parsed by Google libs
    email = idinfo.get("email")
    if not email:
        raise HTTPException(status_code=400, detail="El token no contiene email")

    try:
        db_user = google_login(session, email, idinfo.get("name"), idinfo.get("picture"))
    except StorageError:
        raise HTTPException(status_code=500, detail="Error al iniciar sesión")

    return TokenResponse(
        access_token=create_access_token(db_user),
        user=UserResponse.model_validate(db_user),
    )

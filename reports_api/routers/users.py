from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from reports_api.db.db import get_session
from reports_api.models.user import UserResponse
from reports_api.repositories.users import create_user, google_login
from reports_api.utils.errors import DuplicateEmailError, StorageError

router = APIRouter()


# email is optional here so a missing one gets our 400 instead of a 422
class UserPayload(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None


def require_email(payload: UserPayload):
    email = (payload.email or "").strip()
    if not email:
        raise HTTPException(status_code=400, detail="El email es obligatorio")
    return email


@router.post("/google-login")
async def google_login_user(payload: UserPayload, session: Session = Depends(get_session)):
    email = require_email(payload)

    try:
        user = google_login(session, email, payload.name, payload.picture)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error al iniciar sesión")

    return {"user": UserResponse.model_validate(user)}


@router.post("", status_code=201)
async def create_new_user(payload: UserPayload, session: Session = Depends(get_session)):
    email = require_email(payload)

    try:
        user = create_user(session, payload.name, email, payload.picture)
    except DuplicateEmailError:
        raise HTTPException(status_code=409, detail="El email ya está registrado")
    except StorageError:
        raise HTTPException(status_code=500, detail="Error al crear el usuario")

    return {
        "message": "Usuario creado correctamente",
        "id": user.id,
    }

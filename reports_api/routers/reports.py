import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlmodel import Session

from reports_api.db.db import get_session
from reports_api.repositories.reports import insert_report, list_reports
from reports_api.utils.errors import StorageError
from reports_api.utils.file_store import delete_image, image_url, save_image, with_image_urls

logger = logging.getLogger(__name__)

router = APIRouter()

REQUIRED_FIELDS = ("user_id", "title", "description", "location", "contact", "status")


@router.post("", status_code=201)
async def create_report(
    user_id: Optional[str] = Form(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    contact: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    session: Session = Depends(get_session),
):
    received = {
        "user_id": user_id,
        "title": title,
        "description": description,
        "location": location,
        "contact": contact,
        "status": status,
    }
    logger.info("Nueva solicitud POST /reports: %s (imagen: %s)", received, image.filename if image else None)

    # fields are checked before the image touches the disk
    if any(not (received[field] or "").strip() for field in REQUIRED_FIELDS):
        logger.warning("Validación fallida: campos incompletos")
        raise HTTPException(
            status_code=400,
            detail={"message": "Todos los campos son obligatorios", "received": received},
        )

    try:
        owner_id = int(user_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="user_id debe ser numérico")

    filename = await save_image(image) if image and image.filename else None

    try:
        report_id = insert_report(
            session,
            user_id=owner_id,
            title=title.strip(),
            description=description.strip(),
            location=location.strip(),
            contact=contact.strip(),
            status=status.strip(),
            image=filename,
        )
    except StorageError:
        if filename:
            delete_image(filename)
        raise HTTPException(status_code=500, detail="Error al guardar en la base de datos")
    except Exception:
        # no row points at the image, so it must not stay on disk
        if filename:
            delete_image(filename)
        raise

    logger.info("Reporte guardado con ID: %s", report_id)

    return {
        "message": "Reporte guardado correctamente",
        "id": report_id,
        "image": filename,
        "imageUrl": image_url(filename),
    }


@router.get("")
async def get_all_reports(session: Session = Depends(get_session)):
    try:
        reports = list_reports(session)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error al obtener los reportes")

    return with_image_urls(reports)


@router.get("/user/{user_id}")
async def get_user_reports(user_id: int, session: Session = Depends(get_session)):
    try:
        reports = list_reports(session, user_id=user_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error al obtener los reportes")

    return {
        "reports": with_image_urls(reports),
    }

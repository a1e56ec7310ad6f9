import logging
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from reports_api.models.report import Report
from reports_api.utils.errors import StorageError

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


def insert_report(
    session: Session,
    user_id: int,
    title: str,
    description: str,
    location: str,
    contact: str,
    status: str,
    image: Optional[str] = None,
) -> int:
    db_report = Report(
        user_id=user_id,
        title=title,
        description=description,
        location=location,
        contact=contact,
        status=status,
        image=image or None,
    )

    try:
        session.add(db_report)
        session.commit()
        session.refresh(db_report)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Error SQL al guardar el reporte")
        raise StorageError(str(e)) from e

    return db_report.id


def list_reports(session: Session, user_id: Optional[int] = None) -> list:
    """Reports, most recent first.

    Without ``user_id`` every report is returned including its location;
    with it only that user's reports are returned and location is left out.
    """
    query = select(Report).order_by(Report.created_at.desc(), Report.id.desc())

    if user_id is not None:
        query = query.where(Report.user_id == user_id)

    try:
        reports = session.exec(query).all()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Error SQL al obtener los reportes")
        raise StorageError(str(e)) from e

    rows = []

    for report in reports:
        row = {
            "id": report.id,
            "title": report.title,
            "status": report.status,
        }
        if user_id is None:
            row["location"] = report.location
        row["image"] = report.image
        row["date"] = report.created_at.strftime(DATE_FORMAT)
        rows.append(row)

    return rows

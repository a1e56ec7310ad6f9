import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from reports_api.config import DATABASE_URL

logger = logging.getLogger(__name__)

# SQLite needs this to share connections across FastAPI's worker threads
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)


def get_session():
    with Session(engine) as session:
        yield session


def init_db(bind=None):
    # models must be imported so their tables are registered on the metadata
    from reports_api.models import report, user  # noqa: F401

    bind = bind or engine

    try:
        SQLModel.metadata.create_all(bind)
    except SQLAlchemyError:
        logger.exception("Error al conectar a la BD")
        raise SystemExit(1)

    logger.info("Conectado a la base de datos: %s", bind.url.render_as_string(hide_password=True))

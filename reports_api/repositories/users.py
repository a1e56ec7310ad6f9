import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from reports_api.models.user import User
from reports_api.utils.errors import DuplicateEmailError, StorageError

logger = logging.getLogger(__name__)


def find_user_by_email(session: Session, email: str) -> Optional[User]:
    try:
        return session.exec(select(User).where(User.email == email)).first()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Error SQL al buscar usuario")
        raise StorageError(str(e)) from e


def create_user(session: Session, name: Optional[str], email: str, picture: Optional[str] = None) -> User:
    db_user = User(name=name, email=email, picture=picture)

    try:
        session.add(db_user)
        session.commit()

        # return the row as stored, not the object we built
        user_id = db_user.id
        session.expire_all()
        return session.get(User, user_id)
    except IntegrityError as e:
        session.rollback()
        raise DuplicateEmailError(str(e)) from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Error SQL al crear usuario")
        raise StorageError(str(e)) from e


def google_login(session: Session, email: str, name: Optional[str], picture: Optional[str] = None) -> User:
    db_user = find_user_by_email(session, email)
    if db_user:
        return db_user

    try:
        db_user = create_user(session, name, email, picture)
        logger.info("Usuario creado por login de Google: %s (id=%s)", email, db_user.id)
        return db_user
    except DuplicateEmailError:
        # a concurrent login inserted the same email first
        logger.info("Usuario %s creado en paralelo, se reutiliza", email)
        db_user = find_user_by_email(session, email)
        if not db_user:
            raise
        return db_user

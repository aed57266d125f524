import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .errors import Conflict
from .models import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Credential store over the ``users`` table."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def exists_by_username(self, username: str) -> bool:
        exists = self.find_by_username(username) is not None
        logger.debug("Username lookup: username=%s exists=%s", username, exists)
        return exists

    def save(self, user: User) -> User:
        """
        Persist a user and return it with its generated id.

        Raises:
            Conflict: if the username is already stored. The database unique
                constraint decides, so two concurrent registrations that both
                passed the existence check still end with exactly one row.
        """
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info("Rejected duplicate username on write: username=%s", user.username)
            raise Conflict() from e
        self.db.refresh(user)
        return user

"""
Resource store for campgrounds and comments.

Every write stamps or preserves the author recorded at creation time. The
ordered comment list of a campground is only ever appended to with a single
INSERT into the association table.
"""
import logging
import uuid
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.db.database import CampgroundDB, CommentDB, campground_comments
from src.exceptions import NotFoundError, PersistenceError
from src.models.campground import AuthorStamp
from src.search.filter import SafePattern

logger = logging.getLogger(__name__)

# Fields of a campground that may change after creation
EDITABLE_CAMPGROUND_FIELDS = ("name", "price", "description", "image", "location", "lat", "lng")


def new_id() -> str:
    return uuid.uuid4().hex


class ResourceStore:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _transaction(self, operation: str):
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error during {operation}: {e}")
            raise PersistenceError(operation, str(e))

    # Campgrounds

    def get_campground(self, campground_id: str) -> Optional[CampgroundDB]:
        return self.db.get(CampgroundDB, campground_id)

    def require_campground(self, campground_id: str) -> CampgroundDB:
        campground = self.get_campground(campground_id)
        if campground is None:
            raise NotFoundError("campground", campground_id)
        return campground

    def list_campgrounds(self, pattern: Optional[SafePattern] = None) -> List[CampgroundDB]:
        query = select(CampgroundDB).order_by(CampgroundDB.created_at, CampgroundDB.id)
        if pattern is not None:
            query = query.where(CampgroundDB.name.regexp_match(pattern.pattern))
        return list(self.db.scalars(query))

    def create_campground(self, *, name, price, description, image, location, lat, lng,
                          author: AuthorStamp) -> CampgroundDB:
        campground = CampgroundDB(
            id=new_id(),
            name=name,
            price=price,
            description=description,
            image=image,
            location=location,
            lat=lat,
            lng=lng,
            author_id=author.user_id,
            author_username=author.display_name,
        )
        with self._transaction("campground create"):
            self.db.add(campground)
        logger.info(f"Created campground {campground.id} ({name}) for user {author.user_id}")
        return campground

    def update_campground(self, campground_id: str, values: dict) -> CampgroundDB:
        locked = set(values) - set(EDITABLE_CAMPGROUND_FIELDS)
        if locked:
            raise ValueError(f"Campground fields cannot be updated: {sorted(locked)}")
        campground = self.require_campground(campground_id)
        with self._transaction("campground update"):
            for field, value in values.items():
                setattr(campground, field, value)
        logger.info(f"Updated campground {campground_id}: {sorted(values)}")
        return campground

    def delete_campground(self, campground_id: str) -> None:
        """Delete a campground together with the comments it lists."""
        campground = self.require_campground(campground_id)
        comments = list(campground.comments)
        with self._transaction("campground delete"):
            self.db.execute(delete(campground_comments).where(
                campground_comments.c.campground_id == campground_id
            ))
            for comment in comments:
                self.db.delete(comment)
            self.db.delete(campground)
        logger.info(f"Deleted campground {campground_id} and {len(comments)} comment(s)")

    # Comments

    def get_comment(self, comment_id: str) -> Optional[CommentDB]:
        return self.db.get(CommentDB, comment_id)

    def campground_lists_comment(self, campground_id: str, comment_id: str) -> bool:
        query = select(campground_comments.c.position).where(
            campground_comments.c.campground_id == campground_id,
            campground_comments.c.comment_id == comment_id,
        )
        return self.db.scalar(query) is not None

    def create_comment(self, campground_id: str, text: str, author: AuthorStamp) -> CommentDB:
        self.require_campground(campground_id)
        comment = CommentDB(
            id=new_id(),
            text=text,
            author_id=author.user_id,
            author_username=author.display_name,
        )
        with self._transaction("comment create"):
            self.db.add(comment)
            self.db.flush()
            self.db.execute(insert(campground_comments).values(
                campground_id=campground_id, comment_id=comment.id
            ))
        logger.info(f"Added comment {comment.id} to campground {campground_id}")
        return comment

    def update_comment(self, comment_id: str, text: str) -> CommentDB:
        comment = self.get_comment(comment_id)
        if comment is None:
            raise NotFoundError("comment", comment_id)
        with self._transaction("comment update"):
            comment.text = text
        logger.info(f"Updated comment {comment_id}")
        return comment

    def delete_comment(self, comment_id: str) -> None:
        """Delete a comment and drop it from its campground's list."""
        comment = self.get_comment(comment_id)
        if comment is None:
            raise NotFoundError("comment", comment_id)
        with self._transaction("comment delete"):
            self.db.execute(delete(campground_comments).where(
                campground_comments.c.comment_id == comment_id
            ))
            self.db.delete(comment)
        logger.info(f"Deleted comment {comment_id}")

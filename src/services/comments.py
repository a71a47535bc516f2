"""
Comment lifecycle.

Any logged in user may comment. Comments are only reachable through the
campground that lists them.
"""

from src.db.database import CommentDB
from src.db.store import ResourceStore
from src.exceptions import NotFoundError
from src.models.campground import AuthorStamp, CommentForm


class CommentService:
    def __init__(self, store: ResourceStore):
        self.store = store

    def create_comment(self, campground_id: str, form: CommentForm, author: AuthorStamp) -> CommentDB:
        return self.store.create_comment(campground_id, form.text, author)

    def get_comment(self, campground_id: str, comment_id: str) -> CommentDB:
        self.store.require_campground(campground_id)
        comment = self.store.get_comment(comment_id)
        if comment is None or not self.store.campground_lists_comment(campground_id, comment_id):
            raise NotFoundError("comment", comment_id)
        return comment

    def update_comment(self, campground_id: str, comment_id: str, form: CommentForm) -> CommentDB:
        self.get_comment(campground_id, comment_id)
        return self.store.update_comment(comment_id, form.text)

    def delete_comment(self, campground_id: str, comment_id: str) -> None:
        self.get_comment(campground_id, comment_id)
        self.store.delete_comment(comment_id)

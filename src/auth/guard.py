import enum
import logging

from src.db.store import ResourceStore
from src.exceptions import AuthorizationError, NotFoundError

logger = logging.getLogger(__name__)


class ResourceKind(str, enum.Enum):
    CAMPGROUND = "campground"
    COMMENT = "comment"


class Ownership(str, enum.Enum):
    AUTHORIZED = "authorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


class AuthorizationGuard:
    """
    Decides whether a user may change a resource.

    The only input is the author id stamped on the resource when it was
    created. There is no role or admin override.
    """

    def __init__(self, store: ResourceStore):
        self.store = store

    def _load(self, kind: ResourceKind, resource_id: str):
        if kind is ResourceKind.CAMPGROUND:
            return self.store.get_campground(resource_id)
        return self.store.get_comment(resource_id)

    def check_ownership(self, kind: ResourceKind, resource_id: str, current_user_id: str) -> Ownership:
        resource = self._load(kind, resource_id)
        if resource is None:
            return Ownership.NOT_FOUND
        if resource.author_id == current_user_id:
            return Ownership.AUTHORIZED
        return Ownership.FORBIDDEN

    def ensure_owner(self, kind: ResourceKind, resource_id: str, current_user_id: str) -> None:
        decision = self.check_ownership(kind, resource_id, current_user_id)
        if decision is Ownership.NOT_FOUND:
            raise NotFoundError(kind.value, resource_id)
        if decision is Ownership.FORBIDDEN:
            logger.warning(f"User {current_user_id} is not the author of {kind.value} {resource_id}")
            raise AuthorizationError(kind.value, resource_id)

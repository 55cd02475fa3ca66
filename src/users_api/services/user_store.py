"""In-memory user store."""

import logging
import threading

from users_api.models.user import User

logger = logging.getLogger(__name__)


class UserStore:
    """Ordered in-memory collection of users, the single source of truth.

    Records keep their insertion order. Ids are assigned by the store and are
    never reused: the next id is one past the larger of the highest stored id
    and the highest id ever issued.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._users: list[User] = []
        self._last_issued_id = 0
        self._lock = threading.Lock()

    def list(self) -> tuple[User, ...]:
        """List all users in insertion order.

        Returns:
            Immutable snapshot of the stored users
        """
        with self._lock:
            return tuple(self._users)

    def get_by_id(self, user_id: int) -> User | None:
        """Get a user by ID."""
        with self._lock:
            return self._find(user_id)

    def insert(self, name: str, email: str) -> User:
        """Insert a new user with the next free id.

        Args:
            name: Validated user name
            email: Validated email address

        Returns:
            The stored user, including its assigned id
        """
        with self._lock:
            highest = max((u.id for u in self._users), default=0)
            user = User(id=max(highest, self._last_issued_id) + 1, name=name, email=email)
            self._last_issued_id = user.id
            self._users.append(user)
        logger.info("Created user %d", user.id)
        return user

    def update(self, user_id: int, name: str, email: str) -> User | None:
        """Replace the mutable fields of a user.

        Args:
            user_id: User ID
            name: Validated user name
            email: Validated email address

        Returns:
            The updated user, or None if no user has this id
        """
        with self._lock:
            for index, existing in enumerate(self._users):
                if existing.id == user_id:
                    updated = existing.model_copy(update={"name": name, "email": email})
                    self._users[index] = updated
                    break
            else:
                return None
        logger.info("Updated user %d", user_id)
        return updated

    def delete(self, user_id: int) -> bool:
        """Delete a user.

        Returns:
            True if a user was removed
        """
        with self._lock:
            user = self._find(user_id)
            if user is None:
                return False
            self._users.remove(user)
        logger.info("Deleted user %d", user_id)
        return True

    def count(self) -> int:
        with self._lock:
            return len(self._users)

    def clear(self) -> None:
        """Remove every user. Issued ids stay retired."""
        with self._lock:
            self._users.clear()

    def _find(self, user_id: int) -> User | None:
        return next((u for u in self._users if u.id == user_id), None)

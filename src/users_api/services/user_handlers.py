"""Request handlers for the user collection."""

import functools
import logging
from collections.abc import Callable

from fastapi import status

from users_api.models.user import UserPayload
from users_api.services.list_cache import ListCache
from users_api.services.outcomes import InternalFailure, NotFound, Ok, Outcome, ValidationFailure
from users_api.services.user_store import UserStore
from users_api.services.validation import validate_user

logger = logging.getLogger(__name__)


def _guarded(handler: Callable[..., Outcome]) -> Callable[..., Outcome]:
    """Turn any exception raised by a handler into an InternalFailure."""

    @functools.wraps(handler)
    def wrapper(*args, **kwargs) -> Outcome:
        try:
            return handler(*args, **kwargs)
        except Exception as e:
            logger.error("Error in %s: %s", handler.__name__, e, exc_info=True)
            return InternalFailure(message=str(e))

    return wrapper


class UserHandlers:
    """Compose the user store, list cache and validation gate.

    Every successful mutation invalidates the list cache before returning,
    so the next list request always reflects it.
    """

    def __init__(self, store: UserStore, cache: ListCache) -> None:
        """Initialize the handlers.

        Args:
            store: User store
            cache: List cache wrapping the store's list view
        """
        self.store = store
        self.cache = cache

    @_guarded
    def list_users(self) -> Outcome:
        users = self.cache.get()
        if users is None:
            users = self.store.list()
            self.cache.put(users)
        return Ok(list(users))

    @_guarded
    def get_user(self, user_id: int) -> Outcome:
        user = self.store.get_by_id(user_id)
        if user is None:
            return NotFound()
        return Ok(user)

    @_guarded
    def create_user(self, payload: UserPayload) -> Outcome:
        """Validate and insert a new user.

        Returns:
            Ok with status 201 and the location of the new user, or
            ValidationFailure
        """
        result = validate_user(payload)
        if not result.is_valid:
            return ValidationFailure(violations=result.violations)

        user = self.store.insert(result.fields.name, result.fields.email)
        self.cache.invalidate()
        return Ok(user, status_code=status.HTTP_201_CREATED, location=f"/users/{user.id}")

    @_guarded
    def update_user(self, user_id: int, payload: UserPayload) -> Outcome:
        """Replace the name and email of an existing user.

        The existence check runs before validation, so an unknown id is a
        NotFound even when the payload is also invalid.
        """
        if self.store.get_by_id(user_id) is None:
            return NotFound()

        result = validate_user(payload)
        if not result.is_valid:
            return ValidationFailure(violations=result.violations)

        if self.store.update(user_id, result.fields.name, result.fields.email) is None:
            # Deleted between the lookup and the update
            return NotFound()
        self.cache.invalidate()
        return Ok(status_code=status.HTTP_204_NO_CONTENT)

    @_guarded
    def delete_user(self, user_id: int) -> Outcome:
        if not self.store.delete(user_id):
            return NotFound()
        self.cache.invalidate()
        return Ok(status_code=status.HTTP_204_NO_CONTENT)

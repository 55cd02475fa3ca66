"""User API routes."""

from fastapi import APIRouter, Depends, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from users_api.models.user import User, UserPayload, Violation
from users_api.services import get_user_handlers
from users_api.services.outcomes import InternalFailure, NotFound, Ok, Outcome, ValidationFailure
from users_api.services.user_handlers import UserHandlers

router = APIRouter(prefix="/users", tags=["users"], redirect_slashes=False)

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"description": "User not found"}}
_BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": list[Violation], "description": "Validation failed"}}


def outcome_to_response(outcome: Outcome) -> Response:
    """Translate a handler outcome into an HTTP response.

    Args:
        outcome: Result of a user handler

    Returns:
        Response carrying the matching status code and body
    """
    if isinstance(outcome, Ok):
        headers = {"Location": outcome.location} if outcome.location else None
        if outcome.value is None:
            return Response(status_code=outcome.status_code, headers=headers)
        return JSONResponse(
            content=jsonable_encoder(outcome.value),
            status_code=outcome.status_code,
            headers=headers,
        )
    if isinstance(outcome, ValidationFailure):
        return JSONResponse(
            content=jsonable_encoder(outcome.violations),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    if isinstance(outcome, NotFound):
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    if isinstance(outcome, InternalFailure):
        return JSONResponse(
            content={"detail": outcome.message},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    raise TypeError(f"Unknown outcome: {outcome!r}")


@router.get("", response_model=list[User])
@router.get("/", response_model=list[User], include_in_schema=False)
async def list_users(handlers: UserHandlers = Depends(get_user_handlers)) -> Response:
    return outcome_to_response(handlers.list_users())


@router.get("/{user_id}", response_model=User, responses=_NOT_FOUND)
async def get_user(user_id: int, handlers: UserHandlers = Depends(get_user_handlers)) -> Response:
    return outcome_to_response(handlers.get_user(user_id))


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED, responses=_BAD_REQUEST)
@router.post(
    "/",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    responses=_BAD_REQUEST,
    include_in_schema=False,
)
async def create_user(payload: UserPayload, handlers: UserHandlers = Depends(get_user_handlers)) -> Response:
    return outcome_to_response(handlers.create_user(payload))


@router.put(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_NOT_FOUND, **_BAD_REQUEST},
)
async def update_user(
    user_id: int,
    payload: UserPayload,
    handlers: UserHandlers = Depends(get_user_handlers),
) -> Response:
    return outcome_to_response(handlers.update_user(user_id, payload))


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_NOT_FOUND,
)
async def delete_user(user_id: int, handlers: UserHandlers = Depends(get_user_handlers)) -> Response:
    return outcome_to_response(handlers.delete_user(user_id))

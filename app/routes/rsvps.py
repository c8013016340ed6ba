"""RSVP routes."""
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.core.security import Claims, authenticated
from app.models import Rsvp
from app.schemas.rsvp import RsvpCreate, RsvpRead, RsvpUpdate
from app.stores.rsvps import RsvpStore, get_rsvp_store

router = APIRouter(prefix="/rsvp", tags=["rsvps"])


def owned_rsvp(
    rsvp_id: UUID,
    claims: Claims = Depends(authenticated),
    store: RsvpStore = Depends(get_rsvp_store),
) -> Rsvp:
    """Resolve the RSVP in the path, rejecting callers who do not own it."""
    return store.get_owned(rsvp_id, claims.sub)


@router.post("/new", response_model=RsvpRead, dependencies=[Depends(authenticated)])
def create_rsvp(data: RsvpCreate, store: RsvpStore = Depends(get_rsvp_store)):
    """
    RSVP to an event.

    Returns 409 if this user has already responded to the event.
    """
    return store.create(data)


@router.put(
    "/{rsvp_id}",
    response_model=RsvpRead,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": RsvpUpdate.model_json_schema(by_alias=True)}},
        }
    },
)
async def update_rsvp(
    request: Request,
    rsvp: Rsvp = Depends(owned_rsvp),
    claims: Claims = Depends(authenticated),
    store: RsvpStore = Depends(get_rsvp_store),
):
    """
    Replace an RSVP.

    Only the user who created the RSVP may change it; anyone else gets 401.
    The body is read only after ownership is settled, so a non-owner gets
    401 even for a body that is not JSON.
    """
    try:
        data = RsvpUpdate.model_validate_json(await request.body())
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e
    return await run_in_threadpool(store.update, rsvp.id, data, acting_user=claims.sub)

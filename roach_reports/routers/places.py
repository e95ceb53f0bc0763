from fastapi import APIRouter, Depends, Query

from roach_reports.services.places import PlacesClient, get_places_client, new_session_token
from roach_reports.utils.exceptions import InvalidArgument
from roach_reports.utils.response import success_response

router = APIRouter(prefix="/places", tags=["places"])


@router.get("/autocomplete")
async def autocomplete(
    text: str = Query(default="", alias="input"),
    session_token: str | None = Query(default=None),
    places: PlacesClient = Depends(get_places_client),
):
    token = session_token or new_session_token()
    predictions = await places.autocomplete(text, token)
    return success_response(data={"session_token": token, "predictions": predictions})


@router.get("/details")
async def details(
    place_id: str | None = Query(default=None),
    session_token: str | None = Query(default=None),
    places: PlacesClient = Depends(get_places_client),
):
    if not place_id:
        raise InvalidArgument("place_id is required")
    # The details lookup closes the autocomplete session; clients start a new token.
    address = await places.details(place_id, session_token)
    return success_response(data=address)

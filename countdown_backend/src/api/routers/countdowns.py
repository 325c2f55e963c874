from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field

from ..models import CountdownEntity
from ..rendering import ImageService, get_image_service
from ..repositories import Repository, get_repository
from ..schemas import CountdownCreate, CountdownOut, CountdownUpdate, StyleOut

router = APIRouter(
    prefix="/api/countdowns",
    tags=["countdowns"],
)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class DeleteResult(BaseModel):
    """
    Body returned after a successful delete.
    """
    success: bool = Field(..., description="True when the countdown was removed")


def _get_repo(repo: Repository = Depends(get_repository)) -> Repository:
    """
    Dependency wrapper for repository to keep signatures clean.
    """
    return repo


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Countdown not found")


def _to_out(entity: CountdownEntity) -> CountdownOut:
    style = entity["style"]
    return CountdownOut(
        id=entity["id"],
        title=entity["title"],
        target_date=entity["target_date"],
        style=StyleOut(
            background_color=style.background_color,
            text_color=style.text_color,
            font_size=style.font_size,
            font_family=style.font_family,
        ),
        created_at=entity["created_at"],
        updated_at=entity["updated_at"],
    )


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=CountdownOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Countdown",
    description=(
        "Create a countdown. targetDate must be in the future and the title at most 200 characters. "
        "Invalid style values are replaced by the defaults (#ffffff background, #000000 text, "
        "font size 48, Arial)."
    ),
    responses={
        201: {"description": "Countdown created successfully"},
        422: {"description": "Validation error"},
    },
)
def create_countdown(payload: CountdownCreate, repo: Repository = Depends(_get_repo)) -> CountdownOut:
    """
    Create a new countdown.
    """
    return _to_out(repo.create(payload))


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[CountdownOut],
    summary="List Countdowns",
    description="List all countdowns in creation order.",
)
def list_countdowns(repo: Repository = Depends(_get_repo)) -> List[CountdownOut]:
    return [_to_out(it) for it in repo.list()]


# PUBLIC_INTERFACE
@router.get(
    "/{countdown_id}",
    response_model=CountdownOut,
    summary="Get Countdown",
    description="Get a single countdown by ID.",
    responses={
        200: {"description": "Countdown found"},
        404: {"description": "Countdown not found"},
    },
)
def get_countdown(countdown_id: str, repo: Repository = Depends(_get_repo)) -> CountdownOut:
    item = repo.get(countdown_id)
    if not item:
        raise _not_found()
    return _to_out(item)


# PUBLIC_INTERFACE
@router.put(
    "/{countdown_id}",
    response_model=CountdownOut,
    summary="Update Countdown",
    description=(
        "Update the provided fields of a countdown. Style keys merge into the stored style; "
        "an invalid style value keeps the stored value instead of resetting to the default."
    ),
    responses={
        200: {"description": "Countdown updated"},
        404: {"description": "Countdown not found"},
    },
)
def update_countdown(
    countdown_id: str, payload: CountdownUpdate, repo: Repository = Depends(_get_repo)
) -> CountdownOut:
    """
    Partial update of a countdown.
    """
    updated = repo.update(countdown_id, payload)
    if not updated:
        raise _not_found()
    return _to_out(updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{countdown_id}",
    response_model=DeleteResult,
    summary="Delete Countdown",
    description="Delete a countdown by ID.",
    responses={
        200: {"description": "Countdown deleted"},
        404: {"description": "Countdown not found"},
    },
)
def delete_countdown(countdown_id: str, repo: Repository = Depends(_get_repo)) -> DeleteResult:
    if not repo.delete(countdown_id):
        raise _not_found()
    return DeleteResult(success=True)


# PUBLIC_INTERFACE
@router.get(
    "/{countdown_id}/image",
    summary="Countdown Image",
    description=(
        "Render the countdown as a 1000x400 PNG for the current instant. "
        "The image is re-rendered on every request and must not be cached."
    ),
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}, "description": "PNG image"},
        404: {"description": "Countdown not found"},
        500: {"description": "Image rendering failed"},
    },
)
def get_countdown_image(
    countdown_id: str,
    repo: Repository = Depends(_get_repo),
    images: ImageService = Depends(get_image_service),
) -> Response:
    """
    Serve the live countdown image. Runs in the threadpool since rendering blocks.
    """
    item = repo.get(countdown_id)
    if not item:
        raise _not_found()
    png = images.create_countdown_image(item)
    return Response(content=png, media_type=ImageService.media_type, headers=NO_CACHE_HEADERS)

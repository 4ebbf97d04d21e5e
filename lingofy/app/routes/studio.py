"""
Studio Routes: content studio editing sessions.

- POST   /api/v1/studio/sessions                         → new session
- GET    /api/v1/studio/sessions/{id}                    → snapshot
- DELETE /api/v1/studio/sessions/{id}                    → drop session
- PATCH  /api/v1/studio/sessions/{id}/fields             → dotted-path edit
- POST   /api/v1/studio/sessions/{id}/images             → upload batch
- DELETE /api/v1/studio/sessions/{id}/images/{index}     → remove one image
- POST   /api/v1/studio/sessions/{id}/images/generate    → AI product image
- POST   /api/v1/studio/sessions/{id}/save               → save profile + gallery

Studio errors propagate to the app's StudioError handler.
"""

from typing import Any, Literal

from fastapi import APIRouter, Body, File, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from lingofy.app.services.studio import SessionRegistry, StudioSession
from lingofy.domain.errors import ErrorCodes, SessionNotFoundError
from lingofy.domain.schemas import SelectedFile

api_router = APIRouter()


class FieldEdit(BaseModel):
    path: str
    value: Any = None
    kind: Literal["text", "number"] | None = None


class GenerateImageRequest(BaseModel):
    prompt: str | None = None


def _registry(request: Request) -> SessionRegistry:
    registry: SessionRegistry = request.app.state.sessions
    return registry


def _session(request: Request, session_id: str) -> StudioSession:
    return _registry(request).get(session_id)


def _to_selected_file(upload: UploadFile) -> SelectedFile:
    """
    Wrap an upload for the intake pipeline.

    An unknown upload size is declared as 0; validate_and_ingest checks
    the real byte length after reading.
    """
    return SelectedFile(
        name=upload.filename or "unknown",
        mime_type=upload.content_type or "",
        size=upload.size or 0,
        read=upload.read,
    )


@api_router.post("/sessions", response_model=None)
async def create_session(
    request: Request,
    payload: dict[str, Any] | None = Body(None),
) -> dict[str, Any] | JSONResponse:
    """
    New editing session.

    Body (optional): {"profile": {...wire form...}} to seed the editor.
    """
    profile_data = (payload or {}).get("profile")
    if profile_data is not None and not isinstance(profile_data, dict):
        return JSONResponse(status_code=400, content={"error": "profile must be an object."})

    try:
        session = _registry(request).create(profile_data)
    except ValueError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    return session.snapshot()


@api_router.get("/sessions/{session_id}")
async def get_session(request: Request, session_id: str) -> dict[str, Any]:
    return _session(request, session_id).snapshot()


@api_router.delete("/sessions/{session_id}")
async def delete_session(request: Request, session_id: str) -> dict[str, Any]:
    """Drop a session and its gallery."""
    if not _registry(request).discard(session_id):
        raise SessionNotFoundError(
            ErrorCodes.SESSION_NOT_FOUND,
            "Session not found.",
            session_id=session_id,
        )
    return {"session_id": session_id, "deleted": True}


@api_router.patch("/sessions/{session_id}/fields")
async def edit_field(
    request: Request,
    session_id: str,
    edit: FieldEdit,
) -> dict[str, Any]:
    """Apply one form edit; unparsable numbers become 0."""
    session = _session(request, session_id)
    session.edit_field(edit.path, edit.value, edit.kind)
    return session.snapshot()


@api_router.post("/sessions/{session_id}/images")
async def upload_images(
    request: Request,
    session_id: str,
    files: list[UploadFile] = File(...),
) -> dict[str, Any]:
    """Add a file batch to the gallery (all-or-nothing)."""
    session = _session(request, session_id)
    await session.ingest_files([_to_selected_file(f) for f in files])
    return session.snapshot()


@api_router.delete("/sessions/{session_id}/images/{index}")
async def remove_image(request: Request, session_id: str, index: int) -> dict[str, Any]:
    """Remove one image; an out-of-range index changes nothing."""
    session = _session(request, session_id)
    session.remove_image(index)
    return session.snapshot()


@api_router.post("/sessions/{session_id}/images/generate")
async def generate_image(
    request: Request,
    session_id: str,
    body: GenerateImageRequest | None = None,
) -> dict[str, Any]:
    """Generate a product image from the title/description (+ prompt)."""
    session = _session(request, session_id)
    await session.generate_image(body.prompt if body else None)
    return session.snapshot()


@api_router.post("/sessions/{session_id}/save")
async def save_session(request: Request, session_id: str) -> dict[str, Any]:
    """Send profile + gallery to the persistence endpoint."""
    confirmation = await _session(request, session_id).save()
    return confirmation.to_dict()

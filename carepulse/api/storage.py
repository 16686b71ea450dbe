# carepulse/api/storage.py

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from carepulse.api.errors import to_http_exception
from carepulse.core.config import Settings, get_settings
from carepulse.core.exceptions import CarePulseError
from carepulse.db.client import get_storage
from carepulse.db.storage import ObjectStorage

router = APIRouter(
    prefix="/storage",
    tags=["Storage"]
)


@router.get("/buckets/{bucket_id}/files/{file_id}/view")
def view_file(
        bucket_id: str,
        file_id: str,
        project: str = Query(...),
        storage: ObjectStorage = Depends(get_storage),
        settings: Settings = Depends(get_settings),
):
    """Serve a stored file at the URL handed out in doctor records"""
    if bucket_id != settings.bucket_id or project != settings.project_id:
        raise HTTPException(status_code=404, detail="File not found")

    try:
        data, content_type = storage.read_file(file_id)
    except CarePulseError as e:
        raise to_http_exception(e)

    return Response(content=data, media_type=content_type)

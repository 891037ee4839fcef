"""Scans router — upload a manifest, fetch or discard a stored result."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile

from depaudit.api.deps import get_scan_service
from depaudit.api.schemas.scan import ScanResultSchema
from depaudit.services import ValidationError
from depaudit.services.scan_service import ScanService

router = APIRouter()


@router.post("/scan", response_model=ScanResultSchema)
async def scan_manifest(
    file: UploadFile | None = File(None),
    file_type: str | None = Form(None, alias="fileType"),
    svc: ScanService = Depends(get_scan_service),
) -> ScanResultSchema:
    if file is None:
        raise ValidationError("No file uploaded")
    # One byte past the limit is enough to know the upload is too large.
    content = await file.read(svc.max_upload_bytes + 1)
    result = await svc.scan(content, declared_format=file_type, filename=file.filename)
    return ScanResultSchema.from_engine(result)


@router.get("/scans/{scan_id}", response_model=ScanResultSchema)
async def get_scan(
    scan_id: str,
    svc: ScanService = Depends(get_scan_service),
) -> ScanResultSchema:
    return ScanResultSchema.from_engine(svc.get(scan_id))


@router.delete("/scans/{scan_id}", status_code=204)
async def delete_scan(
    scan_id: str,
    svc: ScanService = Depends(get_scan_service),
) -> Response:
    svc.delete(scan_id)
    return Response(status_code=204)

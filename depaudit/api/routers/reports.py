"""Reports router — PDF downloads for stored or posted scan results."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Body, Depends, Response
from pydantic import ValidationError as PydanticValidationError

from depaudit.api.deps import get_report_service
from depaudit.api.schemas.scan import LegacyReportRequest, ScanResultSchema
from depaudit.services import ValidationError
from depaudit.services.report_service import ReportService

router = APIRouter()


def _pdf_response(pdf: bytes, filename: str) -> Response:
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/generate-pdf/{scan_id}")
async def generate_stored_pdf(
    scan_id: str,
    svc: ReportService = Depends(get_report_service),
) -> Response:
    pdf = await svc.render_stored(scan_id)
    return _pdf_response(pdf, f"vulnerability-report-{scan_id}.pdf")


@router.post("/generate-pdf")
async def generate_posted_pdf(
    body: LegacyReportRequest | None = Body(None),
    svc: ReportService = Depends(get_report_service),
) -> Response:
    raw = body.scan_results if body is not None else None
    if not isinstance(raw, dict) or "results" not in raw:
        raise ValidationError("Invalid scan results")
    try:
        supplied = ScanResultSchema.model_validate(raw)
    except PydanticValidationError as exc:
        raise ValidationError("Invalid scan results") from exc

    now = datetime.now(timezone.utc)
    pdf = await svc.render_supplied(supplied.to_engine(), title=body.title, generated_at=now)
    return _pdf_response(pdf, f"vulnerability-report-{int(now.timestamp() * 1000)}.pdf")

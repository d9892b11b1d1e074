from __future__ import annotations

import io

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from configurator_api.core.deps import get_bom_service
from configurator_api.schemas.bom import BomGenerateRequest, BomResult
from configurator_api.services.bom import BomService
from configurator_api.services.reports import export_bom

router = APIRouter(prefix="/bom", tags=["BOM"])


# PUBLIC_INTERFACE
@router.post(
    "/generate",
    response_model=BomResult,
    summary="Generate BOM",
    description=(
        "Resolve the selected options into activated modules and consolidated parts. "
        "Unknown option ids are ignored; an empty selection yields an empty BOM."
    ),
)
async def generate_bom(
    payload: BomGenerateRequest,
    service: BomService = Depends(get_bom_service),
) -> BomResult:
    return await service.generate_bom(payload.option_ids, payload.configuration_name)


# PUBLIC_INTERFACE
@router.post(
    "/export",
    summary="Export BOM report",
    description="Generate a BOM and return it as a downloadable report.",
    response_description="File stream (CSV/HTML/XLSX/PDF)",
)
async def export_bom_report(
    payload: BomGenerateRequest,
    format: str = Query("csv", description="Export format: csv | html | xlsx | pdf"),
    service: BomService = Depends(get_bom_service),
) -> StreamingResponse:
    bom = await service.generate_bom(payload.option_ids, payload.configuration_name)
    report = export_bom(bom, format)
    headers = {"Content-Disposition": f'attachment; filename="{report.filename}"'}
    return StreamingResponse(io.BytesIO(report.content), media_type=report.media_type, headers=headers)

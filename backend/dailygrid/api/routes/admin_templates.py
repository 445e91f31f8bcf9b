"""Admin Templates — curated grid authoring: CRUD, validation preview, publish lifecycle.

Invariants:
    - Every route requires require_admin
    - Lifecycle rules (immutability, conflicts, playability) enforced in TemplateService;
      violations surface through the global DailyGridError handler
    - Create and update respond with the validation summary alongside the template
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from dailygrid.api.dependencies import get_template_service, require_admin
from dailygrid.core.domain_types import TemplateStatusFilter
from dailygrid.schemas.template import (
    GridValidateRequest, TemplateCreate, TemplateUpdate,
)
from dailygrid.services.template_service import TemplateService

router = APIRouter(
    prefix="/api/v1/admin/templates",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_template(
    body: TemplateCreate,
    service: TemplateService = Depends(get_template_service),
    admin: str | None = Depends(require_admin),
):
    record, summary = await service.create(body, created_by=admin)
    return {"template": record.to_dict(), "validation": summary.to_dict()}


@router.get("")
async def list_templates(
    status_filter: TemplateStatusFilter = Query(
        TemplateStatusFilter.ALL, alias="status",
    ),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    service: TemplateService = Depends(get_template_service),
):
    return await service.list_templates(status_filter, page, limit)


@router.post("/validate")
async def validate_template_grid(
    body: GridValidateRequest,
    service: TemplateService = Depends(get_template_service),
):
    """Preview the validator's verdict. Nothing is stored."""
    summary = await service.validate(body.row_attributes, body.col_attributes)
    return summary.to_dict()


@router.get("/{template_id}")
async def get_template(
    template_id: UUID,
    service: TemplateService = Depends(get_template_service),
):
    record = await service.get(template_id)
    return {"template": record.to_dict()}


@router.patch("/{template_id}")
async def update_template(
    template_id: UUID,
    body: TemplateUpdate,
    service: TemplateService = Depends(get_template_service),
):
    record, summary = await service.update(template_id, body)
    return {
        "template": record.to_dict(),
        "validation": summary.to_dict() if summary else None,
    }


@router.delete("/{template_id}")
async def delete_template(
    template_id: UUID,
    service: TemplateService = Depends(get_template_service),
):
    await service.delete(template_id)
    return {"deleted": True, "id": str(template_id)}


@router.post("/{template_id}/publish")
async def publish_template(
    template_id: UUID,
    service: TemplateService = Depends(get_template_service),
):
    record = await service.publish(template_id)
    return {"template": record.to_dict()}


@router.delete("/{template_id}/publish")
async def unpublish_template(
    template_id: UUID,
    service: TemplateService = Depends(get_template_service),
):
    record = await service.unpublish(template_id)
    return {"template": record.to_dict()}

"""Template Service — curated grid authoring: draft CRUD, validation, publish lifecycle.

Invariants:
    - Templates are created as drafts (published=False), validated on create
    - Update/delete of a published template raises TemplateImmutableError
    - Publish requires: not already published, a scheduled_date, no other published
      template on that date (TemplateConflictError naming it), and no impossible cell
      in the stored validation
    - Publish/unpublish drop the date's cached grid in the same transaction
      (TemplateRepository.set_published contract)
    - Every rejection happens before any write: no half-published template,
      no partially updated draft

Design Decisions:
    - Structural checks through core Grid (MalformedGridError) before the validator
      ever runs (ADR: reject at the boundary)
    - validate() shares the grid validator with the generation loop, so the preview
      an author sees is the same verdict the daily generator would reach
"""

import logging
import math
from uuid import UUID

from dailygrid.core.domain_types import TemplateStatusFilter
from dailygrid.core.errors import (
    ErrorContext, ResourceNotFoundError, TemplateConflictError,
    TemplateImmutableError, TemplateStateError,
)
from dailygrid.core.grid import TOTAL_CELLS, Grid
from dailygrid.core.records import TemplateRecord
from dailygrid.core.repository_protocols import PlayerDataset, TemplateRepository
from dailygrid.core.validation_summary import ValidationSummary
from dailygrid.schemas.grid import AttributeSchema
from dailygrid.schemas.template import TemplateCreate, TemplateUpdate
from dailygrid.services.grid_validator import DEFAULT_SCAN_LIMIT, validate_grid

logger = logging.getLogger(__name__)

_PUBLISHED_FILTER = {
    TemplateStatusFilter.ALL: None,
    TemplateStatusFilter.DRAFT: False,
    TemplateStatusFilter.PUBLISHED: True,
}


def build_grid(
    rows: list[AttributeSchema], columns: list[AttributeSchema],
) -> Grid:
    return Grid.from_lists(
        [a.to_attribute() for a in rows], [a.to_attribute() for a in columns],
    )


class TemplateService:
    """Template authoring operations. Authorization is enforced by the caller."""

    def __init__(
        self,
        templates: TemplateRepository,
        dataset: PlayerDataset,
        scan_limit: int = DEFAULT_SCAN_LIMIT,
    ):
        self.templates = templates
        self.dataset = dataset
        self.scan_limit = scan_limit

    async def validate(
        self, rows: list[AttributeSchema], columns: list[AttributeSchema],
    ) -> ValidationSummary:
        """Run the grid validator for preview. Persists nothing."""
        grid = build_grid(rows, columns)
        return await validate_grid(self.dataset, grid, self.scan_limit)

    async def create(
        self, body: TemplateCreate, created_by: str | None = None,
    ) -> tuple[TemplateRecord, ValidationSummary]:
        grid = build_grid(body.row_attributes, body.col_attributes)
        summary = await validate_grid(self.dataset, grid, self.scan_limit)
        record = await self.templates.create({
            "title": body.title,
            "description": body.description,
            "difficulty": body.difficulty.value,
            "row_attributes": [a.to_dict() for a in grid.rows],
            "col_attributes": [a.to_dict() for a in grid.columns],
            "scheduled_date": body.scheduled_date,
            "published": False,
            "validated_cell_count": summary.valid_cells,
            "min_cell_solutions": summary.min_solutions,
            "created_by": created_by,
        })
        logger.info(
            f'Template "{record.title}" created as draft ({summary.status.value})',
            extra={"template_id": str(record.id)},
        )
        return record, summary

    async def list_templates(
        self, status: TemplateStatusFilter, page: int, limit: int,
    ) -> dict:
        offset = (page - 1) * limit
        records, total = await self.templates.list_page(
            _PUBLISHED_FILTER[status], limit, offset,
        )
        return {
            "templates": [r.to_dict() for r in records],
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "pages": math.ceil(total / limit) if limit else 0,
            },
        }

    async def get(self, template_id: UUID) -> TemplateRecord:
        record = await self.templates.get(template_id)
        if record is None:
            raise ResourceNotFoundError("Template", str(template_id))
        return record

    async def update(
        self, template_id: UUID, body: TemplateUpdate,
    ) -> tuple[TemplateRecord, ValidationSummary | None]:
        existing = await self.get(template_id)
        if existing.published:
            raise TemplateImmutableError("update", _ctx(existing, "update"))

        provided = body.model_fields_set
        fields: dict = {}
        if body.title is not None:
            fields["title"] = body.title
        if "description" in provided:
            fields["description"] = body.description
        if body.difficulty is not None:
            fields["difficulty"] = body.difficulty.value
        if "scheduled_date" in provided:
            fields["scheduled_date"] = body.scheduled_date

        summary = None
        if body.row_attributes is not None or body.col_attributes is not None:
            rows = body.row_attributes or [
                AttributeSchema.model_validate(a) for a in existing.row_attributes
            ]
            columns = body.col_attributes or [
                AttributeSchema.model_validate(a) for a in existing.col_attributes
            ]
            grid = build_grid(rows, columns)
            summary = await validate_grid(self.dataset, grid, self.scan_limit)
            fields.update({
                "row_attributes": [a.to_dict() for a in grid.rows],
                "col_attributes": [a.to_dict() for a in grid.columns],
                "validated_cell_count": summary.valid_cells,
                "min_cell_solutions": summary.min_solutions,
            })

        record = await self.templates.update(template_id, fields)
        logger.info(
            f"Template {template_id} updated: {sorted(fields)}",
            extra={"template_id": str(template_id)},
        )
        return record, summary

    async def delete(self, template_id: UUID) -> None:
        existing = await self.get(template_id)
        if existing.published:
            raise TemplateImmutableError("delete", _ctx(existing, "delete"))
        await self.templates.delete(template_id)
        logger.info(
            f"Template {template_id} deleted", extra={"template_id": str(template_id)},
        )

    async def publish(self, template_id: UUID) -> TemplateRecord:
        template = await self.get(template_id)
        ctx = _ctx(template, "publish")
        if template.published:
            raise TemplateStateError("Template is already published", ctx)
        if template.scheduled_date is None:
            raise TemplateStateError(
                "Cannot publish a template without a scheduled date", ctx,
            )
        conflicting = await self.templates.find_published_for_date(
            template.scheduled_date, exclude_id=template.id,
        )
        if conflicting is not None:
            raise TemplateConflictError(
                template.scheduled_date.isoformat(), conflicting.title,
                str(conflicting.id), ctx,
            )
        if template.validated_cell_count < TOTAL_CELLS:
            raise TemplateStateError(
                f"Cannot publish: {TOTAL_CELLS - template.validated_cell_count} "
                "cell(s) have no valid players",
                ctx,
            )

        published = await self.templates.set_published(template_id, True)
        logger.info(
            f'Template "{template.title}" published for {template.scheduled_date}; '
            "cached grid invalidated",
            extra={"template_id": str(template_id), "grid_date": str(template.scheduled_date)},
        )
        return published

    async def unpublish(self, template_id: UUID) -> TemplateRecord:
        template = await self.get(template_id)
        if not template.published:
            raise TemplateStateError(
                "Template is not published", _ctx(template, "unpublish"),
            )
        draft = await self.templates.set_published(template_id, False)
        logger.info(
            f'Template "{template.title}" unpublished',
            extra={"template_id": str(template_id), "grid_date": str(template.scheduled_date)},
        )
        return draft


def _ctx(template: TemplateRecord, operation: str) -> ErrorContext:
    return ErrorContext(
        template_id=str(template.id),
        grid_date=template.scheduled_date.isoformat() if template.scheduled_date else None,
        operation=operation,
    )

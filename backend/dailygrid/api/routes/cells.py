"""Cell Checks — public endpoints for a cell's solutions and for judging a guess."""

from fastapi import APIRouter, Depends

from dailygrid.api.dependencies import get_player_dataset
from dailygrid.config import Settings, get_settings
from dailygrid.core.repository_protocols import PlayerDataset
from dailygrid.schemas.grid import CellCheckRequest, GuessRequest
from dailygrid.services.cell_checks import check_guess, find_cell_solutions

router = APIRouter(prefix="/api/v1", tags=["cells"])


@router.post("/cells/solutions")
async def cell_solutions(
    body: CellCheckRequest,
    dataset: PlayerDataset = Depends(get_player_dataset),
    settings: Settings = Depends(get_settings),
):
    return await find_cell_solutions(
        dataset,
        body.row_attribute.to_attribute(),
        body.col_attribute.to_attribute(),
        settings.solution_scan_limit,
    )


@router.post("/guesses/validate")
async def validate_guess(
    body: GuessRequest,
    dataset: PlayerDataset = Depends(get_player_dataset),
):
    return await check_guess(
        dataset,
        body.player_name,
        body.row_attribute.to_attribute(),
        body.col_attribute.to_attribute(),
    )

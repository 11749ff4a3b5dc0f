"""Admin: replace teams from CSV or the whole record from JSON."""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, File, HTTPException, Request, UploadFile
from pydantic import BaseModel

from apps.thermometer.auth import require_edit_key
from apps.thermometer.deps import get_store
from apps.thermometer.routers.public import CampaignConfigOut
from apps.thermometer.services.config_store import ConfigStore
from apps.thermometer.services.csv_ingest import parse_teams_csv

router = APIRouter(dependencies=[Depends(require_edit_key)])
logger = logging.getLogger(__name__)


class MutationResponse(BaseModel):
    message: str
    config: CampaignConfigOut


@router.post("/upload", response_model=MutationResponse)
def upload_csv(
    request: Request,
    file: UploadFile = File(...),
    store: ConfigStore = Depends(get_store),
):
    """Replace the team list with the rows of an uploaded CSV (all or nothing)."""
    limit = request.app.state.settings.max_upload_bytes
    data = file.file.read(limit + 1)
    if len(data) > limit:
        raise HTTPException(status_code=413, detail=f"File exceeds {limit} bytes")
    # parse fully before touching the store
    teams = parse_teams_csv(data)
    config = store.replace_teams(teams)
    logger.info("Updated thermometer config with %s teams", len(config.teams))
    return {"message": "CSV uploaded successfully", "config": config.to_dict()}


@router.post("/config", response_model=MutationResponse)
def update_config(
    payload: Any = Body(...),
    store: ConfigStore = Depends(get_store),
):
    """Replace the whole record; last_updated is set by the server."""
    config = store.replace_config(payload)
    logger.info("Updated thermometer config via JSON")
    return {"message": "Configuration updated successfully", "config": config.to_dict()}

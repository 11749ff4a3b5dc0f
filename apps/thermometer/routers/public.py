"""Public read endpoints: current record and derived summary."""
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel

from apps.thermometer.deps import get_store
from apps.thermometer.services.campaign_summary import campaign_summary
from apps.thermometer.services.config_store import ConfigStore
from apps.thermometer.services.csv_ingest import SAMPLE_CSV

router = APIRouter()


class TeamOut(BaseModel):
    name: str
    image_url: str | None = None
    total_raised: float


class CampaignConfigOut(BaseModel):
    organization_name: str
    title: str
    goal: float
    teams: list[TeamOut]
    last_updated: str


class CampaignSummaryOut(BaseModel):
    organization_name: str
    title: str
    total_raised: float
    goal: float
    percent_of_goal: float
    progress_percent: float
    team_count: int
    last_updated: str


@router.get("/config", response_model=CampaignConfigOut)
def get_config(store: ConfigStore = Depends(get_store)):
    """Current campaign configuration."""
    return store.get_config().to_dict()


@router.get("/config/summary", response_model=CampaignSummaryOut)
def get_config_summary(store: ConfigStore = Depends(get_store)):
    """Totals for the thermometer: raised, goal, progress."""
    return campaign_summary(store.get_config())


@router.get("/admin/sample-csv", include_in_schema=False)
def download_sample_csv():
    return Response(
        content=SAMPLE_CSV,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="sample-teams.csv"'},
    )

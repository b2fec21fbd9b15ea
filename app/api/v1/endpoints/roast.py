import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_comparison_service
from app.schemas.roast import RoastRequest, RoastResponse
from app.services.comparison_service import ComparisonService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["roast"])


@router.post("", response_model=RoastResponse)
async def roast_user(
    data: RoastRequest,
    comparisons: Annotated[ComparisonService, Depends(get_comparison_service)],
) -> RoastResponse:
    """Roast, advice and personality profile for one GitHub user."""
    request_id = str(uuid.uuid4())
    logger.info(
        "Roast request %s for %s (intensity=%s)",
        request_id,
        data.username,
        data.intensity.value,
    )

    signals = await comparisons.get_signals(data.username, data.max_repos, data.include_readme)
    result = await comparisons.get_roast(data.username, signals, data.intensity)

    return RoastResponse(
        request_id=request_id,
        username=data.username,
        signals=signals,
        result=result,
    )

import logging
import time
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_comparison_service
from app.core.exceptions import BadRequestError
from app.schemas.compare import CompareRequest, CompareResponse
from app.services.comparison_service import ComparisonService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["compare"])


@router.post("", response_model=CompareResponse)
async def compare_users(
    data: CompareRequest,
    comparisons: Annotated[ComparisonService, Depends(get_comparison_service)],
) -> CompareResponse:
    """Roast two GitHub users and let the judge pick a winner."""
    if data.username1.lower() == data.username2.lower():
        raise BadRequestError("Cannot compare a user with themselves", field="username2")

    request_id = str(uuid.uuid4())
    started = time.monotonic()
    logger.info(
        "Compare request %s: %s vs %s (language=%s)",
        request_id,
        data.username1,
        data.username2,
        data.language,
    )

    response = await comparisons.compare(
        data.username1,
        data.username2,
        language=data.language,
        request_id=request_id,
    )
    comparisons.record_outcome(response)

    logger.info(
        "Compare request %s completed in %.0f ms",
        request_id,
        (time.monotonic() - started) * 1000,
    )
    return response

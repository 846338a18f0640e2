# Author: Bradley R. Kinnard — know the rules before you break them

"""Rule catalogue endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.backend.api.dependencies import get_request_id
from src.backend.api.schemas import RulesResponse
from src.backend.config import settings
from src.backend.rules.registry import all_rules

router = APIRouter(prefix="/rules", tags=["rules"])


@router.get("", response_model=RulesResponse)
async def rules(request_id: Annotated[str, Depends(get_request_id)]) -> RulesResponse:
    """What can fire, how loud, and what counts as already parallel."""
    return RulesResponse(
        rules=[r.info() for r in all_rules()],
        parallel_combinators=sorted(settings.combinators),
        request_id=request_id
    )

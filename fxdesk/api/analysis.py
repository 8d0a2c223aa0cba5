from fastapi import APIRouter, Depends

from fxdesk.deps import get_analysis_provider
from fxdesk.schemas.analysis import AnalysisResultOut, AnalyzeRequest
from fxdesk.services.analysis import AnalysisProvider
from fxdesk.services.errors import MissingField

router = APIRouter(prefix="/api/analyze", tags=["analysis"])


@router.post("", response_model=AnalysisResultOut)
def analyze(
    payload: AnalyzeRequest,
    provider: AnalysisProvider = Depends(get_analysis_provider),
):
    """
    Canned sentiment / recommendation for a pair.
    Not real inference; the provider is swappable.
    """
    if not payload.instrument or not payload.prompt:
        raise MissingField("Currency pair and prompt are required")

    result = provider.analyze(payload.instrument.strip().upper(), payload.prompt)
    return AnalysisResultOut.from_result(result)

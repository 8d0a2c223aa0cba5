from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from fxdesk.schemas.common import CamelModel
from fxdesk.services.analysis import AnalysisResult


class AnalyzeRequest(BaseModel):
    instrument: Optional[str] = Field(None, validation_alias=AliasChoices("pair", "instrument"))
    prompt: Optional[str] = None


class AnalysisOut(CamelModel):
    sentiment: str
    confidence: int
    reasoning: str
    recommendation: str
    target_price: float
    stop_loss: float


class AnalysisResultOut(CamelModel):
    instrument: str = Field(alias="pair")
    current_price: float
    analysis: AnalysisOut
    timestamp: datetime

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResultOut":
        a = result.analysis
        return cls(
            instrument=result.instrument,
            current_price=result.current_price,
            analysis=AnalysisOut(
                sentiment=a.sentiment,
                confidence=a.confidence,
                reasoning=a.reasoning,
                recommendation=a.recommendation,
                target_price=a.target_price,
                stop_loss=a.stop_loss,
            ),
            timestamp=result.timestamp,
        )

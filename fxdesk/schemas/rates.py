from datetime import datetime
from typing import Dict

from pydantic import BaseModel, Field

from fxdesk.schemas.common import CamelModel


class RatesOut(BaseModel):
    rates: Dict[str, float]
    timestamp: datetime


class RateOut(CamelModel):
    instrument: str = Field(alias="pair")
    rate: float
    timestamp: datetime

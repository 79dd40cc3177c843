"""Record model for the market ingestion routine"""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    """One daily measurement for a tracked key. Field order is the dataset column order."""
    model_config = ConfigDict(frozen=True)

    date: dt.date
    key: str = Field(..., min_length=1)
    value: float
    volume: int = Field(..., ge=0)

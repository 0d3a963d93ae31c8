from __future__ import annotations
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .constants import Role


class TransferIn(BaseModel):
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    description: Optional[str] = Field(None, max_length=200)
    # Defaults to 'me' when omitted: prepayments are made by me
    created_by: Optional[Role] = None


class TransferOut(BaseModel):
    id: int
    month_id: int
    amount: float
    description: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime


class TransferListOut(BaseModel):
    transfers: List[TransferOut]
    total: float

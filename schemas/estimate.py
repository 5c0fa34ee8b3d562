from typing import List, Optional
from pydantic import BaseModel, Field

from engine.models import FilingStatus

# Cap on any single amount in dollars
MAX_AMOUNT = 1e15


class EstimateParams(BaseModel):
    """
    Raw estimator inputs.
    Negative amounts pass through: the engine clamps them and reports them
    back as advisories. Magnitudes are capped so derived totals stay finite.
    """
    # Filing
    filing_status: FilingStatus = FilingStatus.SINGLE
    standard_deduction: Optional[float] = Field(default=None, ge=-MAX_AMOUNT, le=MAX_AMOUNT)

    # Wages & pre-tax deductions
    gross_wages: float = Field(default=0, ge=-MAX_AMOUNT, le=MAX_AMOUNT)
    pretax_retirement: float = Field(default=0, ge=-MAX_AMOUNT, le=MAX_AMOUNT)
    other_pretax_deductions: float = Field(default=0, ge=-MAX_AMOUNT, le=MAX_AMOUNT)

    # Capital gains
    short_term_gains: float = Field(default=0, ge=-MAX_AMOUNT, le=MAX_AMOUNT)
    long_term_gains: float = Field(default=0, ge=-MAX_AMOUNT, le=MAX_AMOUNT)

    # Payments
    withheld: float = Field(default=0, ge=-MAX_AMOUNT, le=MAX_AMOUNT)


class BracketRowOut(BaseModel):
    label: str
    rate: float
    lower: float
    upper: Optional[float] = Field(default=None, description="None for the unbounded top band")


class TableResponse(BaseModel):
    filing_status: FilingStatus
    standard_deduction: float
    brackets_fallback: bool
    brackets: List[BracketRowOut]
    ltcg_zero_rate_ceiling: float
    ltcg_fifteen_rate_ceiling: float

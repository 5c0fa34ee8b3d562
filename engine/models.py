import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class FilingStatus(str, Enum):
    """Taxpayer category selecting the brackets, deduction and LTCG thresholds."""
    SINGLE = 'single'
    MARRIED_FILING_JOINTLY = 'mfj'
    MARRIED_FILING_SEPARATELY = 'mfs'
    HEAD_OF_HOUSEHOLD = 'hoh'


@dataclass(frozen=True)
class RateBand:
    """
    A contiguous income range taxed at a single marginal rate.
    The top band of a table uses math.inf as its upper edge.
    """
    rate: float
    lower: float
    upper: float = math.inf

    @property
    def label(self) -> str:
        return f"{round(self.rate * 100)}%"


@dataclass(frozen=True)
class LtcgThresholds:
    """Income levels where LTCG moves from 0% to 15% and from 15% to 20%."""
    zero_rate_ceiling: float
    fifteen_rate_ceiling: float


@dataclass(frozen=True)
class BracketRow:
    band: RateBand
    amount_taxed: float
    tax_owed: float


@dataclass(frozen=True)
class BracketResult:
    rows: Tuple[BracketRow, ...]
    total_tax: float


LTCG_RATE_0 = 0.00
LTCG_RATE_15 = 0.15
LTCG_RATE_20 = 0.20


@dataclass(frozen=True)
class LtcgResult:
    amount_at_0: float
    amount_at_15: float
    amount_at_20: float
    total_tax: float

    @property
    def rows(self):
        """One (rate, amount, tax) row per LTCG tier, lowest rate first."""
        return (
            (LTCG_RATE_0, self.amount_at_0, 0.0),
            (LTCG_RATE_15, self.amount_at_15, self.amount_at_15 * LTCG_RATE_15),
            (LTCG_RATE_20, self.amount_at_20, self.amount_at_20 * LTCG_RATE_20),
        )


@dataclass(frozen=True)
class TaxInputs:
    """
    Raw numeric entries for one calculation.

    Amounts may arrive negative or non-finite from the caller; the
    orchestration step clamps them before they reach the core. When
    standard_deduction is None the filing status default is used.
    """
    gross_wages: float = 0.0
    pretax_retirement: float = 0.0
    other_pretax_deductions: float = 0.0
    short_term_gains: float = 0.0
    long_term_gains: float = 0.0
    withheld: float = 0.0
    filing_status: FilingStatus = FilingStatus.SINGLE
    standard_deduction: Optional[float] = None


@dataclass(frozen=True)
class EstimateResult:
    inputs: TaxInputs
    standard_deduction: float
    adjusted_wage_income: float
    total_income: float
    taxable_income: float
    taxable_ordinary_income: float
    ordinary: BracketResult
    ltcg: LtcgResult
    total_tax: float
    refund_or_due: float
    brackets_fallback: bool = False
    advisories: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_refund(self) -> bool:
        return self.refund_or_due >= 0

"""
2025 federal tax tables keyed by filing status.

Only the single filer ordinary brackets are populated; the other statuses
fall back to them. Standard deductions and LTCG thresholds are populated
for every status.
"""
import math
from types import MappingProxyType

from engine.models import FilingStatus, LtcgThresholds, RateBand


def build_bracket_table(bounds):
    """
    Build a contiguous bracket table from (upper_bound, rate) pairs.
    The first band starts at 0 and each band starts where the previous ends.
    """
    bands = []
    lower = 0
    for upper, rate in bounds:
        bands.append(RateBand(rate=rate, lower=lower, upper=upper))
        lower = upper
    return tuple(bands)


def validate_bracket_table(table):
    """
    Check that a bracket table covers [0, inf) without gaps or overlaps.
    Raises ValueError describing the first problem found.
    """
    if not table:
        raise ValueError("Bracket table must contain at least one band")
    if table[0].lower != 0:
        raise ValueError(f"First band must start at 0, got {table[0].lower}")

    for i, band in enumerate(table):
        if not 0 <= band.rate <= 1:
            raise ValueError(f"Band {i} rate {band.rate} is outside [0, 1]")
        if band.upper <= band.lower:
            raise ValueError(f"Band {i} upper bound {band.upper} must exceed lower bound {band.lower}")
        if i + 1 < len(table) and table[i + 1].lower != band.upper:
            raise ValueError(
                f"Bands must be contiguous. Gap or overlap between {band.upper} and {table[i + 1].lower}"
            )

    if not math.isinf(table[-1].upper):
        raise ValueError("Final band must be unbounded")
    return table


SINGLE_BRACKETS_2025 = validate_bracket_table(build_bracket_table([
    (11925, 0.10),
    (48475, 0.12),
    (103350, 0.22),
    (197300, 0.24),
    (250525, 0.32),
    (626350, 0.35),
    (math.inf, 0.37),
]))

# None means "not yet populated": lookups fall back to single.
ORDINARY_BRACKETS_2025 = MappingProxyType({
    FilingStatus.SINGLE: SINGLE_BRACKETS_2025,
    FilingStatus.MARRIED_FILING_JOINTLY: None,
    FilingStatus.MARRIED_FILING_SEPARATELY: None,
    FilingStatus.HEAD_OF_HOUSEHOLD: None,
})

STANDARD_DEDUCTION_2025 = MappingProxyType({
    FilingStatus.SINGLE: 15750,
    FilingStatus.MARRIED_FILING_SEPARATELY: 15750,
    FilingStatus.MARRIED_FILING_JOINTLY: 31500,
    FilingStatus.HEAD_OF_HOUSEHOLD: 23625,
})

LTCG_THRESHOLDS_2025 = MappingProxyType({
    FilingStatus.SINGLE: LtcgThresholds(zero_rate_ceiling=48350, fifteen_rate_ceiling=533400),
    FilingStatus.MARRIED_FILING_JOINTLY: LtcgThresholds(zero_rate_ceiling=96700, fifteen_rate_ceiling=600050),
    FilingStatus.HEAD_OF_HOUSEHOLD: LtcgThresholds(zero_rate_ceiling=64750, fifteen_rate_ceiling=566700),
    FilingStatus.MARRIED_FILING_SEPARATELY: LtcgThresholds(zero_rate_ceiling=48350, fifteen_rate_ceiling=300000),  # simplified
})

FALLBACK_NOTICE = (
    "Note: Ordinary income brackets currently use Single brackets as a fallback. "
    "Standard deduction and LTCG thresholds use your selected status."
)


def bracket_table_for(status):
    """
    Returns (table, used_fallback) for a filing status.
    Statuses without a populated table get the single table and used_fallback=True.
    """
    table = ORDINARY_BRACKETS_2025.get(FilingStatus(status))
    if table is None:
        return ORDINARY_BRACKETS_2025[FilingStatus.SINGLE], True
    return table, False


def standard_deduction_for(status):
    return STANDARD_DEDUCTION_2025.get(FilingStatus(status), STANDARD_DEDUCTION_2025[FilingStatus.SINGLE])


def ltcg_thresholds_for(status):
    return LTCG_THRESHOLDS_2025.get(FilingStatus(status), LTCG_THRESHOLDS_2025[FilingStatus.SINGLE])

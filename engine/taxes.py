import math

from engine.models import (
    LTCG_RATE_15,
    LTCG_RATE_20,
    BracketResult,
    BracketRow,
    LtcgResult,
)


def clamp_non_negative(value):
    """Floor an amount at zero."""
    return max(value, 0)


def to_amount(value):
    """
    Coerce a raw entry to a float amount.
    None, unparseable and non-finite values become 0.
    """
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def apportion_ordinary(taxable_ordinary_income, table):
    """
    Split taxable ordinary income across progressive bands.

    Every band yields a row, including bands above the income which carry a
    zero amount. Bands below the income contribute their full width.

    Args:
        taxable_ordinary_income: Taxable income excluding LTCG. Must already be
                                 clamped to >= 0 by the caller.
        table: Contiguous tuple of RateBand covering [0, inf).

    Returns:
        BracketResult with one BracketRow per band and the summed tax
    """
    rows = []
    total_tax = 0.0

    for band in table:
        taxed_amount = clamp_non_negative(min(taxable_ordinary_income, band.upper) - band.lower)
        band_tax = taxed_amount * band.rate

        rows.append(BracketRow(band=band, amount_taxed=taxed_amount, tax_owed=band_tax))
        total_tax += band_tax

    return BracketResult(rows=tuple(rows), total_tax=total_tax)


def stack_capital_gains(total_taxable_income, ltcg_amount, thresholds):
    """
    Calculates how much of the LTCG falls in the 0%, 15% and 20% tiers.

    LTCG is "stacked on top of" ordinary taxable income: the gains occupy the
    range from ordinary_taxable to total_taxable_income, and each dollar is
    taxed by where it lands relative to the LTCG thresholds, not the ordinary
    brackets.

    EXAMPLE (single: 0% up to $48,350, 15% up to $533,400, 20% above):
    - Total taxable income: $600,000, of which LTCG: $500,000
    - Ordinary taxable: $100,000, already past the 0% ceiling
    - $433,400 ($100,000 -> $533,400) taxed at 15% = $65,010
    - $66,600 above $533,400 taxed at 20% = $13,320

    Args:
        total_taxable_income: Taxable income including LTCG, >= 0
        ltcg_amount: LTCG portion, >= 0. When the standard deduction exceeds
                     ordinary income this is larger than total_taxable_income;
                     the negative ordinary_taxable only widens the 0% room.
        thresholds: LtcgThresholds for the filing status

    Returns:
        LtcgResult whose three tier amounts sum to ltcg_amount
    """
    ordinary_taxable = total_taxable_income - ltcg_amount

    # Room left in the 0% tier once ordinary income has filled the bottom
    room_at_0 = clamp_non_negative(thresholds.zero_rate_ceiling - ordinary_taxable)
    amount_at_0 = min(ltcg_amount, room_at_0)

    remaining = ltcg_amount - amount_at_0

    # The 15% tier starts wherever the higher of the two ends
    start_of_15 = max(ordinary_taxable, thresholds.zero_rate_ceiling)
    room_at_15 = clamp_non_negative(thresholds.fifteen_rate_ceiling - start_of_15)
    amount_at_15 = min(remaining, room_at_15)

    amount_at_20 = remaining - amount_at_15

    total_tax = amount_at_15 * LTCG_RATE_15 + amount_at_20 * LTCG_RATE_20

    return LtcgResult(
        amount_at_0=amount_at_0,
        amount_at_15=amount_at_15,
        amount_at_20=amount_at_20,
        total_tax=total_tax,
    )

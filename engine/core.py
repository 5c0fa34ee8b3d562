import logging
from dataclasses import replace

from engine.models import EstimateResult, FilingStatus, TaxInputs
from engine.tables import (
    FALLBACK_NOTICE,
    bracket_table_for,
    ltcg_thresholds_for,
    standard_deduction_for,
)
from engine.taxes import (
    apportion_ordinary,
    clamp_non_negative,
    stack_capital_gains,
    to_amount,
)

logger = logging.getLogger(__name__)

AMOUNT_FIELDS = (
    'gross_wages',
    'pretax_retirement',
    'other_pretax_deductions',
    'short_term_gains',
    'long_term_gains',
    'withheld',
)

DEDUCTIONS_EXCEED_GROSS = (
    "Your deductions (401k + other) are greater than your gross salary. Check inputs."
)


def sanitize_inputs(inputs: TaxInputs):
    """
    Clamp every monetary entry to a finite, non-negative amount.

    Returns:
        (clean TaxInputs, list of advisories for each negative entry)
    """
    advisories = []
    clean = {}
    for name in AMOUNT_FIELDS:
        amount = to_amount(getattr(inputs, name))
        if amount < 0:
            advisories.append(f"Negative {name.replace('_', ' ')} treated as zero.")
            amount = 0.0
        clean[name] = amount

    status = FilingStatus(inputs.filing_status)
    if inputs.standard_deduction is None:
        deduction = float(standard_deduction_for(status))
    else:
        deduction = to_amount(inputs.standard_deduction)
        if deduction < 0:
            advisories.append("Negative standard deduction treated as zero.")
            deduction = 0.0

    return replace(inputs, filing_status=status, standard_deduction=deduction, **clean), advisories


def run_estimate(inputs: TaxInputs) -> EstimateResult:
    """
    Run one estimate (core engine logic).

    Derives the income totals, apportions ordinary income across the status
    brackets, stacks LTCG on top, and nets the tax against withholding.
    Never raises for numeric input; implausible entries produce advisories.
    """
    clean, advisories = sanitize_inputs(inputs)
    status = clean.filing_status

    # Adjusted W-2 approximation (roughly what Box 1 represents)
    unclamped_wages = clean.gross_wages - clean.pretax_retirement - clean.other_pretax_deductions
    if unclamped_wages < 0:
        advisories.append(DEDUCTIONS_EXCEED_GROSS)
    adjusted_wage_income = clamp_non_negative(unclamped_wages)

    # Short-term gains ride along as ordinary income
    total_income = adjusted_wage_income + clean.short_term_gains + clean.long_term_gains
    taxable_income = clamp_non_negative(total_income - clean.standard_deduction)
    taxable_ordinary_income = clamp_non_negative(taxable_income - clean.long_term_gains)

    table, brackets_fallback = bracket_table_for(status)
    if brackets_fallback:
        advisories.append(FALLBACK_NOTICE)

    ordinary = apportion_ordinary(taxable_ordinary_income, table)
    ltcg = stack_capital_gains(taxable_income, clean.long_term_gains, ltcg_thresholds_for(status))

    total_tax = ordinary.total_tax + ltcg.total_tax
    refund_or_due = clean.withheld - total_tax

    logger.debug(
        "status=%s adjusted=%.2f total=%.2f taxable=%.2f ordinary=%.2f tax=%.2f",
        status.value, adjusted_wage_income, total_income, taxable_income,
        taxable_ordinary_income, total_tax,
    )
    for advisory in advisories:
        logger.info("Advisory: %s", advisory)

    return EstimateResult(
        inputs=clean,
        standard_deduction=clean.standard_deduction,
        adjusted_wage_income=adjusted_wage_income,
        total_income=total_income,
        taxable_income=taxable_income,
        taxable_ordinary_income=taxable_ordinary_income,
        ordinary=ordinary,
        ltcg=ltcg,
        total_tax=total_tax,
        refund_or_due=refund_or_due,
        brackets_fallback=brackets_fallback,
        advisories=tuple(advisories),
    )


def refund_label(is_refund: bool) -> str:
    """Display hint for the sign of refund_or_due."""
    if is_refund:
        return 'Refund (you overpaid withholding).'
    return 'Amount due (you underpaid withholding).'

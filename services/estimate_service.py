import logging
import math

import pandas as pd

from config import TAX_YEAR
from engine.core import refund_label, run_estimate
from engine.models import FilingStatus, TaxInputs
from engine.tables import bracket_table_for, ltcg_thresholds_for, standard_deduction_for
from schemas.estimate import BracketRowOut, EstimateParams, TableResponse

logger = logging.getLogger(__name__)


def map_to_engine_inputs(params: EstimateParams) -> TaxInputs:
    """Convert Pydantic model to engine inputs"""
    return TaxInputs(**params.model_dump())


def format_results(records: list) -> dict:
    """Format engine rows for API response, amounts rounded to cents"""
    if not records:
        return {'results': [], 'columns': []}

    df = pd.DataFrame(records)
    header = list(df.columns)
    money_cols = [col for col in ('amount', 'tax') if col in df.columns]
    df[money_cols] = df[money_cols].round(2)

    results_json = []
    for _, row in df.iterrows():
        row_dict = {}
        for col in header:
            val = row[col]
            if pd.isna(val):
                row_dict[col] = None
            elif hasattr(val, 'item'):
                row_dict[col] = val.item()
            else:
                row_dict[col] = val
        results_json.append(row_dict)

    return {
        'results': results_json,
        'columns': header
    }


def ordinary_records(result):
    return [
        {
            'label': row.band.label,
            'rate': row.band.rate,
            'amount': row.amount_taxed,
            'tax': row.tax_owed,
        }
        for row in result.ordinary.rows
    ]


def ltcg_records(result):
    return [
        {'label': f"{round(rate * 100)}%", 'rate': rate, 'amount': amount, 'tax': tax}
        for rate, amount, tax in result.ltcg.rows
    ]


def run_estimate_service(params: EstimateParams):
    """
    Service to run one estimate and return formatted results.
    """
    result = run_estimate(map_to_engine_inputs(params))

    summary = {
        'tax_year': TAX_YEAR,
        'standard_deduction': round(result.standard_deduction, 2),
        'adjusted_wage_income': round(result.adjusted_wage_income, 2),
        'total_income': round(result.total_income, 2),
        'taxable_income': round(result.taxable_income, 2),
        'taxable_ordinary_income': round(result.taxable_ordinary_income, 2),
        'ordinary_tax': round(result.ordinary.total_tax, 2),
        'ltcg_tax': round(result.ltcg.total_tax, 2),
        'total_tax': round(result.total_tax, 2),
        'refund_or_due': round(result.refund_or_due, 2),
        'is_refund': result.is_refund,
        'refund_hint': refund_label(result.is_refund),
    }

    inputs = params.model_dump(mode='json')
    inputs['standard_deduction'] = result.standard_deduction

    return {
        'success': True,
        'inputs': inputs,
        'summary': summary,
        'ordinary_brackets': format_results(ordinary_records(result)),
        'ltcg_tiers': format_results(ltcg_records(result)),
        'advisories': list(result.advisories),
        'brackets_fallback': result.brackets_fallback,
    }


def get_table_service(status: FilingStatus) -> TableResponse:
    """
    Service to describe the tables a filing status resolves to.
    """
    table, used_fallback = bracket_table_for(status)
    thresholds = ltcg_thresholds_for(status)
    if used_fallback:
        logger.info("No ordinary brackets for %s, using single", status.value)

    return TableResponse(
        filing_status=status,
        standard_deduction=standard_deduction_for(status),
        brackets_fallback=used_fallback,
        brackets=[
            BracketRowOut(
                label=band.label,
                rate=band.rate,
                lower=band.lower,
                upper=None if math.isinf(band.upper) else band.upper,
            )
            for band in table
        ],
        ltcg_zero_rate_ceiling=thresholds.zero_rate_ceiling,
        ltcg_fifteen_rate_ceiling=thresholds.fifteen_rate_ceiling,
    )

import io
import logging
from typing import Any, Dict

import pandas as pd
from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from config import ALLOWED_EXTENSIONS, MAX_CONTENT_LENGTH
from engine.models import FilingStatus
from engine.tables import standard_deduction_for
from schemas.estimate import EstimateParams, TableResponse
from services.estimate_service import get_table_service, run_estimate_service

logger = logging.getLogger(__name__)

router = APIRouter()

EXPORT_FIELDS = list(EstimateParams.model_fields.keys())


def allowed_file(filename: str) -> bool:
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def csv_to_params(content: bytes) -> EstimateParams:
    """Parse parameter,value CSV content bytes to EstimateParams"""
    try:
        df = pd.read_csv(io.BytesIO(content))
        inputs = dict(zip(df['parameter'], df['value']))
    except Exception as e:
        raise ValueError(f"Failed to parse CSV: {str(e)}")

    # Clean inputs - convert numeric strings, drop blanks
    clean_inputs = {}
    for k, v in inputs.items():
        if pd.isna(v):
            continue
        try:
            clean_inputs[k] = float(v)
        except ValueError:
            clean_inputs[k] = str(v).strip()

    return EstimateParams(**clean_inputs)


@router.post("/estimate")
async def run_estimate_endpoint(
    request: Request,
    file: UploadFile = File(None)
):
    """
    Estimate federal tax for one year. Supports CSV upload or JSON body.
    """
    try:
        # 1. Handle File Upload
        if file and file.filename:
            if not allowed_file(file.filename):
                raise HTTPException(status_code=400, detail="Invalid file format")
            content = await file.read(MAX_CONTENT_LENGTH + 1)
            if len(content) > MAX_CONTENT_LENGTH:
                raise HTTPException(status_code=413, detail="File too large")
            params = csv_to_params(content)

        # 2. Handle JSON Body
        elif request.headers.get("content-type", "").startswith("application/json"):
            json_body = await request.json()
            if not isinstance(json_body, dict):
                raise HTTPException(status_code=400, detail="JSON body must be an object")
            params = EstimateParams(**json_body)

        else:
            raise HTTPException(status_code=400, detail="No file or data provided")

        return run_estimate_service(params)

    except HTTPException:
        raise
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Estimate failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/standard-deduction/{status}")
async def get_standard_deduction(status: str):
    """Default standard deduction for a filing status"""
    try:
        filing_status = FilingStatus(status)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown filing status: {status}")
    return {
        'filing_status': filing_status.value,
        'standard_deduction': standard_deduction_for(filing_status)
    }


@router.get("/tables/{status}", response_model=TableResponse)
async def get_tables(status: str):
    """Bracket table, LTCG thresholds and deduction a filing status resolves to"""
    try:
        filing_status = FilingStatus(status)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown filing status: {status}")
    return get_table_service(filing_status)


@router.post("/export-inputs")
async def export_inputs(data: Dict[str, Any]):
    """Export current form data as a parameter,value CSV file"""
    records = [
        {'parameter': field, 'value': data.get(field, '')}
        for field in EXPORT_FIELDS
    ]
    df = pd.DataFrame(records)

    # Create CSV in memory
    output = io.StringIO()
    df.to_csv(output, index=False)
    output.seek(0)

    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=tax_inputs.csv"}
    )

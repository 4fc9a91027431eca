import io
import logging

import pandas as pd
from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from pydantic import ValidationError

from schemas.plan import ContributionRequest, PlanParams, SimulationRequest, YieldRequest
from services.plan_service import (
    contribution_service,
    market_defaults_service,
    run_plan_service,
    run_simulation_service,
    yield_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()

STRING_FIELDS = {'market', 'duration'}


def csv_to_params(content: bytes) -> PlanParams:
    """Parse CSV content bytes (parameter,value rows) to PlanParams"""
    try:
        df = pd.read_csv(io.BytesIO(content), dtype={'value': str})
        inputs = dict(zip(df['parameter'], df['value']))
    except (ValueError, KeyError, pd.errors.ParserError) as e:
        raise ValueError(f"Failed to parse CSV: {e}") from e

    clean_inputs = {}
    for k, v in inputs.items():
        if pd.isna(v):
            continue
        v = str(v).strip()
        if k in STRING_FIELDS:
            clean_inputs[k] = v
            continue
        try:
            number = float(v)
            clean_inputs[k] = int(number) if number.is_integer() else number
        except ValueError:
            clean_inputs[k] = v

    return PlanParams(**clean_inputs)


def _bad_request(e: Exception) -> HTTPException:
    if isinstance(e, ValidationError):
        detail = e.errors(include_url=False, include_context=False)
    else:
        detail = str(e)
    return HTTPException(status_code=400, detail=detail)


@router.get("/markets")
async def markets_endpoint():
    """Market defaults and historical data ranges."""
    return market_defaults_service()


@router.post("/run-plan")
async def run_plan_endpoint(
    request: Request,
    file: UploadFile = File(None)
):
    """
    Run the complete retirement plan. Supports CSV upload or JSON body.
    """
    try:
        if file and file.filename:
            content = await file.read()
            params = csv_to_params(content)
        elif request.headers.get("content-type", "").startswith("application/json"):
            json_body = await request.json()
            params = PlanParams(**json_body)
        else:
            raise HTTPException(status_code=400, detail="No file or data provided")

        return run_plan_service(params)

    except HTTPException:
        raise
    except (ValidationError, ValueError, TypeError) as e:
        logger.warning("Rejected plan request: %s", e)
        raise _bad_request(e)
    except Exception as e:
        logger.exception("Plan run failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/simulate")
async def simulate_endpoint(request: Request):
    """
    Run one historical simulation and return its ledger.
    """
    try:
        json_body = await request.json()
        params = SimulationRequest(**json_body)
        return run_simulation_service(params)
    except (ValidationError, ValueError, TypeError) as e:
        logger.warning("Rejected simulation request: %s", e)
        raise _bad_request(e)
    except Exception as e:
        logger.exception("Simulation failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/sustainable-yield")
async def sustainable_yield_endpoint(request: Request):
    """Sustainable withdrawal percentage for the given assumptions."""
    try:
        json_body = await request.json()
        params = YieldRequest(**json_body)
        return yield_service(params)
    except (ValidationError, ValueError, TypeError) as e:
        logger.warning("Rejected yield request: %s", e)
        raise _bad_request(e)
    except Exception as e:
        logger.exception("Yield calculation failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/contribution-plan")
async def contribution_plan_endpoint(request: Request):
    """Stepped-up monthly contribution that reaches a target amount."""
    try:
        json_body = await request.json()
        params = ContributionRequest(**json_body)
        return contribution_service(params)
    except (ValidationError, ValueError, TypeError) as e:
        logger.warning("Rejected contribution request: %s", e)
        raise _bad_request(e)
    except Exception as e:
        logger.exception("Contribution plan failed")
        raise HTTPException(status_code=500, detail=str(e))

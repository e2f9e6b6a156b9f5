# backend/routers/load.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from dependencies import get_sleeper, get_warehouse
from services.loader import load_league
from services.sleeper_client import SleeperAPIError, SleeperClient
from services.warehouse import Warehouse

router = APIRouter(prefix="/api", tags=["Load"])


@router.post("/load")
async def load(
    week: Optional[int] = Query(None, ge=1, le=18),
    warehouse: Warehouse = Depends(get_warehouse),
    sleeper: SleeperClient = Depends(get_sleeper),
):
    """
    Fetch the league from Sleeper and append it to the warehouse.
    Unlike the read endpoints, failures here surface as errors.
    """
    try:
        report = await load_league(sleeper, warehouse, week)
    except SleeperAPIError as e:
        print(f"❌ Error in load: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        print(f"❌ Error in load: {e}")
        raise HTTPException(status_code=500, detail="Error fetching or uploading league data.")

    return {
        "status": "ok",
        "message": "League data fetched and uploaded successfully!",
        **report.model_dump(),
    }

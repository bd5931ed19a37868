from fastapi import APIRouter, Body
import logging
from gstrecon.schemas.gstr3b import Gstr3bComputation, Gstr3bRequest
from gstrecon.schemas.tax import WaterfallRequest, WaterfallResult
from gstrecon.core.gstr3b import compute_gstr3b
from gstrecon.core.waterfall import compute_itc_utilization

router = APIRouter(prefix="/gstr3b")
logger = logging.getLogger(__name__)

@router.post("/waterfall", response_model=WaterfallResult)
async def itc_waterfall(request: WaterfallRequest = Body(...)):
    """
    Offset available ITC against liability in the statutory order.
    Only needs the four head-wise amounts on each side.
    """
    return compute_itc_utilization(request.liability, request.credit)

@router.post("/compute", response_model=Gstr3bComputation)
async def gstr3b_compute(request: Gstr3bRequest = Body(...)):
    logger.info(f"GSTR-3B computation requested. Outward: {len(request.outward)}, Inward: {len(request.inward)}")
    return compute_gstr3b(request.outward, request.inward, request.brought_forward, request.period)

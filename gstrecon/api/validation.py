from fastapi import APIRouter, Body
from gstrecon.schemas.validation import GstinRequest, GstinValidation
from gstrecon.core.validation import validate_gstin

router = APIRouter()

@router.post("/validate/gstin", response_model=GstinValidation)
async def validate_gstin_endpoint(request: GstinRequest = Body(...)):
    """Format, state code and check-digit validation of a single GSTIN."""
    return validate_gstin(request.gstin)

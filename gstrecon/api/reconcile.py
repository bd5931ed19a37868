from fastapi import APIRouter, HTTPException, Body
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
import logging
from gstrecon.schemas.invoice import Invoice
from gstrecon.schemas.purchase import PurchaseReconciliationResult
from gstrecon.schemas.reconciliation import ReconciliationOptions, ReconciliationResult
from gstrecon.core.config import settings
from gstrecon.core.purchase import reconcile_purchase
from gstrecon.core.reconciliation import reconcile_sales

router = APIRouter(prefix="/reconcile")
logger = logging.getLogger(__name__)


class SalesReconciliationRequest(BaseModel):
    sales: List[Invoice] = Field(default_factory=list)
    gstr1: List[Invoice] = Field(default_factory=list)
    options: Optional[ReconciliationOptions] = None


class PurchaseReconciliationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    purchases: List[Invoice] = Field(default_factory=list)
    gstr2b: List[Invoice] = Field(default_factory=list, alias="gstr2")
    options: Optional[ReconciliationOptions] = None


def _enforce_limit(side: str, invoices: List[Invoice]):
    if len(invoices) > settings.MAX_INVOICES_PER_SIDE:
        raise HTTPException(
            status_code=413,
            detail=f"Invoice limit exceeded for {side}: {len(invoices)} > {settings.MAX_INVOICES_PER_SIDE}",
        )


def _options(options: Optional[ReconciliationOptions]) -> ReconciliationOptions:
    if options is not None:
        return options
    return ReconciliationOptions(tolerance_amount=settings.DEFAULT_TOLERANCE_AMOUNT)


@router.post("/sales", response_model=ReconciliationResult)
async def reconcile_sales_endpoint(request: SalesReconciliationRequest = Body(...)):
    """Sales register vs GSTR-1. Stateless: nothing is stored between calls."""
    _enforce_limit("sales", request.sales)
    _enforce_limit("gstr1", request.gstr1)
    logger.info(f"Sales reconciliation STARTED. Sales: {len(request.sales)}, GSTR-1: {len(request.gstr1)}")
    return reconcile_sales(request.sales, request.gstr1, _options(request.options))


@router.post("/purchase", response_model=PurchaseReconciliationResult)
async def reconcile_purchase_endpoint(request: PurchaseReconciliationRequest = Body(...)):
    """Purchase register vs GSTR-2A/2B, with the ITC exposure summary."""
    _enforce_limit("purchases", request.purchases)
    _enforce_limit("gstr2b", request.gstr2b)
    logger.info(f"Purchase reconciliation STARTED. Purchases: {len(request.purchases)}, GSTR-2B: {len(request.gstr2b)}")
    return reconcile_purchase(request.purchases, request.gstr2b, _options(request.options))

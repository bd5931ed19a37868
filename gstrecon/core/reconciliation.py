import logging
from typing import Optional, Sequence
from gstrecon.schemas.invoice import Invoice
from gstrecon.schemas.reconciliation import ReconciliationOptions, ReconciliationResult
from gstrecon.core.aggregator import ReconciliationAggregator
from gstrecon.core.index import invoice_key
from gstrecon.core.matcher import match_invoices
from gstrecon.core.validation import check_invoices

logger = logging.getLogger(__name__)

# Sales register (left) vs GSTR-1 (right). The purchase side runs the same matcher with a supplier-scoped key.

def reconcile_sales(
    sales: Sequence[Invoice],
    gstr1: Sequence[Invoice],
    options: Optional[ReconciliationOptions] = None,
) -> ReconciliationResult:
    """
    Reconcile a sales register against the GSTR-1 extract.
    Pure: the inputs are not modified and no state survives the call.
    """
    options = options or ReconciliationOptions()
    run = match_invoices(
        sales,
        gstr1,
        tolerance=options.tolerance_amount,
        key=invoice_key,
        policy=options.policy,
    )

    aggregator = ReconciliationAggregator().add_all(run.outcomes())
    result = ReconciliationResult(
        summary=aggregator.summary(duplicate_groups=len(run.duplicates)),
        matched=run.matched,
        mismatched=run.mismatched,
        missing_in_right=run.missing_in_right,
        missing_in_left=run.missing_in_left,
        duplicates=run.duplicates,
        validation_issues=check_invoices(sales, options.tolerance_amount),
        monthly_breakdown=aggregator.monthly_breakdown(),
        counterparty_breakdown=aggregator.counterparty_breakdown(),
    )

    logger.info(
        f"Sales reconciliation COMPLETED. Sales: {len(sales)}, GSTR-1: {len(gstr1)}, "
        f"matched: {result.summary.matched}, mismatched: {result.summary.mismatched}, "
        f"missing in GSTR-1: {result.summary.missing_in_right}, "
        f"missing in sales: {result.summary.missing_in_left}"
    )
    return result

from typing import Callable, Dict, List, Sequence
from gstrecon.schemas.invoice import Invoice
from gstrecon.schemas.reconciliation import DuplicateGroup, Side
from gstrecon.core.normalize import digits_only, normalize_gstin, normalize_invoice_number

KeyFunc = Callable[[Invoice], str]


def invoice_key(inv: Invoice) -> str:
    return normalize_invoice_number(inv.invoice_number)


def supplier_invoice_key(inv: Invoice) -> str:
    """Purchase-side key: the same bill number is common across suppliers."""
    number = normalize_invoice_number(inv.invoice_number)
    if not number:
        return ""
    return f"{normalize_gstin(inv.counterparty_gstin)}|{number}"


class InvoiceIndex:
    """
    Normalized key -> input positions, in input order.
    Records whose key is empty are held in `unkeyed` and never matched.

    Keyed records are also bucketed by counterparty GSTIN, with the digits
    of their invoice number precomputed, for the fuzzy tier.
    """

    def __init__(self, invoices: Sequence[Invoice], key: KeyFunc = invoice_key):
        if invoices is None:
            raise TypeError("InvoiceIndex requires an invoice collection, got None")
        self.invoices = invoices
        self.keys: List[str] = []
        self.buckets: Dict[str, List[int]] = {}
        self.unkeyed: List[int] = []
        self.gstins: List[str] = []
        self.digits: List[str] = []
        self.by_gstin: Dict[str, List[int]] = {}

        for position, inv in enumerate(invoices):
            k = key(inv)
            gstin = normalize_gstin(inv.counterparty_gstin)
            self.keys.append(k)
            self.gstins.append(gstin)
            self.digits.append(digits_only(normalize_invoice_number(inv.invoice_number)))
            if not k:
                self.unkeyed.append(position)
                continue
            self.buckets.setdefault(k, []).append(position)
            if gstin:
                self.by_gstin.setdefault(gstin, []).append(position)

    def get(self, key: str) -> List[int]:
        if not key:
            return []
        return self.buckets.get(key, [])

    def same_counterparty(self, gstin: str) -> List[int]:
        if not gstin:
            return []
        return self.by_gstin.get(gstin, [])

    def duplicate_groups(self, side: Side) -> List[DuplicateGroup]:
        groups = []
        for k, positions in self.buckets.items():
            if len(positions) < 2:
                continue
            groups.append(DuplicateGroup(
                side=side,
                key=k,
                invoice_number=self.invoices[positions[0]].invoice_number,
                count=len(positions),
                positions=list(positions),
                invoices=[self.invoices[p] for p in positions],
            ))
        return groups


def build_invoice_index(invoices: Sequence[Invoice], key: KeyFunc = invoice_key) -> InvoiceIndex:
    return InvoiceIndex(invoices, key)

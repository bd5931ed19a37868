from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    BeforeValidator,
    field_validator,
    model_validator,
)
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, Optional, Set
from gstrecon.core.money import to_money

# Exact amounts internally, plain JSON numbers on the wire
Money = Annotated[
    Decimal,
    BeforeValidator(to_money),
    PlainSerializer(float, return_type=float, when_used="json"),
]

_TRUTHY = {"Y", "YES", "TRUE", "1"}


class Invoice(BaseModel):
    """
    One row of a sales/purchase register or a GSTR-1/2A/2B extract.
    Columns the model does not know are kept verbatim in `extras`.
    """
    model_config = ConfigDict(populate_by_name=True)

    invoice_number: str = Field("", validation_alias=AliasChoices("invoice_number", "invoice_no"))
    invoice_date: Optional[str] = Field(None, validation_alias=AliasChoices("invoice_date", "date"))
    counterparty_gstin: Optional[str] = Field(None, validation_alias=AliasChoices("counterparty_gstin", "gstin"))
    counterparty_name: Optional[str] = Field(None, validation_alias=AliasChoices("counterparty_name", "name"))

    taxable_value: Money = Decimal("0")
    cgst: Money = Decimal("0")
    sgst: Money = Decimal("0")
    igst: Money = Decimal("0")
    cess: Money = Decimal("0")
    total_amount: Money = Field(Decimal("0"), validation_alias=AliasChoices("total_amount", "total"))

    place_of_supply: Optional[str] = None
    reverse_charge: bool = False
    invoice_type: Optional[str] = None
    itc_eligible: bool = True

    extras: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def collect_extras(cls, data: Any):
        if not isinstance(data, dict):
            return data
        known = _known_keys(cls)
        extras = dict(data.get("extras") or {})
        core = {}
        for key, value in data.items():
            if key == "extras":
                continue
            if key in known:
                core[key] = value
            else:
                extras[key] = value
        core["extras"] = extras
        return core

    @field_validator("invoice_number", mode="before")
    @classmethod
    def coerce_number(cls, v):
        if v is None:
            return ""
        # spreadsheet exports hand back numeric ids as 42.0
        if isinstance(v, float) and v.is_integer():
            v = int(v)
        return str(v).strip()

    @field_validator("invoice_date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        if isinstance(v, datetime):
            return v.date().isoformat()
        if isinstance(v, date):
            return v.isoformat()
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("counterparty_gstin", "counterparty_name", "place_of_supply", "invoice_type", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("reverse_charge", "itc_eligible", mode="before")
    @classmethod
    def coerce_flag(cls, v, info):
        if isinstance(v, bool):
            return v
        if v is None or str(v).strip() == "":
            return info.field_name == "itc_eligible"
        return str(v).strip().upper() in _TRUTHY

    @property
    def total_tax(self) -> Decimal:
        return self.cgst + self.sgst + self.igst + self.cess


def _known_keys(model: type) -> Set[str]:
    keys: Set[str] = set()
    for name, field in model.model_fields.items():
        keys.add(name)
        alias = field.validation_alias
        if isinstance(alias, AliasChoices):
            keys.update(c for c in alias.choices if isinstance(c, str))
        elif isinstance(alias, str):
            keys.add(alias)
    return keys

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CARRIER = "Default Carrier"
ACTIVE_STATUS = "active"

DISPLAY_LIMITS = (5, 10, 15, 25, 50)
DEFAULT_DISPLAY_LIMIT = 10


class Load(BaseModel):
    """A load record as returned by GET /api/loads. Read-only on our side."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    numeric_id: Optional[str] = Field(default=None, alias="numericId")
    origin: str = ""
    destination: str = ""
    customer: str = ""
    carrier: str = ""
    status: str = ""
    created_at: str = ""

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE_STATUS

    @property
    def route(self) -> str:
        return f"{self.origin} → {self.destination}"


class LoadPayload(BaseModel):
    # body of POST /api/loads
    origin: str
    destination: str
    customer: str
    carrier: str = DEFAULT_CARRIER
    status: str = ACTIVE_STATUS


class DraftLoad(BaseModel):
    """Unsaved load typed into the creation form.

    Country fields are collected with the rest of the form but are not part of
    the create payload: the Load API has no field for them.
    """

    model_config = ConfigDict(frozen=True)

    customer: str = ""
    pickup: str = ""
    pickup_state: str = ""
    pickup_country: str = ""
    delivery: str = ""
    delivery_state: str = ""
    delivery_country: str = ""

    def missing_fields(self) -> List[str]:
        return [name for name in type(self).model_fields if not getattr(self, name).strip()]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    def with_field(self, name: str, value: str) -> "DraftLoad":
        if name not in type(self).model_fields:
            raise KeyError(f"unknown draft field: {name}")
        return self.model_copy(update={name: value})

    def to_payload(self) -> LoadPayload:
        return LoadPayload(
            origin=f"{self.pickup}, {self.pickup_state}",
            destination=f"{self.delivery}, {self.delivery_state}",
            customer=self.customer,
        )


class IncompleteDraftError(ValueError):
    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__("missing required fields: " + ", ".join(self.missing))


def check_display_limit(limit: int) -> int:
    if limit not in DISPLAY_LIMITS:
        raise ValueError(f"display limit must be one of {DISPLAY_LIMITS}, got {limit!r}")
    return limit

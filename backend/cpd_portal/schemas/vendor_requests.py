"""Boundary schemas for vendor request payloads.

`UpdateVendorRequestInput` has no `status` (or any workflow) field: unknown keys
are ignored, so a PATCH can never move a request through the approval workflow.
"""
from __future__ import annotations
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, ClassVar, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from cpd_portal.errors import ValidationError
from cpd_portal.utils.validation import validate_cpd_points, validate_date_order

CPD_POINTS_STEP = Decimal('0.01')
REQUIRED_CREATE_FIELDS = ('event_name', 'event_start_date', 'event_end_date', 'expected_cpd_points')
OPTIONAL_FIELDS = (
    'vendor_company_name', 'contact_name', 'contact_email', 'contact_phone',
    'poster_file_url', 'expected_promotion_date',
)


class _VendorRequestFields(BaseModel):
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)

    @field_validator(*OPTIONAL_FIELDS, mode='before', check_fields=False)
    @classmethod
    def _blank_to_none(cls, value: Any):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator('expected_cpd_points', check_fields=False)
    @classmethod
    def _round_points(cls, value: Optional[Decimal]):
        # stored as Numeric(4, 2)
        if value is None:
            return None
        try:
            return value.quantize(CPD_POINTS_STEP, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise ValueError('number out of range')


class CreateVendorRequestInput(_VendorRequestFields):
    event_name: str = Field(min_length=1, max_length=255)
    event_start_date: date
    event_end_date: date
    expected_cpd_points: Decimal
    vendor_company_name: Optional[str] = Field(default=None, max_length=200)
    contact_name: Optional[str] = Field(default=None, max_length=150)
    contact_email: Optional[str] = Field(default=None, max_length=254)
    contact_phone: Optional[str] = Field(default=None, max_length=32)
    poster_file_url: Optional[str] = None
    expected_promotion_date: Optional[date] = None


class UpdateVendorRequestInput(_VendorRequestFields):
    NON_NULLABLE: ClassVar[Tuple[str, ...]] = ('event_name', 'event_start_date', 'event_end_date', 'expected_cpd_points')

    event_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    event_start_date: Optional[date] = None
    event_end_date: Optional[date] = None
    expected_cpd_points: Optional[Decimal] = None
    vendor_company_name: Optional[str] = Field(default=None, max_length=200)
    contact_name: Optional[str] = Field(default=None, max_length=150)
    contact_email: Optional[str] = Field(default=None, max_length=254)
    contact_phone: Optional[str] = Field(default=None, max_length=32)
    poster_file_url: Optional[str] = None
    expected_promotion_date: Optional[date] = None

    @model_validator(mode='after')
    def _required_fields_not_cleared(self):
        for name in self.NON_NULLABLE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f'{name} cannot be empty')
        return self

    def changes(self) -> Dict[str, Any]:
        """Fields the client actually sent, with parsed values."""
        return self.model_dump(exclude_unset=True)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = '.'.join(str(p) for p in err.get('loc', ())) or 'body'
        parts.append(f"{loc}: {err.get('msg')}")
    return '; '.join(parts)


def _require_object(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError('Invalid request body', details='Expected a JSON object')
    return data


def parse_create_payload(data: Any) -> CreateVendorRequestInput:
    """Validate a create body: presence, types, CPD range, then date order."""
    data = _require_object(data)
    if any(_is_blank(data.get(name)) for name in REQUIRED_CREATE_FIELDS):
        raise ValidationError('Missing required fields')
    try:
        payload = CreateVendorRequestInput.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError('Invalid field value', details=_describe(e))
    validate_cpd_points(payload.expected_cpd_points)
    validate_date_order(payload.event_start_date, payload.event_end_date)
    return payload


def parse_update_payload(data: Any) -> UpdateVendorRequestInput:
    """Validate a PATCH body. Date ordering against stored values is checked by the caller."""
    data = _require_object(data)
    try:
        payload = UpdateVendorRequestInput.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError('Invalid field value', details=_describe(e))
    validate_cpd_points(payload.expected_cpd_points)
    return payload


__all__ = [
    'CreateVendorRequestInput', 'UpdateVendorRequestInput',
    'parse_create_payload', 'parse_update_payload', 'REQUIRED_CREATE_FIELDS',
]

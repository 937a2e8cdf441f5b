# surveyforge/suppliers.py
from __future__ import annotations

import re
from dataclasses import replace
from typing import Any, List, Sequence

from surveyforge.errors import ValidationError
from surveyforge.models import TrackedSupplier, _s

MAX_CODE_LEN = 50
MAX_NAME_LEN = 255
_CODE_RE = re.compile(r"^[A-Za-z0-9_-]+$")

EDITABLE_FIELDS = ("code", "name", "is_prophecy_supplier")


def normalize_code(code: Any) -> str:
    return _s(code).upper()


def validate_supplier(supplier: TrackedSupplier, existing: Sequence[TrackedSupplier] = ()) -> List[str]:
    """Messages for a supplier about to be added; empty when it is fine."""
    errors: List[str] = []
    code = _s(supplier.code)
    name = _s(supplier.name)

    if not code:
        errors.append("Supplier code is required")
    elif len(code) > MAX_CODE_LEN:
        errors.append(f"Supplier code must be {MAX_CODE_LEN} characters or less")
    elif not _CODE_RE.match(code):
        errors.append("Supplier code can only contain letters, numbers, underscores, and hyphens")

    if not name:
        errors.append("Supplier name is required")
    elif len(name) > MAX_NAME_LEN:
        errors.append(f"Supplier name must be {MAX_NAME_LEN} characters or less")

    codes = {_s(s.code).lower() for s in existing}
    names = {_s(s.name).lower() for s in existing}
    if code and code.lower() in codes:
        errors.append("Supplier code already exists")
    if name and name.lower() in names:
        errors.append("Supplier name already exists")

    return errors


def add_supplier(suppliers: Sequence[TrackedSupplier], supplier: TrackedSupplier) -> List[TrackedSupplier]:
    """Raises ValidationError when the supplier is rejected."""
    candidate = TrackedSupplier(
        code=normalize_code(supplier.code),
        name=_s(supplier.name),
        is_prophecy_supplier=bool(supplier.is_prophecy_supplier),
    )
    errors = validate_supplier(candidate, suppliers)
    if errors:
        raise ValidationError(errors)
    return list(suppliers) + [candidate]


def remove_supplier(suppliers: Sequence[TrackedSupplier], index: int) -> List[TrackedSupplier]:
    out = list(suppliers)
    if 0 <= index < len(out):
        del out[index]
    return out


def update_supplier(suppliers: Sequence[TrackedSupplier], index: int, field: str, value: Any) -> List[TrackedSupplier]:
    if field not in EDITABLE_FIELDS:
        raise KeyError(field)
    out = list(suppliers)
    if not (0 <= index < len(out)):
        return out

    if field == "code":
        value = normalize_code(value)
    elif field == "name":
        value = "" if value is None else str(value)
    else:
        value = bool(value)
    out[index] = replace(out[index], **{field: value})
    return out

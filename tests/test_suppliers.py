from __future__ import annotations

import pytest

from surveyforge.errors import ValidationError
from surveyforge.models import TrackedSupplier
from surveyforge.suppliers import add_supplier, remove_supplier, update_supplier, validate_supplier

EXISTING = [TrackedSupplier(code="ACME", name="Acme Ltd")]


@pytest.mark.parametrize(
    "code, name, message",
    [
        ("", "Name", "Supplier code is required"),
        ("X" * 51, "Name", "Supplier code must be 50 characters or less"),
        ("BAD CODE", "Name", "Supplier code can only contain letters, numbers, underscores, and hyphens"),
        ("OK_1", "", "Supplier name is required"),
        ("OK_1", "N" * 256, "Supplier name must be 255 characters or less"),
        ("acme", "Other", "Supplier code already exists"),
        ("NEW", "ACME LTD", "Supplier name already exists"),
    ],
)
def test_validate_supplier_messages(code, name, message):
    assert message in validate_supplier(TrackedSupplier(code=code, name=name), EXISTING)


def test_valid_supplier_has_no_errors():
    assert validate_supplier(TrackedSupplier(code="New-Co_2", name="New Co"), EXISTING) == []


def test_add_supplier_uppercases_code():
    out = add_supplier(EXISTING, TrackedSupplier(code="beta", name=" Beta ", is_prophecy_supplier=True))
    assert out[-1] == TrackedSupplier(code="BETA", name="Beta", is_prophecy_supplier=True)
    assert len(EXISTING) == 1


def test_add_supplier_rejects_duplicates():
    with pytest.raises(ValidationError) as exc:
        add_supplier(EXISTING, TrackedSupplier(code="Acme", name="Acme Ltd"))
    assert exc.value.errors == ["Supplier code already exists", "Supplier name already exists"]
    assert str(exc.value) == "Supplier code already exists"


def test_remove_supplier_ignores_bad_index():
    assert remove_supplier(EXISTING, 0) == []
    assert remove_supplier(EXISTING, 5) == EXISTING


def test_update_supplier_fields():
    out = update_supplier(EXISTING, 0, "code", "acme2")
    assert out[0].code == "ACME2"
    out = update_supplier(out, 0, "is_prophecy_supplier", 1)
    assert out[0].is_prophecy_supplier is True
    out = update_supplier(out, 0, "name", None)
    assert out[0].name == ""
    assert EXISTING[0].code == "ACME"


def test_update_supplier_rejects_unknown_field():
    with pytest.raises(KeyError):
        update_supplier(EXISTING, 0, "colour", "red")

"""Smoke tests for the package's public surface."""

from __future__ import annotations

import sitescope


def test_import_sitescope() -> None:
    assert sitescope is not None


def test_sitescope_has_docstring() -> None:
    assert sitescope.__doc__ is not None


def test_version() -> None:
    assert sitescope.__version__ == "0.1.0"


def test_all_names_resolve() -> None:
    for name in sitescope.__all__:
        assert hasattr(sitescope, name), name


def test_convenience_functions_run() -> None:
    plan = sitescope.build_resource_plan(sitescope.ResourcePlanInput())
    result = sitescope.compute_valuation(sitescope.ValuationInput())
    assert len(plan.labor) == 8
    assert result.property_value.low <= result.property_value.high


def test_errors_share_a_base() -> None:
    assert issubclass(sitescope.TuningError, sitescope.SitescopeError)
    assert issubclass(sitescope.InputValidationError, sitescope.SitescopeError)

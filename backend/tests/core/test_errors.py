"""Tests for the error hierarchy — codes, statuses and the REST envelope."""

from app.core.errors import (
    AdminAuthError, CalculationInputError, DatabaseError, ErrorContext,
    MigrationDirectoryError, ResourceNotFoundError, RollbackUnavailableError,
    ToolkitError, UnknownSizeError, UserIdentityRequiredError,
)


def test_all_errors_share_the_base():
    for err in (
        AdminAuthError(), UserIdentityRequiredError(), MigrationDirectoryError("/x"),
        DatabaseError("down", "execute"), ResourceNotFoundError("Calculation", "1"),
    ):
        assert isinstance(err, ToolkitError)


def test_http_statuses():
    assert CalculationInputError("bad", "cost_price").http_status == 400
    assert UnknownSizeError("shoes", "US", "99").http_status == 400
    assert ResourceNotFoundError("Calculation", "1").http_status == 404
    assert AdminAuthError().http_status == 401
    assert RollbackUnavailableError("001.sql").http_status == 409
    assert DatabaseError("down", "execute").http_status == 503


def test_response_prefers_localized_message():
    err = CalculationInputError(
        "Cost price is required", "cost_price", "validation.required",
        ErrorContext(tool_slug="profit-margin", user_message="حقل سعر التكلفة مطلوب"),
    )
    body = err.to_response()["error"]
    assert body["message"] == "حقل سعر التكلفة مطلوب"
    assert body["field"] == "cost_price"
    assert body["error_key"] == "validation.required"
    assert body["context"]["tool_slug"] == "profit-margin"


def test_response_falls_back_to_message():
    body = ResourceNotFoundError("Calculation", "abc").to_response()["error"]
    assert body["message"] == "Calculation 'abc' not found"
    assert body["category"] == "resource_not_found"


def test_rollback_unavailable_carries_migration():
    err = RollbackUnavailableError("001.sql")
    assert err.context.migration == "001.sql"
    assert err.to_response()["error"]["context"]["migration"] == "001.sql"

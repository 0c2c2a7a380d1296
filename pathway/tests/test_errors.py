from pathway.errors import (
    ConfirmationRequired,
    EntitlementError,
    InvalidTransition,
    NotFoundError,
    RemoteError,
    ValidationError,
)


def test_error_status_codes() -> None:
    assert ValidationError("x").status_code == 400
    assert ConfirmationRequired("x").status_code == 400
    assert EntitlementError("x").status_code == 402
    assert NotFoundError("x").status_code == 404
    assert InvalidTransition("x").status_code == 409
    assert RemoteError("x").status_code == 502


def test_to_dict_uses_custom_title() -> None:
    error = EntitlementError("Limit hit", title="Workspace limit reached")

    assert error.to_dict() == {"title": "Workspace limit reached", "detail": "Limit hit"}
    assert EntitlementError("x").title == "Premium Feature"


def test_remote_error_keeps_operation() -> None:
    error = RemoteError("boom", operation="create_task")

    assert error.operation == "create_task"
    assert str(error) == "boom"

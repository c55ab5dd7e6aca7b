import pytest

from identity_gate.core.errors import ErrorKind, Operation, classify_provider_fault


@pytest.mark.parametrize("message, expected", [
    ("User already registered", ErrorKind.DUPLICATE_ACCOUNT),
    ("USER ALREADY REGISTERED!!", ErrorKind.DUPLICATE_ACCOUNT),
    ("Database error saving new user", ErrorKind.BACKEND_MISCONFIGURATION),
    ("function handle_new_user() trigger failed", ErrorKind.BACKEND_MISCONFIGURATION),
    ("Signups not allowed for this instance", ErrorKind.UNKNOWN_PROVIDER_FAULT),
    ("", ErrorKind.UNKNOWN_PROVIDER_FAULT),
    (None, ErrorKind.UNKNOWN_PROVIDER_FAULT),
])
def test_classify_register_faults(message, expected):
    assert classify_provider_fault(Operation.REGISTER, message) == expected


def test_register_rules_apply_in_priority_order():
    message = "User already registered (database error in trigger)"
    assert classify_provider_fault(Operation.REGISTER, message) == ErrorKind.DUPLICATE_ACCOUNT


@pytest.mark.parametrize("message, expected", [
    ("Invalid login credentials", ErrorKind.INVALID_CREDENTIALS),
    ("Email not confirmed", ErrorKind.UNCONFIRMED_ACCOUNT),
    ("Too many requests", ErrorKind.UNKNOWN_PROVIDER_FAULT),
])
def test_classify_login_faults(message, expected):
    assert classify_provider_fault(Operation.LOGIN, message) == expected


def test_rules_are_scoped_to_their_operation():
    assert (
        classify_provider_fault(Operation.REGISTER, "Invalid login credentials")
        == ErrorKind.UNKNOWN_PROVIDER_FAULT
    )
    assert (
        classify_provider_fault(Operation.LOGIN, "User already registered")
        == ErrorKind.UNKNOWN_PROVIDER_FAULT
    )
    assert (
        classify_provider_fault(Operation.RESET_PASSWORD, "Database error")
        == ErrorKind.UNKNOWN_PROVIDER_FAULT
    )


def test_typed_code_takes_precedence_over_message():
    kind = classify_provider_fault(
        Operation.LOGIN, "something unhelpful", code="email_not_confirmed"
    )
    assert kind == ErrorKind.UNCONFIRMED_ACCOUNT


def test_unknown_code_falls_back_to_message():
    kind = classify_provider_fault(
        Operation.REGISTER, "User already registered", code="some_new_code"
    )
    assert kind == ErrorKind.DUPLICATE_ACCOUNT


def test_non_string_code_is_ignored():
    kind = classify_provider_fault(Operation.LOGIN, "Invalid login credentials", code=500)
    assert kind == ErrorKind.INVALID_CREDENTIALS

    assert classify_provider_fault(Operation.REGISTER, None, code=422) == ErrorKind.UNKNOWN_PROVIDER_FAULT

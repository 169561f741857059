from types import SimpleNamespace

import pytest
from psycopg2 import errorcodes

from db.errors import raise_translated, translate_error
from utils.exceptions import (
    DuplicateEmployeeError,
    InvalidDepartmentError,
    InvalidJobError,
    InvalidManagerError,
    InvalidReferenceError,
    InvalidValueError,
    NullValueError,
    SalaryOutOfRangeError,
)


class FakePgError(Exception):
    """Looks like a psycopg2.Error as far as translate_error is concerned."""

    def __init__(self, pgcode, constraint=None, column=None, message="boom"):
        super().__init__(f"{message}\nDETAIL: something")
        self.pgcode = pgcode
        self.diag = SimpleNamespace(
            constraint_name=constraint,
            column_name=column,
            message_primary=message,
        )


def test_salary_trigger_error_keeps_database_message():
    exc = FakePgError("HR001", message="Salary must be between 4000.00 and 10000.00 for job IT_PROG")
    mapped = translate_error(exc)
    assert isinstance(mapped, SalaryOutOfRangeError)
    assert mapped.code == "HR001"
    assert mapped.message == "Salary must be between 4000.00 and 10000.00 for job IT_PROG"


def test_job_trigger_error():
    mapped = translate_error(FakePgError("HR002", message="Invalid job_id: INVAL_JOB"))
    assert isinstance(mapped, InvalidJobError)
    assert "INVAL_JOB" in mapped.message


@pytest.mark.parametrize("constraint, field", [
    ("uq_employees_email", "email"),
    ("uq_employees_phone", "phone_number"),
    ("something_else", None),
])
def test_unique_violation_names_the_field(constraint, field):
    mapped = translate_error(FakePgError(errorcodes.UNIQUE_VIOLATION, constraint))
    assert isinstance(mapped, DuplicateEmployeeError)
    assert mapped.field == field
    assert mapped.message.startswith("The employee is already found")


@pytest.mark.parametrize("constraint, expected", [
    ("fk_employees_job", InvalidJobError),
    ("fk_employees_department", InvalidDepartmentError),
    ("fk_employees_manager", InvalidManagerError),
    ("transfer_history_new_department_fkey", InvalidDepartmentError),
    ("transfer_history_new_manager_fkey", InvalidManagerError),
])
def test_foreign_key_violation_by_constraint(constraint, expected):
    mapped = translate_error(FakePgError(errorcodes.FOREIGN_KEY_VIOLATION, constraint))
    assert type(mapped) is expected
    assert mapped.message.startswith("INVALID DATA")


def test_unknown_foreign_key_is_generic_reference_error():
    mapped = translate_error(FakePgError(errorcodes.FOREIGN_KEY_VIOLATION, "fk_unknown"))
    assert type(mapped) is InvalidReferenceError
    assert mapped.code == "HR006"


def test_department_and_manager_errors_share_the_reference_code():
    assert InvalidDepartmentError("x").code == InvalidManagerError("x").code == "HR006"


def test_self_manager_check():
    mapped = translate_error(FakePgError(errorcodes.CHECK_VIOLATION, "ck_employees_not_own_manager"))
    assert isinstance(mapped, InvalidManagerError)


def test_other_check_is_invalid_value():
    mapped = translate_error(FakePgError(errorcodes.CHECK_VIOLATION, "ck_employees_commission"))
    assert isinstance(mapped, InvalidValueError)
    assert "ck_employees_commission" in mapped.message


def test_not_null_names_the_column():
    mapped = translate_error(FakePgError(errorcodes.NOT_NULL_VIOLATION, column="salary"))
    assert isinstance(mapped, NullValueError)
    assert "salary" in mapped.message


def test_bad_input_is_invalid_value():
    exc = FakePgError(errorcodes.INVALID_DATETIME_FORMAT, message='invalid input syntax for type date: "x"')
    mapped = translate_error(exc)
    assert isinstance(mapped, InvalidValueError)
    assert mapped.message == 'invalid input syntax for type date: "x"'


def test_unrelated_errors_pass_through():
    plain = RuntimeError("pool exhausted")
    assert translate_error(plain) is plain

    deadlock = FakePgError(errorcodes.DEADLOCK_DETECTED)
    assert translate_error(deadlock) is deadlock


def test_raise_translated_chains_the_database_error():
    exc = FakePgError("HR001", message="out of band")
    with pytest.raises(SalaryOutOfRangeError) as info:
        raise_translated(exc)
    assert info.value.__cause__ is exc


def test_raise_translated_reraises_unknown_errors_as_is():
    exc = RuntimeError("connection lost")
    with pytest.raises(RuntimeError) as info:
        raise_translated(exc)
    assert info.value is exc

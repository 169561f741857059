"""
db/errors.py
------------
Maps PostgreSQL failures (constraint violations, trigger exceptions, bad
input) onto the domain exceptions in ``utils.exceptions``.

The audit triggers raise with their own SQLSTATE codes; everything else is
recognized through the standard codes in ``psycopg2.errorcodes`` and the
constraint names declared in ``db/init_db.py``.
"""

from psycopg2 import errorcodes

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

# SQLSTATE codes raised by the audit triggers
SALARY_OUT_OF_RANGE = "HR001"
INVALID_JOB = "HR002"

_UNIQUE_FIELDS = {
    "uq_employees_email": "email",
    "uq_employees_phone": "phone_number",
    "employees_pkey": "employee_id",
}

_FOREIGN_KEYS = {
    "fk_employees_job": InvalidJobError,
    "fk_employees_department": InvalidDepartmentError,
    "fk_employees_manager": InvalidManagerError,
    "transfer_history_old_department_fkey": InvalidDepartmentError,
    "transfer_history_new_department_fkey": InvalidDepartmentError,
    "transfer_history_old_manager_fkey": InvalidManagerError,
    "transfer_history_new_manager_fkey": InvalidManagerError,
}

_BAD_INPUT = {
    errorcodes.INVALID_TEXT_REPRESENTATION,
    errorcodes.INVALID_DATETIME_FORMAT,
    errorcodes.DATETIME_FIELD_OVERFLOW,
    errorcodes.NUMERIC_VALUE_OUT_OF_RANGE,
    errorcodes.STRING_DATA_RIGHT_TRUNCATION,
}


def _primary_message(exc) -> str:
    diag = getattr(exc, "diag", None)
    message = getattr(diag, "message_primary", None) if diag is not None else None
    return message or str(exc).strip().splitlines()[0]


def translate_error(exc: Exception) -> Exception:
    """
    Convert a psycopg2 error into the matching domain exception.

    Args:
        exc: The exception caught around a database call.

    Returns:
        A ``HRError`` subclass instance, or ``exc`` itself when the failure
        is not an expected HR rule violation.
    """
    code = getattr(exc, "pgcode", None)
    if code is None:
        return exc

    diag = getattr(exc, "diag", None)
    constraint = getattr(diag, "constraint_name", None) if diag is not None else None

    if code == SALARY_OUT_OF_RANGE:
        return SalaryOutOfRangeError(_primary_message(exc))
    if code == INVALID_JOB:
        return InvalidJobError(_primary_message(exc))

    if code == errorcodes.UNIQUE_VIOLATION:
        return DuplicateEmployeeError(_UNIQUE_FIELDS.get(constraint))

    if code == errorcodes.FOREIGN_KEY_VIOLATION:
        error_cls = _FOREIGN_KEYS.get(constraint, InvalidReferenceError)
        if error_cls is InvalidJobError:
            return InvalidJobError("INVALID DATA: Check the job id you entered.")
        if error_cls is InvalidDepartmentError:
            return InvalidDepartmentError("INVALID DATA: Check the department id you entered.")
        if error_cls is InvalidManagerError:
            return InvalidManagerError("INVALID DATA: Check the manager id you entered.")
        return InvalidReferenceError(_primary_message(exc))

    if code == errorcodes.CHECK_VIOLATION:
        if constraint == "ck_employees_not_own_manager":
            return InvalidManagerError("An employee cannot be their own manager.")
        return InvalidValueError(f"Value rejected by rule {constraint or 'check'}.")

    if code == errorcodes.NOT_NULL_VIOLATION:
        column = getattr(diag, "column_name", None) if diag is not None else None
        return NullValueError(f"Cannot set column {column or 'value'} to NULL.")

    if code in _BAD_INPUT:
        return InvalidValueError(_primary_message(exc))

    return exc


def raise_translated(exc: Exception):
    """Re-raise `exc` as its domain exception, chaining the database error."""
    mapped = translate_error(exc)
    if mapped is exc:
        raise exc
    raise mapped from exc

"""
services/employee_service.py
----------------------------
Business logic for managing employee records: hiring, single-column
updates through an allow-list, transfers, deletion and name lookup.
Orchestrates between the AI parser and the EmployeeRepository.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from ai.gemini_parser import parse_employee
from models.audit import Transfer
from models.employee import Employee
from repositories.employee_repo import EmployeeRepository
from utils.exceptions import (
    ColumnNotAllowedError,
    EmployeeNotFoundError,
    InvalidValueError,
    NullValueError,
)
from utils.logger import get_logger

logger = get_logger(__name__)

# Columns an operator may change with update_employee
ALLOWED_UPDATE_COLUMNS = (
    "FIRST_NAME", "LAST_NAME", "EMAIL", "PHONE_NUMBER", "HIRE_DATE",
    "JOB_ID", "SALARY", "COMMISSION_PCT", "MANAGER_ID", "DEPARTMENT_ID",
)

_REQUIRED_TEXT_FIELDS = ("first_name", "last_name", "email", "phone_number", "job_id")


def _to_text(value) -> str:
    return str(value).strip()


def _to_email(value) -> str:
    return _to_text(value).lower()


def _to_job_id(value) -> str:
    return _to_text(value).upper()


def _to_date(value) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidValueError(f"The value you entered ({value}) is not a date (YYYY-MM-DD).") from None


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidValueError(f"The value you entered ({value}) is not a number.") from None
    if not result.is_finite():
        raise InvalidValueError(f"The value you entered ({value}) is not a number.")
    return result


def _to_int(value) -> int:
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        raise InvalidValueError(f"The value you entered ({value}) is not a whole number.") from None


_CONVERTERS = {
    "first_name": _to_text,
    "last_name": _to_text,
    "email": _to_email,
    "phone_number": _to_text,
    "hire_date": _to_date,
    "job_id": _to_job_id,
    "salary": _to_decimal,
    "commission_pct": _to_decimal,
    "manager_id": _to_int,
    "department_id": _to_int,
}


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class EmployeeService:
    """
    Handles all business logic related to employee records.

    The database enforces uniqueness, references and the job salary bands
    (and writes the audit rows); this layer validates the request shape
    before anything reaches it.
    """

    def __init__(self):
        self.repo = EmployeeRepository()

    # ── CREATE ────────────────────────────────────────────

    def add_employee(self, first_name: str, last_name: str, email: str,
                     phone_number: str, hire_date, job_id: str, salary,
                     commission_pct=None, manager_id=None, department_id=None,
                     actor: Optional[str] = None) -> Employee:
        """
        Hire a new employee.

        Args:
            hire_date: A date or an ISO ``YYYY-MM-DD`` string.
            salary: Number or numeric string; must fit the job's salary band.
            commission_pct: Optional rate between 0 and 1.
            manager_id: Optional id of an existing employee.
            department_id: Optional id of an existing department.
            actor: Operator recorded in the audit trail.

        Returns:
            The stored Employee with its new id (the first id is 100).

        Raises:
            NullValueError: A required field is blank.
            InvalidValueError: A field has the wrong type.
            HRError: Any rule enforced by the database (duplicate, bad job,
                bad department/manager, salary out of range).
        """
        fields = {
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "phone_number": phone_number,
            "job_id": job_id,
        }
        for name in _REQUIRED_TEXT_FIELDS:
            if _is_blank(fields[name]):
                raise NullValueError(f"Column {name} is required.")
        if _is_blank(hire_date):
            raise NullValueError("Column hire_date is required.")
        if _is_blank(salary):
            raise NullValueError("Column salary is required.")

        employee = Employee(
            first_name=_to_text(first_name),
            last_name=_to_text(last_name),
            email=_to_email(email),
            phone_number=_to_text(phone_number),
            hire_date=_to_date(hire_date),
            job_id=_to_job_id(job_id),
            salary=_to_decimal(salary),
            commission_pct=None if _is_blank(commission_pct) else _to_decimal(commission_pct),
            manager_id=None if _is_blank(manager_id) else _to_int(manager_id),
            department_id=None if _is_blank(department_id) else _to_int(department_id),
        )
        return self.repo.add(employee, actor)

    def add_from_text(self, text: str, actor: Optional[str] = None) -> dict:
        """
        Parse a free-text hiring note and create the employee.

        Returns:
            ``{"success": True, "employee": Employee}`` or
            ``{"success": False, "question": str}`` when the note is unclear.

        Raises:
            HRError: The parsed record breaks an HR rule.
        """
        parsed = parse_employee(text)

        if "error" in parsed:
            return {"success": False, "question": parsed.get("question", "Please try again.")}

        try:
            employee = self.add_employee(
                first_name=parsed["first_name"],
                last_name=parsed["last_name"],
                email=parsed["email"],
                phone_number=parsed["phone_number"],
                hire_date=parsed.get("hire_date") or date.today(),
                job_id=parsed["job_id"],
                salary=parsed["salary"],
                commission_pct=parsed.get("commission_pct"),
                manager_id=parsed.get("manager_id"),
                department_id=parsed.get("department_id"),
                actor=actor,
            )
        except KeyError as e:
            logger.error(f"Parsed employee is missing {e}, parsed: {parsed}")
            return {"success": False, "question": f"The note is missing {e.args[0]}. Please include it."}

        return {"success": True, "employee": employee}

    # ── READ ──────────────────────────────────────────────

    def get_employee(self, employee_id: int) -> Employee:
        employee = self.repo.get_by_id(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    def get_employee_fullname(self, employee_id: int) -> Optional[str]:
        """Return "First Last", or None when the employee does not exist."""
        full_name = self.repo.get_full_name(employee_id)
        if full_name is None:
            logger.warning(f"Employee not found for ID: {employee_id}")
        return full_name

    def list_employees(self, job_id: Optional[str] = None,
                       department_id: Optional[int] = None) -> list[Employee]:
        return self.repo.list_all(_to_job_id(job_id) if job_id else None, department_id)

    # ── UPDATE ────────────────────────────────────────────

    def update_employee(self, employee_id: int, column_name: str, new_value,
                        actor: Optional[str] = None) -> Employee:
        """
        Change one column of an employee.

        Args:
            employee_id: The employee to change.
            column_name: Case-insensitive name from ALLOWED_UPDATE_COLUMNS.
            new_value: The new value as text (converted to the column type).
            actor: Operator recorded in the audit trail.

        Returns:
            The Employee as stored after the update.

        Raises:
            ColumnNotAllowedError: The column is not on the allow-list.
            NullValueError: The value is empty or blank.
            InvalidValueError: The value does not match the column type.
            EmployeeNotFoundError: No employee has this id.
            HRError: A database rule rejected the value.
        """
        column = (column_name or "").strip()
        if column.upper() not in ALLOWED_UPDATE_COLUMNS:
            raise ColumnNotAllowedError(column_name)

        if _is_blank(new_value):
            raise NullValueError(f"Cannot update column {column_name} to NULL.")

        column = column.lower()
        value = _CONVERTERS[column](new_value)

        updated = self.repo.update_column(employee_id, column, value, actor)
        if updated is None:
            raise EmployeeNotFoundError(employee_id)
        return updated

    def transfer_employee(self, employee_id: int, new_department_id: Optional[int],
                          new_manager_id: Optional[int] = None,
                          actor: Optional[str] = None) -> Transfer:
        """
        Move an employee to another department and/or manager.

        The previous department and manager are taken from the stored row and
        written with the new ones to the transfer history.

        Raises:
            EmployeeNotFoundError: No employee has this id.
            InvalidValueError: The employee is already there.
            HRError: Unknown department or manager.
        """
        transfer = self.repo.transfer(employee_id, new_department_id, new_manager_id, actor)
        if transfer is None:
            raise EmployeeNotFoundError(employee_id)
        return transfer

    def raise_department_salaries(self, department_id: int, amount,
                                  actor: Optional[str] = None) -> int:
        """
        Add `amount` (may be negative) to every salary in a department.

        All rows change or none do: a single salary leaving its job band
        rejects the batch.

        Returns:
            Number of employees updated.
        """
        delta = _to_decimal(amount)
        if delta == 0:
            raise InvalidValueError("The adjustment amount must not be zero.")
        return self.repo.adjust_department_salaries(department_id, delta, actor)

    # ── DELETE ────────────────────────────────────────────

    def delete_employee(self, employee_id: int, actor: Optional[str] = None) -> Employee:
        """
        Delete an employee; the deletion log is written by the database.

        Returns:
            The removed Employee.

        Raises:
            EmployeeNotFoundError: No employee has this id.
        """
        deleted = self.repo.delete(employee_id, actor)
        if deleted is None:
            raise EmployeeNotFoundError(employee_id)
        return deleted



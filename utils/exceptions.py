"""
utils/exceptions.py
-------------------
Domain exceptions raised by repositories and services.

Each exception carries a stable `code` so that callers (the bot handlers,
tests, log readers) can tell the failure kinds apart without parsing
messages.
"""


class HRError(Exception):
    """Base class for every expected HR record-keeping failure."""

    code = "HR000"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SalaryOutOfRangeError(HRError):
    code = "HR001"


class InvalidJobError(HRError):
    code = "HR002"


class NullValueError(HRError):
    code = "HR003"


class EmployeeNotFoundError(HRError):
    code = "HR004"

    def __init__(self, employee_id=None):
        super().__init__("The employee isn't found.")
        self.employee_id = employee_id


class DuplicateEmployeeError(HRError):
    """Email or phone number already belongs to another employee."""

    code = "HR005"

    def __init__(self, field: str | None = None):
        detail = f" (duplicate {field})" if field else ""
        super().__init__(f"The employee is already found{detail}.")
        self.field = field


class InvalidReferenceError(HRError):
    code = "HR006"


class InvalidDepartmentError(InvalidReferenceError):
    pass


class InvalidManagerError(InvalidReferenceError):
    pass


class InvalidValueError(HRError):
    code = "HR007"


class ColumnNotAllowedError(HRError):
    code = "HR011"

    def __init__(self, column: str):
        super().__init__(f"Column {column} is not allowed for update")
        self.column = column

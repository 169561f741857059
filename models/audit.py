"""
models/audit.py
---------------
Audit records written by the database triggers and the transfer procedure.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class SalaryChange:
    """
    One salary_history row.

    `old_salary` is None for the row written when the employee is hired.
    """
    employee_id: int
    old_salary: Optional[Decimal]
    new_salary: Decimal
    changed_by: Optional[str] = None
    changed_at: Optional[datetime] = None
    id: Optional[int] = None

    def is_hire(self) -> bool:
        return self.old_salary is None

    def __str__(self) -> str:
        if self.is_hire():
            return f"hired at {self.new_salary:.2f}"
        return f"{self.old_salary:.2f} → {self.new_salary:.2f}"


@dataclass
class DeletionLog:
    """Snapshot of an employee taken just before the row was deleted."""
    employee_id: int
    full_name: Optional[str] = None
    job_id: Optional[str] = None
    department_id: Optional[int] = None
    salary: Optional[Decimal] = None
    deleted_by: Optional[str] = None
    deleted_at: Optional[datetime] = None
    id: Optional[int] = None


@dataclass
class Transfer:
    """A department and/or manager move."""
    employee_id: int
    old_department: Optional[int]
    new_department: Optional[int]
    old_manager: Optional[int] = None
    new_manager: Optional[int] = None
    transferred_by: Optional[str] = None
    transferred_at: Optional[datetime] = None
    id: Optional[int] = None

    def __str__(self) -> str:
        return (
            f"dept {self.old_department or '-'} → {self.new_department or '-'}, "
            f"manager {self.old_manager or '-'} → {self.new_manager or '-'}"
        )

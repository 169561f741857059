"""
models/employee.py
------------------
Domain model for employee records.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta


@dataclass
class Employee:
    """
    Represents a single employee row.

    Attributes:
        first_name: Given name.
        last_name: Family name.
        email: Unique work email (stored lower-case).
        phone_number: Unique phone number.
        hire_date: First working day.
        job_id: Job code, must exist in the jobs catalogue.
        salary: Monthly salary; must sit inside the job's salary band.
        commission_pct: Optional commission rate between 0 and 1.
        manager_id: Optional employee_id of the direct manager.
        department_id: Optional department the employee belongs to.
        id: Database primary key (None for new records).
    """
    first_name: str
    last_name: str
    email: str
    phone_number: str
    hire_date: date
    job_id: str
    salary: Decimal
    commission_pct: Optional[Decimal] = None
    manager_id: Optional[int] = None
    department_id: Optional[int] = None
    id: Optional[int] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def tenure(self, on: Optional[date] = None) -> relativedelta:
        """Time in service between the hire date and `on` (default: today)."""
        return relativedelta(on or date.today(), self.hire_date)

    def __str__(self) -> str:
        dept = self.department_id if self.department_id is not None else "-"
        return f"#{self.id} {self.full_name} | {self.job_id} | {self.salary:.2f} | dept {dept}"

"""
models/organization.py
----------------------
Reference data: jobs (with their salary bands) and departments.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class Job:
    """A job from the catalogue and the salary band allowed for it."""
    job_id: str
    job_title: str
    min_salary: Optional[Decimal] = None
    max_salary: Optional[Decimal] = None

    def contains(self, salary: Decimal) -> bool:
        """True if `salary` is inside the band (an open bound accepts anything)."""
        if self.min_salary is not None and salary < self.min_salary:
            return False
        if self.max_salary is not None and salary > self.max_salary:
            return False
        return True

    def __str__(self) -> str:
        low = f"{self.min_salary:.0f}" if self.min_salary is not None else "?"
        high = f"{self.max_salary:.0f}" if self.max_salary is not None else "?"
        return f"{self.job_id} - {self.job_title} ({low}-{high})"


@dataclass
class Department:
    department_id: int
    department_name: str
    location: Optional[str] = None

    def __str__(self) -> str:
        where = f" ({self.location})" if self.location else ""
        return f"{self.department_id} - {self.department_name}{where}"

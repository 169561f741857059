from datetime import date
from decimal import Decimal

from models.audit import DeletionLog, SalaryChange, Transfer
from models.organization import Department, Job


def test_full_name_and_str(make_employee):
    employee = make_employee()
    assert employee.full_name == "John Doe"
    assert str(employee) == "#100 John Doe | IT_PROG | 5000.00 | dept 10"
    assert str(make_employee(department_id=None)).endswith("dept -")


def test_tenure(make_employee):
    tenure = make_employee(hire_date=date(2025, 4, 24)).tenure(on=date(2026, 10, 18))
    assert (tenure.years, tenure.months) == (1, 5)


def test_job_band():
    job = Job("IT_PROG", "Programmer", Decimal("4000"), Decimal("10000"))
    assert job.contains(Decimal("4000"))
    assert job.contains(Decimal("10000"))
    assert not job.contains(Decimal("15000"))
    assert not job.contains(Decimal("3999.99"))
    assert str(job) == "IT_PROG - Programmer (4000-10000)"


def test_open_job_band():
    job = Job("AD_PRES", "President", None, None)
    assert job.contains(Decimal("1000000"))
    assert str(job) == "AD_PRES - President (?-?)"


def test_department_str():
    assert str(Department(10, "Administration", "Seattle")) == "10 - Administration (Seattle)"
    assert str(Department(20, "Marketing")) == "20 - Marketing"


def test_salary_change():
    hire = SalaryChange(employee_id=100, old_salary=None, new_salary=Decimal("5000"))
    raise_ = SalaryChange(employee_id=100, old_salary=Decimal("5000"), new_salary=Decimal("6000"))
    assert hire.is_hire()
    assert not raise_.is_hire()
    assert str(hire) == "hired at 5000.00"
    assert str(raise_) == "5000.00 → 6000.00"


def test_transfer_str():
    move = Transfer(employee_id=100, old_department=10, new_department=20, new_manager=101)
    assert str(move) == "dept 10 → 20, manager - → 101"


def test_deletion_log_defaults():
    log = DeletionLog(employee_id=100)
    assert log.full_name is None and log.deleted_by is None

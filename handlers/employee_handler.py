"""
handlers/employee_handler.py
----------------------------
Handles employee record commands: hiring (structured or free text), lookup,
single-column updates, transfers, removal and bulk salary adjustment.
Delegates all logic to EmployeeService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from config import CURRENCY
from models.employee import Employee
from security.auth import actor_for, authorized_only
from security.rate_limiter import rate_limited
from services.employee_service import EmployeeService
from utils.exceptions import HRError
from utils.logger import get_logger

logger = get_logger(__name__)
employee_service = EmployeeService()

_ADD_FIELDS = (
    "first_name", "last_name", "email", "phone_number", "hire_date",
    "job_id", "salary", "commission_pct", "manager_id", "department_id",
)
_REQUIRED_ADD_FIELDS = ("first_name", "last_name", "email", "phone_number", "job_id", "salary")


def parse_fields(args: list[str]) -> dict[str, str]:
    """
    Turn ``key=value`` command arguments into a dict.

    Keys are lower-cased. A token without ``=`` continues the previous value,
    so ``last_name=van der Berg`` survives Telegram's whitespace splitting.

    Raises:
        ValueError: If the first token is not ``key=value``.
    """
    fields: dict[str, str] = {}
    key = None
    for token in args:
        if "=" in token:
            key, _, value = token.partition("=")
            key = key.strip().lower()
            fields[key] = value
        elif key is None:
            raise ValueError(f"Expected key=value, got '{token}'")
        else:
            fields[key] = f"{fields[key]} {token}"
    return fields


def format_employee(e: Employee) -> str:
    tenure = e.tenure()
    lines = [
        f"👤 #{e.id} {e.full_name}",
        f"  📧 {e.email} | 📞 {e.phone_number}",
        f"  💼 {e.job_id} | 💶 {e.salary:.2f} {CURRENCY}",
        f"  🏢 Department: {e.department_id if e.department_id is not None else '-'}"
        f" | 👔 Manager: {e.manager_id if e.manager_id is not None else '-'}",
        f"  📅 Hired {e.hire_date} ({tenure.years}y {tenure.months}m)",
    ]
    if e.commission_pct is not None:
        lines.append(f"  🎯 Commission: {e.commission_pct * 100:.0f}%")
    return "\n".join(lines)


async def _reply_hr_error(update: Update, error: HRError) -> None:
    logger.info(f"Rejected request from {update.effective_user.id}: [{error.code}] {error.message}")
    await update.message.reply_text(f"⚠️ {error.message}")


async def _int_arg(update: Update, value: str, what: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        await update.message.reply_text(f"⚠️ {what} must be a whole number.")
        return None


@authorized_only
@rate_limited
async def handle_text_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle any plain text message (not a command).
    Sends the note to Gemini for parsing and files the new hire.
    """
    user = update.effective_user
    text = update.message.text.strip()

    if not text:
        return

    try:
        result = employee_service.add_from_text(text, actor=actor_for(user))
    except HRError as e:
        await _reply_hr_error(update, e)
        return

    if result.get("success"):
        employee = result["employee"]
        await update.message.reply_text(
            f"✅ Employee inserted successfully with ID: {employee.id}\n\n{format_employee(employee)}"
        )
    else:
        await update.message.reply_text(f"🤔 {result.get('question', 'Please try again.')}")


@authorized_only
@rate_limited
async def add_employee_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /add_employee key=value ... - hire without going through the AI.

    Example:
        /add_employee first_name=John last_name=Doe email=john.doe@example.com
            phone_number=1234567890 job_id=IT_PROG salary=5000 department_id=10
    """
    user = update.effective_user

    try:
        fields = parse_fields(context.args or [])
    except ValueError:
        fields = {}

    missing = [f for f in _REQUIRED_ADD_FIELDS if not fields.get(f)]
    if missing:
        await update.message.reply_text(
            "➕ Add employee\n\n"
            "Format: /add_employee first_name=.. last_name=.. email=.. phone_number=.. "
            "job_id=.. salary=.. [hire_date=YYYY-MM-DD] [commission_pct=..] "
            "[manager_id=..] [department_id=..]\n\n"
            f"Missing: {', '.join(missing)}"
        )
        return

    unknown = sorted(set(fields) - set(_ADD_FIELDS))
    if unknown:
        await update.message.reply_text(f"⚠️ Unknown field(s): {', '.join(unknown)}")
        return

    try:
        employee = employee_service.add_employee(
            first_name=fields["first_name"],
            last_name=fields["last_name"],
            email=fields["email"],
            phone_number=fields["phone_number"],
            hire_date=fields.get("hire_date") or update.message.date.date(),
            job_id=fields["job_id"],
            salary=fields["salary"],
            commission_pct=fields.get("commission_pct"),
            manager_id=fields.get("manager_id"),
            department_id=fields.get("department_id"),
            actor=actor_for(user),
        )
    except HRError as e:
        await _reply_hr_error(update, e)
        return

    await update.message.reply_text(
        f"✅ Employee inserted successfully with ID: {employee.id}\n\n{format_employee(employee)}"
    )


@authorized_only
@rate_limited
async def employee_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /employee <id> - show one employee record."""
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /employee <id>\nExample: /employee 100")
        return

    employee_id = await _int_arg(update, context.args[0], "The employee id")
    if employee_id is None:
        return

    try:
        employee = employee_service.get_employee(employee_id)
    except HRError as e:
        await _reply_hr_error(update, e)
        return

    await update.message.reply_text(format_employee(employee))


@authorized_only
@rate_limited
async def employees_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /employees [job] [dept] - list employees.

    Usage:
        /employees              → everyone
        /employees IT_PROG      → one job
        /employees IT_PROG 10   → one job in one department
        /employees 10           → one department
    """
    job_id, department_id = None, None
    for arg in context.args or []:
        if arg.isdigit():
            department_id = int(arg)
        else:
            job_id = arg

    employees = employee_service.list_employees(job_id=job_id, department_id=department_id)
    if not employees:
        await update.message.reply_text("📭 No employees match.")
        return

    lines = [f"👥 {len(employees)} employee(s):\n"]
    lines.extend(f"  • {e}" for e in employees[:50])
    if len(employees) > 50:
        lines.append(f"\n… and {len(employees) - 50} more. Use /export_csv for the full list.")
    await update.message.reply_text("\n".join(lines))


@authorized_only
@rate_limited
async def fullname_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /fullname <id> - show an employee's full name."""
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /fullname <id>")
        return

    employee_id = await _int_arg(update, context.args[0], "The employee id")
    if employee_id is None:
        return

    full_name = employee_service.get_employee_fullname(employee_id)
    if full_name is None:
        await update.message.reply_text(f"⚠️ Employee not found for ID: {employee_id}")
        return
    await update.message.reply_text(f"Full Name: {full_name}")


@authorized_only
@rate_limited
async def update_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /update <id> <column> <value> - change one column of an employee.

    Examples:
        /update 100 salary 6000
        /update 100 last_name van der Berg
    """
    user = update.effective_user

    if not context.args or len(context.args) < 2:
        await update.message.reply_text(
            "✏️ Update employee\n\n"
            "Format: /update <id> <column> <value>\n"
            "Example: /update 100 salary 6000"
        )
        return

    employee_id = await _int_arg(update, context.args[0], "The employee id")
    if employee_id is None:
        return

    column = context.args[1]
    value = " ".join(context.args[2:])

    try:
        employee = employee_service.update_employee(employee_id, column, value, actor=actor_for(user))
    except HRError as e:
        await _reply_hr_error(update, e)
        return

    await update.message.reply_text(f"✏️ Data updated successfully.\n\n{format_employee(employee)}")


@authorized_only
@rate_limited
async def transfer_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /transfer <id> <dept> [manager] - move an employee.

    Use "-" as department or manager to clear it.
    """
    user = update.effective_user

    if not context.args or len(context.args) < 2:
        await update.message.reply_text(
            "🔀 Transfer employee\n\n"
            "Format: /transfer <id> <dept> [manager]\n"
            "Example: /transfer 100 20 101"
        )
        return

    employee_id = await _int_arg(update, context.args[0], "The employee id")
    if employee_id is None:
        return

    targets = []
    for raw, what in ((context.args[1], "The department"),
                      (context.args[2] if len(context.args) > 2 else "-", "The manager")):
        if raw == "-":
            targets.append(None)
            continue
        value = await _int_arg(update, raw, what)
        if value is None:
            return
        targets.append(value)
    new_department, new_manager = targets

    try:
        transfer = employee_service.transfer_employee(
            employee_id, new_department, new_manager, actor=actor_for(user)
        )
    except HRError as e:
        await _reply_hr_error(update, e)
        return

    await update.message.reply_text(f"🔀 The employee transferred successfully.\n  {transfer}")


@authorized_only
@rate_limited
async def delete_employee_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /delete_employee <id> - remove an employee (logged)."""
    user = update.effective_user

    if not context.args:
        await update.message.reply_text("⚠️ Usage: /delete_employee <id>")
        return

    employee_id = await _int_arg(update, context.args[0], "The employee id")
    if employee_id is None:
        return

    try:
        employee = employee_service.delete_employee(employee_id, actor=actor_for(user))
    except HRError as e:
        await _reply_hr_error(update, e)
        return

    await update.message.reply_text(f"🗑️ Employee deleted successfully: #{employee.id} {employee.full_name}")


@authorized_only
@rate_limited
async def raise_dept_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /raise_dept <dept> <amount> - add `amount` to every salary in a department.
    A negative amount lowers salaries. Either everyone changes or nobody does.
    """
    user = update.effective_user

    if not context.args or len(context.args) < 2:
        await update.message.reply_text("⚠️ Usage: /raise_dept <dept> <amount>\nExample: /raise_dept 10 100")
        return

    department_id = await _int_arg(update, context.args[0], "The department id")
    if department_id is None:
        return

    try:
        updated = employee_service.raise_department_salaries(
            department_id, context.args[1], actor=actor_for(user)
        )
    except HRError as e:
        await _reply_hr_error(update, e)
        return

    if not updated:
        await update.message.reply_text(f"📭 No employees in department {department_id}.")
        return
    await update.message.reply_text(
        f"💶 Salary adjusted by {context.args[1]} {CURRENCY} for {updated} employee(s) in department {department_id}."
    )

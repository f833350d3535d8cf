# Load tất cả model vào namespace payroll.models
from .mixins import TimeStampedModel

from .hr import Employee
from .catalog import WorkType, WorkItem, OvertimeConfig
from .work_record import WorkRecord
from .salary import MonthlySalary, MonthlySalaryWorkRecord
from .audit import AuditLog

__all__ = [
    "TimeStampedModel",
    "Employee",
    "WorkType", "WorkItem", "OvertimeConfig",
    "WorkRecord",
    "MonthlySalary", "MonthlySalaryWorkRecord",
    "AuditLog",
]

from decimal import Decimal

from django.db import models
from django.db.models import Q, CheckConstraint, UniqueConstraint

from .mixins import TimeStampedModel
from .hr import Employee
from .work_record import WorkRecord


class MonthlySalary(TimeStampedModel):
    class Status(models.TextChoices):
        DRAFT = "draft", "Tạm tính"
        PAID = "paid", "Thanh toán"

    employee = models.ForeignKey(Employee, on_delete=models.PROTECT, related_name="monthly_salaries")
    year = models.PositiveSmallIntegerField()
    month = models.PositiveSmallIntegerField()
    total_work_days = models.PositiveIntegerField(default=0)
    total_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    allowances = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    status = models.CharField(max_length=8, choices=Status.choices, default=Status.DRAFT, db_index=True)
    calculated_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    # Snapshot các work record lúc tính (không suy lại sau này)
    work_records = models.ManyToManyField(
        WorkRecord, through="MonthlySalaryWorkRecord", related_name="monthly_salaries", blank=True
    )

    class Meta:
        ordering = ["-year", "-month", "employee_id"]
        db_table = "MonthlySalary"
        # Không UNIQUE(employee, year, month): nhiều draft có thể cùng tồn tại, gộp lại lúc thanh toán
        indexes = [
            models.Index(fields=["employee", "year", "month", "status"]),
        ]
        constraints = [
            CheckConstraint(condition=Q(month__gte=1) & Q(month__lte=12), name="monthly_salary_month_range"),
            CheckConstraint(condition=Q(allowances__gte=0), name="monthly_salary_allowances_non_negative"),
        ]

    def __str__(self):
        return f"MS {self.employee_id} {self.month:02d}/{self.year} {self.total_amount} [{self.get_status_display()}]"

    @property
    def period(self) -> str:
        return f"{self.year}-{self.month:02d}"


class MonthlySalaryWorkRecord(models.Model):
    monthly_salary = models.ForeignKey(MonthlySalary, on_delete=models.CASCADE, related_name="record_links")
    work_record = models.ForeignKey(WorkRecord, on_delete=models.CASCADE, related_name="salary_links")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "MonthlySalaryWorkRecord"
        constraints = [
            UniqueConstraint(fields=["monthly_salary", "work_record"], name="uniq_salary_work_record"),
        ]

from decimal import Decimal

from django.db import models
from django.db.models import Q, CheckConstraint

from .mixins import TimeStampedModel
from .hr import Employee
from .catalog import WorkType, WorkItem


class WorkRecord(TimeStampedModel):
    class Status(models.TextChoices):
        NEW = "new", "Mới"
        PAID = "paid", "Đã thanh toán"

    employee = models.ForeignKey(Employee, on_delete=models.PROTECT, related_name="work_records")
    work_date = models.DateField(db_index=True)
    work_type = models.ForeignKey(WorkType, on_delete=models.PROTECT, related_name="work_records")
    work_item = models.ForeignKey(WorkItem, null=True, blank=True, on_delete=models.PROTECT, related_name="work_records")

    quantity = models.DecimalField(max_digits=12, decimal_places=2)
    # Snapshot lúc tạo/sửa, không join lại catalog
    unit_price = models.DecimalField(max_digits=15, decimal_places=2)
    total_amount = models.DecimalField(max_digits=15, decimal_places=2)

    is_overtime = models.BooleanField(default=False)
    overtime_quantity = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    overtime_hours = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)

    status = models.CharField(max_length=8, choices=Status.choices, default=Status.NEW, db_index=True)
    notes = models.TextField(blank=True, default="")
    created_by = models.IntegerField(null=True, blank=True, db_index=True)

    class Meta:
        ordering = ["-work_date", "-created_at"]
        db_table = "WorkRecord"
        indexes = [
            models.Index(fields=["employee", "work_date"]),
            models.Index(fields=["employee", "status"]),
        ]
        constraints = [
            CheckConstraint(condition=Q(quantity__gt=0), name="work_record_quantity_positive"),
            CheckConstraint(
                condition=Q(overtime_quantity__isnull=True) | Q(overtime_hours__isnull=True),
                name="work_record_single_overtime_field",
            ),
        ]

    def __str__(self):
        return f"WR {self.employee_id} {self.work_date} {self.total_amount} [{self.get_status_display()}]"

    @property
    def hours_worked(self) -> Decimal:
        return (self.quantity or Decimal("0")) + (self.overtime_hours or Decimal("0"))

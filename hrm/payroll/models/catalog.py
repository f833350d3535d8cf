from decimal import Decimal

from django.db import models
from django.db.models import Q, CheckConstraint, UniqueConstraint
from django.db.models.functions import Lower

from .mixins import TimeStampedModel


class WorkType(TimeStampedModel):
    class CalculationType(models.TextChoices):
        HOURLY = "hourly", "Theo giờ"
        DAILY = "daily", "Theo ngày"
        WELD_COUNT = "weld_count", "Theo mối hàn"

    name = models.CharField(max_length=120)
    department = models.CharField(max_length=120, db_index=True)
    calculation_type = models.CharField(max_length=16, choices=CalculationType.choices)
    unit_price = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ["department", "name"]
        db_table = "WorkType"
        constraints = [
            UniqueConstraint(Lower("name"), "department", name="uniq_worktype_name_department"),
            CheckConstraint(condition=Q(unit_price__gte=0), name="worktype_unit_price_non_negative"),
        ]

    def __str__(self):
        return f"{self.name} ({self.department})"


class WorkItem(TimeStampedModel):
    class Status(models.TextChoices):
        NEW = "new", "Tạo mới"
        IN_PROGRESS = "in_progress", "Đang sản xuất"
        DONE = "done", "Hoàn thành"

    name = models.CharField(max_length=200)
    difficulty_level = models.CharField(max_length=32, blank=True, default="")
    price_per_weld = models.DecimalField(max_digits=15, decimal_places=2)
    total_quantity = models.PositiveIntegerField(default=0, help_text="Số sản phẩm cần làm (target).")
    welds_per_item = models.PositiveIntegerField(default=0, help_text="Số mối hàn / sản phẩm.")
    # Derived: chỉ được ghi bởi work_item_service.refresh_work_item_status
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.NEW)
    estimated_delivery_date = models.DateField(null=True, blank=True)
    weight_kg = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)

    class Meta:
        ordering = ["difficulty_level", "name"]
        db_table = "WorkItem"

    def __str__(self):
        return f"{self.name} [{self.get_status_display()}]"


class OvertimeConfig(TimeStampedModel):
    work_type = models.OneToOneField(WorkType, on_delete=models.CASCADE, related_name="overtime_config")
    # weld_count: cộng thêm vào giá/mối hàn khi tăng ca
    overtime_price_per_weld = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    # hourly: % phụ trội trên đơn giá giờ
    overtime_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        db_table = "OvertimeConfig"
        constraints = [
            CheckConstraint(condition=Q(overtime_price_per_weld__gte=0), name="ot_price_per_weld_non_negative"),
            CheckConstraint(
                condition=Q(overtime_percentage__gte=0) & Q(overtime_percentage__lte=100),
                name="ot_percentage_range",
            ),
        ]

    def __str__(self):
        return f"OT {self.work_type_id}: +{self.overtime_price_per_weld}/weld, +{self.overtime_percentage}%"

from django.db import models
from .mixins import TimeStampedModel


class Employee(TimeStampedModel):
    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"

    code = models.CharField(max_length=32, unique=True)
    first_name = models.CharField(max_length=80)
    last_name = models.CharField(max_length=80)
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=32, blank=True, default="")
    position = models.CharField(max_length=120, blank=True, default="")
    department = models.CharField(max_length=120, blank=True, default="", db_index=True)
    # Lương mặc định/tháng, dùng khi kỳ lương không có work record
    salary = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    hire_date = models.DateField(null=True, blank=True)
    manager = models.ForeignKey("self", null=True, blank=True, on_delete=models.SET_NULL, related_name="reports")
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.ACTIVE, db_index=True)

    class Meta:
        ordering = ["last_name", "first_name"]
        db_table = "Employee"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self):
        return f"{self.code} - {self.full_name}"

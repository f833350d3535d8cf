from django.contrib import admin
from .models import (
    Employee, WorkType, WorkItem, OvertimeConfig, WorkRecord,
    MonthlySalary, MonthlySalaryWorkRecord, AuditLog,
)


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("code", "first_name", "last_name", "department", "salary", "status")
    list_filter = ("status", "department")
    search_fields = ("code", "first_name", "last_name", "email")


@admin.register(WorkType)
class WorkTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "department", "calculation_type", "unit_price")
    list_filter = ("calculation_type", "department")
    search_fields = ("name",)


@admin.register(WorkItem)
class WorkItemAdmin(admin.ModelAdmin):
    list_display = ("name", "difficulty_level", "price_per_weld", "welds_per_item", "total_quantity", "status")
    list_filter = ("status", "difficulty_level")
    readonly_fields = ("status",)


@admin.register(OvertimeConfig)
class OvertimeConfigAdmin(admin.ModelAdmin):
    list_display = ("work_type", "overtime_price_per_weld", "overtime_percentage")


@admin.register(WorkRecord)
class WorkRecordAdmin(admin.ModelAdmin):
    list_display = ("employee", "work_date", "work_type", "quantity", "total_amount", "status")
    list_filter = ("status", "work_type")
    date_hierarchy = "work_date"
    # giá đã snapshot, không sửa tay
    readonly_fields = ("unit_price", "total_amount", "status")


class MonthlySalaryWorkRecordInline(admin.TabularInline):
    model = MonthlySalaryWorkRecord
    extra = 0
    readonly_fields = ("work_record", "created_at")
    can_delete = False


@admin.register(MonthlySalary)
class MonthlySalaryAdmin(admin.ModelAdmin):
    list_display = ("employee", "year", "month", "total_work_days", "total_amount", "allowances", "status", "paid_at")
    list_filter = ("status", "year", "month")
    readonly_fields = ("total_amount", "total_work_days", "status", "calculated_at", "paid_at")
    inlines = [MonthlySalaryWorkRecordInline]


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "actor", "action", "object_type", "object_id")
    list_filter = ("action", "object_type")
    readonly_fields = ("actor", "action", "object_type", "object_id", "before", "after")

# payroll/urls/__init__.py
from django.urls import path, include

urlpatterns = [
    path("", include("payroll.urls.employee_urls")),
    path("", include("payroll.urls.catalog_urls")),
    path("", include("payroll.urls.work_record_urls")),
    path("", include("payroll.urls.salary_urls")),
    path("reports/", include("payroll.urls.report_urls")),
]

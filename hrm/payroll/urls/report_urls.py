# -*- coding: utf-8 -*-
from __future__ import annotations
from django.urls import path
from payroll.views.report_view import WeeklyReportView, MonthlyReportView

urlpatterns = [
    path("weekly/", WeeklyReportView.as_view(), name="report-weekly"),
    path("monthly/", MonthlyReportView.as_view(), name="report-monthly"),
]

# -*- coding: utf-8 -*-
from __future__ import annotations
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from payroll.views.salary_view import MonthlySalaryViewSet

router = DefaultRouter()
router.register(r"monthly-salaries", MonthlySalaryViewSet, basename="monthly-salaries")

urlpatterns = [
    path("", include(router.urls)),
]

# -*- coding: utf-8 -*-
from __future__ import annotations
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from payroll.views.work_record_view import WorkRecordViewSet

router = DefaultRouter()
router.register(r"work-records", WorkRecordViewSet, basename="work-records")

urlpatterns = [
    path("", include(router.urls)),
]

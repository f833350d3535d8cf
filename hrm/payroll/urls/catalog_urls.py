# -*- coding: utf-8 -*-
from __future__ import annotations
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from payroll.views.catalog_view import WorkTypeViewSet, WorkItemViewSet, OvertimeConfigViewSet

router = DefaultRouter()
router.register(r"work-types", WorkTypeViewSet, basename="work-types")
router.register(r"work-items", WorkItemViewSet, basename="work-items")
router.register(r"overtime-configs", OvertimeConfigViewSet, basename="overtime-configs")

urlpatterns = [
    path("", include(router.urls)),
]

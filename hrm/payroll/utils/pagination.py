# -*- coding: utf-8 -*-
from rest_framework.pagination import PageNumberPagination


class DefaultPagination(PageNumberPagination):
    """Phân trang cho danh sách work record / bảng lương (1 tháng ~ vài trăm dòng)."""
    page_size = 50
    page_query_param = "page"
    page_size_query_param = "page_size"
    max_page_size = 500

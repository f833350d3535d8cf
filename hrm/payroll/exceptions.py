# -*- coding: utf-8 -*-
"""
Lỗi nghiệp vụ của payroll.

- ValidationError: dùng thẳng django.core.exceptions.ValidationError (input sai / ngoài miền)
- NotFoundError: entity được tham chiếu không tồn tại
- ConflictError: vi phạm state machine (trả lương đã trả, tính lại bảng lương đã thanh toán, draft trùng kỳ)
"""
from django.core.exceptions import ValidationError

__all__ = ["ValidationError", "NotFoundError", "ConflictError", "error_message"]


class NotFoundError(Exception):
    pass


class ConflictError(Exception):
    pass


def error_message(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(str(m) for m in exc.messages)
    return str(exc)

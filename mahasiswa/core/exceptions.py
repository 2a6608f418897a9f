from typing import Any, Dict, Optional
from fastapi import status

class BaseAPIException(Exception):
    """
    Parent class for every custom error raised by the student service.
    Keeps the error envelope returned to clients uniform.
    """
    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

# =========================================================
# 1. COMMON ERRORS
# =========================================================

class BadRequestException(BaseAPIException):
    """400: the request is well-formed but makes no sense (wrong key, empty batch...)"""
    def __init__(self, message: str = "Bad Request", details: dict = None):
        super().__init__(
            message=message,
            code="BAD_REQUEST",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )

class NotFoundException(BaseAPIException):
    """404: resource not found"""
    def __init__(self, message: str = "Resource not found"):
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND
        )

class ConflictException(BaseAPIException):
    """409: the write collides with an existing row"""
    def __init__(self, message: str = "Conflict", details: dict = None):
        super().__init__(
            message=message,
            code="CONFLICT",
            status_code=status.HTTP_409_CONFLICT,
            details=details
        )

# =========================================================
# 2. STUDENT DOMAIN ERRORS
# =========================================================

class StudentNotFoundException(NotFoundException):
    def __init__(self, nim: str):
        super().__init__(message=f"Mahasiswa dengan NIM {nim} tidak ditemukan.")
        self.details = {"Nim": nim}

class DuplicateNimException(ConflictException):
    def __init__(self, nim: str):
        super().__init__(
            message=f"NIM {nim} sudah terdaftar.",
            details={"Nim": nim}
        )

class FieldLockedError(ValueError):
    """
    Raised on the page side when a locked form field (the NIM of an
    existing record) is edited.
    """
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Field {field} cannot be changed in edit mode")

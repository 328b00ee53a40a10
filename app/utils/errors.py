"""Custom error definitions for API exceptions."""
from fastapi import HTTPException
from starlette import status


class BadRequestError(HTTPException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Please authenticate"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class InvalidCredentialsError(HTTPException):
    def __init__(self, detail: str = "Incorrect email or password"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class ForbiddenError(HTTPException):
    def __init__(self, detail: str = "You do not have permission to access this resource"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class UserNotFoundError(NotFoundError):
    def __init__(self, detail: str = "User not found"):
        super().__init__(detail=detail)


class ClinicNotFoundError(NotFoundError):
    def __init__(self, detail: str = "Clinic not found"):
        super().__init__(detail=detail)


class PatientNotFoundError(NotFoundError):
    def __init__(self, detail: str = "Patient not found"):
        super().__init__(detail=detail)


class CampNotFoundError(NotFoundError):
    def __init__(self, detail: str = "Camp not found"):
        super().__init__(detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class EmailTakenError(BadRequestError):
    def __init__(self, detail: str = "Email already taken"):
        super().__init__(detail=detail)


class ExternalServiceError(HTTPException):
    def __init__(self, detail: str = "Upstream service failed"):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)

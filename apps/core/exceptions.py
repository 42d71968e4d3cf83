"""
Domain exceptions shared by every app.

Services raise these; the API layer renders them as
{"message": ..., "errorCode": ...} with the matching HTTP status
(see config/urls.py).
"""
from typing import Optional


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str, error_code: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        if status_code is not None:
            self.status_code = status_code

    @classmethod
    def from_catalog(cls, entry: dict) -> "ServiceError":
        """Build an error from an {"message", "errorCode"} catalog entry."""
        return cls(entry['message'], entry['errorCode'])

    def to_dict(self) -> dict:
        return {'message': self.message, 'errorCode': self.error_code}


class BadRequestError(ServiceError):
    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class InternalServerError(ServiceError):
    status_code = 500

from fastapi import status


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class InvalidIdentifier(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid ID format"


class Conflict(AppError):
    # duplicate joins are answered with 400, not 409
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Already joined this challenge"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class DependencyUnavailable(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

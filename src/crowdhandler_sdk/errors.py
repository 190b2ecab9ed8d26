class CrowdHandlerError(Exception):
    """Base error for the CrowdHandler client."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return f"{self.message}\nDetails: {self.details}"


class ApiError(CrowdHandlerError):
    """Non-success HTTP status returned by the CrowdHandler API."""

    def __init__(self, operation: str, status_code: int, body: str):
        super().__init__(f"{operation} failed with status: {status_code}", body)
        self.operation = operation
        self.status_code = status_code
        self.body = body

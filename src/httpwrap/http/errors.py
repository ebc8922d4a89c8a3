"""Exception raised by blocking HTTP calls."""


class NetworkError(Exception):
    """
    Raised when a blocking request fails or a trust anchor cannot be loaded.

    Attributes:
        status_code: HTTP status code of the response, or 0 when no
            response was received (DNS, connection, TLS, bad certificate)
        message: Response body or error description
    """

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"NetworkError(status_code={self.status_code!r}, message={self.message!r})"

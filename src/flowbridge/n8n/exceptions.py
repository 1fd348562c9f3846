"""Exceptions raised by the n8n client."""


class N8nError(Exception):
    """Base exception for n8n remote calls."""


class N8nAPIError(N8nError):
    """Non-2xx response from the n8n instance.

    n8n returns errors as plain response text, so the raw body is kept as-is.
    """

    def __init__(self, status_code: int, body: str, method: str = "", path: str = ""):
        self.status_code = status_code
        self.body = body
        self.method = method
        self.path = path
        super().__init__(f"n8n API error {status_code}: {body}")


class N8nConnectionError(N8nError):
    """The n8n instance could not be reached (DNS, TCP, TLS, timeout)."""


class N8nResponseError(N8nError):
    """A 2xx response whose body does not have the expected shape."""

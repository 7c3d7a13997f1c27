from __future__ import annotations


class DocQAError(Exception):
    """Base class for every error the pipeline knows how to report."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ExtractionError(DocQAError):
    pass


class ConfigurationError(DocQAError):
    pass


class GatewayError(DocQAError):
    """Completion service failure, carrying the status to report upstream."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class TransportFailure(GatewayError):
    """The request never produced a service response (DNS, TLS, timeout...)."""


class ServiceRejected(GatewayError):
    """The service answered with an error status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message, status_code=status_code)


# Client side


class UploadRejected(DocQAError):
    pass


class ReadError(DocQAError):
    pass


class SubmissionError(DocQAError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

"""Exception hierarchy for the exporter."""

from __future__ import annotations


class ExporterError(Exception):
    """Base class for all exporter errors."""


class ConnectError(ExporterError):
    """The Cloudera API could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, url: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        detail = f"{message} (url={url}"
        if status_code is not None:
            detail += f", status={status_code}"
        super().__init__(detail + ")")


class AuthError(ConnectError):
    """The Cloudera API rejected the configured credentials."""


class DecodeError(ExporterError):
    """The response body was not a valid services document."""

    def __init__(self, message: str, url: str) -> None:
        self.url = url
        super().__init__(f"{message} (url={url})")


class UnknownServiceError(ExporterError):
    """A static registry was asked to record a service it does not declare."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown service: {name}")

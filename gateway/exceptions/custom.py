from gateway.schemas.envelope import ApiError


class GatewayError(Exception):
    kind = "gateway"
    default_status = 500

    def __init__(self, message: str, status_code: int | None = None, service: str = "gateway"):
        self.message = message
        self.status_code = self.default_status if status_code is None else status_code
        self.service = service
        super().__init__(message)

    def to_api_error(self) -> ApiError:
        return ApiError(
            service=self.service,
            message=self.message,
            status=self.status_code,
            kind=self.kind,
        )


class NetworkError(GatewayError):
    """No response was received (connection failure or timeout)."""

    kind = "network"
    default_status = 0


class HttpError(GatewayError):
    kind = "http"


class MalformedResponseError(GatewayError):
    kind = "malformed"
    default_status = 502


class ConfigurationError(GatewayError):
    kind = "configuration"
    default_status = 503


class BookingFailure(GatewayError):
    kind = "booking"
    default_status = 422


_ERRORS_BY_KIND: dict[str, type[GatewayError]] = {
    cls.kind: cls
    for cls in (NetworkError, HttpError, MalformedResponseError, ConfigurationError, BookingFailure)
}


def error_from_api(error: ApiError) -> GatewayError:
    """Rebuild the typed error carried by a failed envelope."""
    cls = _ERRORS_BY_KIND.get(error.kind or "", HttpError)
    return cls(error.message, status_code=error.status, service=error.service)

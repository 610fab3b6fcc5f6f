# storefront/domain/errors.py


class ServiceError(Exception):
    """
    Base for errors raised by services.
    Carries a stable machine-readable code and the HTTP status the routers map it to.
    """

    code = "INTERNAL_SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict:
        return {"code": self.code, "message": self.message}


class NotFound(ServiceError):
    code = "NOT_FOUND"
    status_code = 404


class BadRequest(ServiceError):
    code = "BAD_REQUEST"
    status_code = 400


class InsufficientStock(BadRequest):
    def __init__(self, product_name: str, requested: int, available: int | None = None):
        if available is None:
            message = f"Insufficient stock for product {product_name}"
        else:
            message = (
                f"Insufficient stock for product {product_name}: "
                f"requested {requested}, available {available}"
            )
        super().__init__(message)
        self.product_name = product_name
        self.requested = requested
        self.available = available


class Forbidden(ServiceError):
    code = "FORBIDDEN"
    status_code = 403


class Conflict(ServiceError):
    code = "CONFLICT"
    status_code = 409


class InternalError(ServiceError):
    pass

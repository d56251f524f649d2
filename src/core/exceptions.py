from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, status


@dataclass(eq=False)
class ServiceException(Exception):
    message: str
    code: str = "error"
    details: dict | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class InternalError(ServiceException):
    code: str = "internal_error"


@dataclass(eq=False)
class InitError(ServiceException):
    code: str = "init_error"


@dataclass(eq=False)
class NotFoundError(ServiceException):
    code: str = "not_found"


@dataclass(eq=False)
class BadRequestError(ServiceException):
    code: str = "bad_request"


EXC_TO_STATUS: dict[type[ServiceException], int] = {
    BadRequestError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Only these messages are safe to show to a client
PUBLIC_DETAIL: dict[type[ServiceException], str | None] = {
    BadRequestError: None,
    NotFoundError: "not found",
}

DEFAULT_BAD_REQUEST_DETAIL = "bad request"
DEFAULT_ERROR_DETAIL = "Something went wrong"


def _public_detail(exc: ServiceException) -> str:
    for typ, detail in PUBLIC_DETAIL.items():
        if isinstance(exc, typ):
            if detail is not None:
                return detail
            return exc.message or DEFAULT_BAD_REQUEST_DETAIL
    return DEFAULT_ERROR_DETAIL


def map_exception_to_http(exc: ServiceException) -> HTTPException:
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for typ, st in EXC_TO_STATUS.items():
        if isinstance(exc, typ):
            status_code = st
            break

    return HTTPException(status_code=status_code, detail=_public_detail(exc))

from fastapi import HTTPException, status

from application.dtos.errors import AppError

SUPPORTED_METHODS = "PUT, GET, DELETE"


def _map_app_error_to_http_exception(error: AppError) -> HTTPException:
    """Map application layer errors to appropriate HTTP exceptions.

    Bodies are fixed short strings; backend detail stays in the logs.
    """
    if error.category == "unauthorized":
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden",
        )
    if error.category == "not_found":
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Object Not Found",
        )
    if error.category == "method_not_allowed":
        return HTTPException(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            detail="Method Not Allowed",
            headers={"Allow": SUPPORTED_METHODS},
        )
    # Storage failures and unknown categories
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal Server Error",
    )

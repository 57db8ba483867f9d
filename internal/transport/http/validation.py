"""
Request pre-validation.

Runs before a request reaches a use case, after Pydantic has parsed
the body.
"""
from typing import Union

from internal.domain.errors import DomainValidationError
from internal.transport.http.dto import CreateProductRequest, UpdateProductRequest


def validate_product_request(
    request: Union[CreateProductRequest, UpdateProductRequest],
) -> None:
    """
    Check the structural rules Pydantic cannot express.

    Raises:
        DomainValidationError: If the name is blank.
    """
    if not request.name.strip():
        raise DomainValidationError("name must not be blank")

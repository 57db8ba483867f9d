"""
Domain-specific exceptions.

Custom exceptions for domain validation and business rule violations.
"""


class DomainError(Exception):
    """Base exception for domain errors."""

    code = "domain_error"

    def __init__(self, message: str) -> None:
        """
        Initialize domain error.

        Args:
            message: Error message describing the issue.
        """
        self.message = message
        super().__init__(self.message)


class DomainValidationError(DomainError):
    """Exception raised when request validation fails."""

    code = "validation_error"


class NullInputError(DomainError):
    """Exception raised when a required input is missing."""

    code = "null_input"

    def __init__(self, argument: str) -> None:
        """
        Initialize null input error.

        Args:
            argument: Name of the missing argument.
        """
        super().__init__(f"'{argument}' must not be None")
        self.argument = argument


class DuplicateProductNameError(DomainError):
    """Exception raised when an active product already uses the name."""

    code = "duplicate_name"

    def __init__(self, name: str) -> None:
        """
        Initialize duplicate product name error.

        Args:
            name: The product name that is already taken.
        """
        super().__init__(f"A product with this name already exists: '{name}'")
        self.name = name


class ProductNotFoundError(DomainError):
    """Exception raised when a product is not found."""

    code = "not_found"

    def __init__(self, product_id: int) -> None:
        """
        Initialize product not found error.

        Args:
            product_id: The ID of the product that was not found.
        """
        super().__init__(f"Product with ID {product_id} not found")
        self.product_id = product_id

"""
Domain model for Product.

This module contains the catalog entity and the query descriptor
used to look products up by identity or name.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class Product:
    """
    Product is the aggregate root of the catalog.

    The identifier is assigned by persistence on insert and never
    changes afterwards. Field-level constraints (e.g. price sign) are
    not enforced by the entity.

    Attributes:
        id: Identifier assigned by the repository, None until persisted.
        name: Product name, unique among active products.
        description: Free-form description.
        price: Unit price.
        active: Lifecycle flag; inactive products are ignored by the
            duplicate-name rule.
    """
    name: str = ""
    description: Optional[str] = None
    price: Decimal = Decimal("0")
    active: bool = True
    id: Optional[int] = None

    def apply_changes(
        self,
        name: str,
        description: Optional[str],
        price: Decimal,
    ) -> None:
        """
        Overwrite the mutable fields in place.

        Identity and the active flag are left untouched.
        """
        self.name = name
        self.description = description
        self.price = price


@dataclass(frozen=True)
class ProductFilter:
    """
    Query descriptor for product lookups.

    Unset fields do not constrain the result.
    """
    id: Optional[int] = None
    name: Optional[str] = None

    def matches(self, product: Product) -> bool:
        """Check whether a product satisfies every set field."""
        if self.id is not None and product.id != self.id:
            return False
        if self.name is not None and product.name != self.name:
            return False
        return True

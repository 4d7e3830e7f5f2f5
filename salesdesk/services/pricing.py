"""Bundle price derivation.

A package's ``total_price`` is always re-derived from the current prices of
its member products.  ``special_price`` is the author's display override and
is carried through untouched.
"""

from typing import Iterable, List, Optional

from salesdesk.errors import ValidationError
from salesdesk.models.page import Package, PricingOption, Product


def compute_package_total(package: Package, products: Iterable[Product]) -> float:
    """Return the sum of prices of the products referenced by *package*."""
    members = set(package.product_ids)
    return sum(product.price for product in products if product.id in members)


def recompute_packages(packages: List[Package], products: List[Product]) -> List[Package]:
    """Return *packages* with dangling product references pruned and totals re-derived."""
    known = {product.id for product in products}
    updated: List[Package] = []
    for package in packages:
        product_ids = [pid for pid in package.product_ids if pid in known]
        pruned = package.model_copy(update={"product_ids": product_ids})
        updated.append(
            pruned.model_copy(update={"total_price": compute_package_total(pruned, products)})
        )
    return updated


def add_product(
    packages: List[Package], package_id: str, product_id: str, products: List[Product]
) -> List[Package]:
    """Add *product_id* to the package *package_id* and recompute totals.

    Raises:
        ValidationError: if either the package or the product does not exist.
    """
    if product_id not in {product.id for product in products}:
        raise ValidationError(f"Product '{product_id}' is not part of this page.", field="products")
    return recompute_packages(
        _with_members(packages, package_id, lambda ids: ids + [product_id]), products
    )


def remove_product(
    packages: List[Package], package_id: str, product_id: str, products: List[Product]
) -> List[Package]:
    """Remove *product_id* from the package *package_id* and recompute totals."""
    return recompute_packages(
        _with_members(packages, package_id, lambda ids: [pid for pid in ids if pid != product_id]),
        products,
    )


def display_price(package: Package) -> float:
    """Price shown to visitors: the override when set, the derived total otherwise."""
    return package.special_price if package.special_price is not None else package.total_price


def option_price(base_price: Optional[float], option: PricingOption) -> float:
    """Effective price of a single selected *option* on top of *base_price*.

    Checkout-time selection is not modelled; this only applies one delta.
    """
    return (base_price or 0) + option.price_delta


def _with_members(packages: List[Package], package_id: str, change) -> List[Package]:
    if not any(package.id == package_id for package in packages):
        raise ValidationError(f"Package '{package_id}' is not part of this page.", field="packages")
    return [
        package.model_copy(update={"product_ids": list(dict.fromkeys(change(package.product_ids)))})
        if package.id == package_id
        else package
        for package in packages
    ]

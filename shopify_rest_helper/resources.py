"""Admin REST resources."""
from __future__ import annotations

from .base import ResourceBase


class Shop(ResourceBase):
    singleton = True


class Product(ResourceBase):
    pass


class Variant(ResourceBase, prefix="products/{product_id}/"):
    pass


class Order(ResourceBase):
    pass


class Customer(ResourceBase):
    pass

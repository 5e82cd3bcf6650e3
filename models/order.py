"""
models/order.py
---------------
Domain model for sales orders: the order header, its line items,
and the reference entities (customer, employee, shipper, product)
an order points at.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Customer:
    """A customer, identified by its short alphanumeric code."""
    code: str
    company_name: Optional[str] = None


@dataclass
class Employee:
    """The employee who took the order."""
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    country: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


@dataclass
class Shipper:
    """The shipping company an order ships via."""
    id: int
    company_name: Optional[str] = None


@dataclass
class Product:
    """
    A product referenced by an order line.

    Attributes:
        id: Products.ProductID.
        product_name: Display name of the product.
        supplier_id: Products.SupplierID.
        category_id: Products.CategoryID.
        supplier: Supplier company name, resolved at read time.
        category: Category name, resolved at read time.
    """
    id: int
    product_name: Optional[str] = None
    supplier_id: Optional[int] = None
    category_id: Optional[int] = None
    supplier: Optional[str] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class ShippingAddress:
    """Where an order ships to. Value type: no identity of its own."""
    address: str
    city: str
    region: Optional[str]
    postal_code: str
    country: str


@dataclass
class OrderDetail:
    """
    A single order line.

    The `order` back-reference is non-owning and is left out of
    equality and repr so that comparing orders does not recurse.
    """
    product: Product
    unit_price: float
    quantity: int
    discount: float = 0.0
    order: Optional["Order"] = field(default=None, repr=False, compare=False)


@dataclass
class Order:
    """
    A sales order aggregate: the header plus its ordered line items.

    Attributes:
        customer: Who placed the order.
        employee: Who took the order.
        shipper: Who ships it (Orders.ShipVia).
        order_date: When the order was placed.
        required_date: When the customer needs it.
        ship_name: Recipient name on the shipment.
        shipping_address: Destination address.
        freight: Freight charge.
        shipped_date: When it shipped (None while unshipped).
        order_details: Line items, owned by this order.
        id: Store-assigned primary key (None until the order is added).
    """
    customer: Customer
    employee: Employee
    shipper: Shipper
    order_date: datetime
    required_date: datetime
    ship_name: str
    shipping_address: ShippingAddress
    freight: float = 0.0
    shipped_date: Optional[datetime] = None
    order_details: list[OrderDetail] = field(default_factory=list)
    id: Optional[int] = None

    def __post_init__(self) -> None:
        for detail in self.order_details:
            detail.order = self

    def __setattr__(self, name, value) -> None:
        # Identity may be assigned once (by the store), never changed.
        if name == "id":
            current = getattr(self, "id", None)
            if current is not None and value != current:
                raise AttributeError(f"Order #{current} identity cannot be changed")
        object.__setattr__(self, name, value)

    def add_detail(
        self, product: Product, unit_price: float, quantity: int, discount: float = 0.0
    ) -> OrderDetail:
        """Append a line item and point it back at this order."""
        detail = OrderDetail(
            product=product,
            unit_price=unit_price,
            quantity=quantity,
            discount=discount,
            order=self,
        )
        self.order_details.append(detail)
        return detail

    def __str__(self) -> str:
        ident = f"#{self.id}" if self.id is not None else "(new)"
        return f"Order {ident} | {self.customer.code} | {len(self.order_details)} line(s)"

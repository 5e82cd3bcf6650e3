"""
repositories/order_assembler.py
-------------------------------
Builds a fully hydrated Order from an Orders row: resolves the customer,
employee and shipper, then loads every order line with its product.
All lookups run one after another on the caller's unit of work.
"""

from datetime import datetime
from typing import Any, Optional

from db.params import Parameters
from db.unit_of_work import UnitOfWork
from models.order import Customer, Order, ShippingAddress
from repositories.lookups import LookupResolver

HEADER_COLUMNS = (
    "OrderID, CustomerID, EmployeeID, OrderDate, RequiredDate, ShippedDate, "
    "ShipVia, Freight, ShipName, ShipAddress, ShipCity, ShipRegion, "
    "ShipPostalCode, ShipCountry"
)


def as_datetime(value: Any) -> Optional[datetime]:
    """Normalize a stored timestamp (driver datetime or ISO text) to datetime."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


class OrderAssembler:
    """Turns header rows into Order aggregates."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.lookups = LookupResolver(uow)

    def assemble(self, row: dict) -> Order:
        """
        Build one Order from a header row (keys are lowercased column names).

        Raises:
            NotFoundError: If the employee, shipper or a line's product is missing.
        """
        customer_id = row["customerid"]
        customer = Customer(
            code=customer_id,
            company_name=self.lookups.customer_name(customer_id),
        )
        employee = self.lookups.employee(row["employeeid"])
        shipper = self.lookups.shipper(row["shipvia"])

        order = Order(
            id=int(row["orderid"]),
            customer=customer,
            employee=employee,
            shipper=shipper,
            order_date=as_datetime(row["orderdate"]),
            required_date=as_datetime(row["requireddate"]),
            shipped_date=as_datetime(row["shippeddate"]),
            freight=float(row["freight"]),
            ship_name=row["shipname"],
            shipping_address=ShippingAddress(
                address=row["shipaddress"],
                city=row["shipcity"],
                region=row["shipregion"],
                postal_code=row["shippostalcode"],
                country=row["shipcountry"],
            ),
        )
        self._load_details(order)
        return order

    def _load_details(self, order: Order) -> None:
        sql = """
            SELECT ProductID, UnitPrice, Quantity, Discount
            FROM OrderDetails
            WHERE OrderID = %(order_id)s
            ORDER BY ProductID;
        """
        rows = self.uow.fetch_all(sql, Parameters(order_id=order.id))
        for r in rows:
            order.add_detail(
                product=self.lookups.product(r["productid"]),
                unit_price=float(r["unitprice"]),
                quantity=int(r["quantity"]),
                discount=float(r["discount"]),
            )

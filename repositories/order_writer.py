"""
repositories/order_writer.py
----------------------------
Transactional writes of the order aggregate (header + lines).

Each write opens its own unit of work: all statements run in one
transaction, which is committed on success. On any failure the
transaction is rolled back, the connection closed, and the failure
re-raised as a RepositoryError.
"""

from db.connection import Backend
from db.params import Parameters
from db.unit_of_work import UnitOfWork
from models.order import Order, OrderDetail
from repositories.exceptions import NotFoundError, RepositoryError
from utils.logger import get_logger

logger = get_logger(__name__)

INSERT_HEADER_SQL = """
    INSERT INTO Orders
        (CustomerID, EmployeeID, OrderDate, RequiredDate, ShippedDate, ShipVia, Freight,
         ShipName, ShipAddress, ShipCity, ShipRegion, ShipPostalCode, ShipCountry)
    VALUES
        (%(customer_id)s, %(employee_id)s, %(order_date)s, %(required_date)s,
         %(shipped_date)s, %(ship_via)s, %(freight)s, %(ship_name)s, %(ship_address)s,
         %(ship_city)s, %(ship_region)s, %(ship_postal_code)s, %(ship_country)s);
"""

UPDATE_HEADER_SQL = """
    UPDATE Orders
    SET CustomerID = %(customer_id)s, EmployeeID = %(employee_id)s,
        OrderDate = %(order_date)s, RequiredDate = %(required_date)s,
        ShippedDate = %(shipped_date)s, ShipVia = %(ship_via)s, Freight = %(freight)s,
        ShipName = %(ship_name)s, ShipAddress = %(ship_address)s, ShipCity = %(ship_city)s,
        ShipRegion = %(ship_region)s, ShipPostalCode = %(ship_postal_code)s,
        ShipCountry = %(ship_country)s
    WHERE OrderID = %(order_id)s;
"""

INSERT_DETAIL_SQL = """
    INSERT INTO OrderDetails (OrderID, ProductID, UnitPrice, Quantity, Discount)
    VALUES (%(order_id)s, %(product_id)s, %(unit_price)s, %(quantity)s, %(discount)s);
"""

DELETE_DETAILS_SQL = "DELETE FROM OrderDetails WHERE OrderID = %(order_id)s;"
DELETE_HEADER_SQL = "DELETE FROM Orders WHERE OrderID = %(order_id)s;"


def header_parameters(order: Order) -> Parameters:
    """Bind every mutable header field of an order."""
    address = order.shipping_address
    return Parameters(
        customer_id=order.customer.code,
        employee_id=order.employee.id,
        order_date=order.order_date,
        required_date=order.required_date,
        shipped_date=order.shipped_date,
        ship_via=order.shipper.id,
        freight=order.freight,
        ship_name=order.ship_name,
        ship_address=address.address,
        ship_city=address.city,
        ship_region=address.region,
        ship_postal_code=address.postal_code,
        ship_country=address.country,
    )


def detail_parameters(order_id: int, detail: OrderDetail) -> Parameters:
    return Parameters(
        order_id=order_id,
        product_id=detail.product.id,
        unit_price=detail.unit_price,
        quantity=detail.quantity,
        discount=detail.discount,
    )


class OrderWriter:
    """Runs add / update / remove of an order as single transactions."""

    def __init__(self, backend: Backend):
        self.backend = backend

    def _insert_details(self, uow: UnitOfWork, order_id: int, order: Order) -> None:
        for detail in order.order_details:
            uow.execute(INSERT_DETAIL_SQL, detail_parameters(order_id, detail))

    # ── CREATE ────────────────────────────────────────────

    def add(self, order: Order) -> int:
        """
        Insert the header, read back its identity, then insert every line.

        Returns:
            The store-assigned OrderID.

        Raises:
            RepositoryError: If any statement fails (nothing is persisted).
        """
        try:
            with UnitOfWork(self.backend, transactional=True) as uow:
                uow.execute(INSERT_HEADER_SQL, header_parameters(order))
                order_id = uow.last_identity()
                self._insert_details(uow, order_id, order)
        except Exception as e:
            logger.error(f"Failed to add order: {e}")
            raise RepositoryError(f"Failed to add order: {e}") from e
        logger.info(f"Added order #{order_id} with {len(order.order_details)} line(s)")
        return order_id

    # ── UPDATE ────────────────────────────────────────────

    def update(self, order: Order) -> None:
        """
        Overwrite the header and replace every order line.

        Existing lines are deleted and the lines currently on `order`
        are inserted; nothing is diffed.

        Raises:
            RepositoryError: If any statement fails, or no order has this id.
                The stored order is left unchanged.
        """
        try:
            params = header_parameters(order).add("order_id", order.id)
            with UnitOfWork(self.backend, transactional=True) as uow:
                if uow.execute(UPDATE_HEADER_SQL, params) == 0:
                    raise NotFoundError(f"Order with ID {order.id} not found.")
                uow.execute(DELETE_DETAILS_SQL, Parameters(order_id=order.id))
                self._insert_details(uow, order.id, order)
        except Exception as e:
            logger.error(f"Failed to update order #{order.id}: {e}")
            raise RepositoryError(f"Failed to update order #{order.id}: {e}") from e
        logger.info(f"Updated order #{order.id} with {len(order.order_details)} line(s)")

    # ── DELETE ────────────────────────────────────────────

    def remove(self, order_id: int) -> None:
        """
        Delete an order's lines, then its header.
        Removing an id that does not exist is not an error.

        Raises:
            RepositoryError: If any statement fails.
        """
        try:
            params = Parameters(order_id=order_id)
            with UnitOfWork(self.backend, transactional=True) as uow:
                uow.execute(DELETE_DETAILS_SQL, params)
                deleted = uow.execute(DELETE_HEADER_SQL, params) > 0
        except Exception as e:
            logger.error(f"Failed to remove order #{order_id}: {e}")
            raise RepositoryError(f"Failed to remove order #{order_id}: {e}") from e
        if deleted:
            logger.info(f"Removed order #{order_id}")

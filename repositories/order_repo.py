"""
repositories/order_repo.py
--------------------------
Data access layer for sales orders.
Validates arguments, then reads through the OrderAssembler or writes
through the OrderWriter. Every call opens and closes its own connection.
"""

import asyncio
from typing import Optional

from db.connection import Backend, get_backend
from db.params import Parameters
from db.unit_of_work import UnitOfWork
from models.order import Order
from repositories.exceptions import NotFoundError, ValidationError
from repositories.order_assembler import HEADER_COLUMNS, OrderAssembler
from repositories.order_writer import OrderWriter
from utils.logger import get_logger

logger = get_logger(__name__)


def _validate_order(order: Optional[Order]) -> None:
    if order is None:
        raise ValidationError("Order must not be None.")
    if not isinstance(order, Order):
        raise ValidationError(f"Expected an Order, got {type(order).__name__}.")


class OrderRepository:
    """
    Repository for the order aggregate (Orders + OrderDetails).

    One instance is not safe for concurrent use from several threads;
    serialize calls or create one repository per unit of work.
    """

    def __init__(self, backend: Optional[Backend] = None):
        self.backend = backend or get_backend()
        self.writer = OrderWriter(self.backend)

    # ── CREATE ────────────────────────────────────────────

    def add_order(self, order: Order) -> int:
        """
        Persist a new order and its lines.

        Args:
            order: The new Order to persist. Must not carry an id yet.

        Returns:
            The store-assigned OrderID (also set on `order.id`).

        Raises:
            ValidationError: If `order` is missing or already has an id.
            RepositoryError: If the write fails.
        """
        _validate_order(order)
        if order.id is not None:
            raise ValidationError(f"Order already has id {order.id}; use update_order.")
        order_id = self.writer.add(order)
        order.id = order_id
        return order_id

    # ── READ ──────────────────────────────────────────────

    def get_order(self, order_id: int) -> Order:
        """
        Fetch a single order with its lines and references.

        Raises:
            NotFoundError: If no order (or a required reference) exists.
        """
        sql = f"SELECT {HEADER_COLUMNS} FROM Orders WHERE OrderID = %(order_id)s;"
        with UnitOfWork(self.backend) as uow:
            row = uow.fetch_one(sql, Parameters(order_id=order_id))
            if row is None:
                raise NotFoundError(f"Order with ID {order_id} not found.")
            return OrderAssembler(uow).assemble(row)

    def get_orders(self, skip: int, count: int) -> list[Order]:
        """
        Fetch a page of orders ordered by ascending OrderID.

        Args:
            skip: Number of orders to skip (>= 0).
            count: Maximum number of orders to return (>= 1).

        Returns:
            Up to `count` orders; empty if `skip` is past the end.

        Raises:
            ValidationError: If `skip` is negative or `count` is below 1.
        """
        if skip < 0 or count < 1:
            raise ValidationError(f"Skip or count out of range (skip={skip}, count={count}).")
        sql = f"""
            SELECT {HEADER_COLUMNS} FROM Orders
            ORDER BY OrderID ASC
            LIMIT %(count)s OFFSET %(skip)s;
        """
        with UnitOfWork(self.backend) as uow:
            rows = uow.fetch_all(sql, Parameters(count=count, skip=skip))
            assembler = OrderAssembler(uow)
            return [assembler.assemble(r) for r in rows]

    # ── UPDATE ────────────────────────────────────────────

    def update_order(self, order: Order) -> None:
        """
        Overwrite an order's header and replace all of its lines.

        Raises:
            ValidationError: If `order` is missing or has no id.
            RepositoryError: If the write fails.
        """
        _validate_order(order)
        if order.id is None:
            raise ValidationError("Cannot update an order that has no id.")
        self.writer.update(order)

    # ── DELETE ────────────────────────────────────────────

    def remove_order(self, order_id: int) -> None:
        """
        Delete an order and its lines. A missing id is not an error.

        Raises:
            RepositoryError: If the write fails.
        """
        self.writer.remove(order_id)


class AsyncOrderRepository:
    """
    Coroutine front end for OrderRepository.

    Each call runs one whole repository operation on a worker thread, so
    the connection is opened, used and closed on that thread only.
    """

    def __init__(self, backend: Optional[Backend] = None):
        self.sync = OrderRepository(backend)

    async def add_order(self, order: Order) -> int:
        return await asyncio.to_thread(self.sync.add_order, order)

    async def get_order(self, order_id: int) -> Order:
        return await asyncio.to_thread(self.sync.get_order, order_id)

    async def get_orders(self, skip: int, count: int) -> list[Order]:
        return await asyncio.to_thread(self.sync.get_orders, skip, count)

    async def update_order(self, order: Order) -> None:
        await asyncio.to_thread(self.sync.update_order, order)

    async def remove_order(self, order_id: int) -> None:
        await asyncio.to_thread(self.sync.remove_order, order_id)

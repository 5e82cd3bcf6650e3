from __future__ import annotations

import sqlite3
from contextlib import closing
from datetime import datetime
from pathlib import Path

import pytest

from db.connection import SqliteBackend
from db.init_db import create_tables
from models.order import Customer, Employee, Order, Product, ShippingAddress, Shipper
from repositories.order_repo import OrderRepository

REFERENCE_ROWS = {
    "INSERT INTO Customers (CustomerID, CompanyName) VALUES (?, ?)": [
        ("ALFKI", "Alfreds Futterkiste"),
        ("VINET", "Vins et alcools Chevalier"),
        ("NONAM", None),
    ],
    "INSERT INTO Employees (EmployeeID, FirstName, LastName, Country) VALUES (?, ?, ?, ?)": [
        (1, "Nancy", "Davolio", "USA"),
        (5, "Steven", "Buchanan", "UK"),
    ],
    "INSERT INTO Shippers (ShipperID, CompanyName) VALUES (?, ?)": [
        (1, "Speedy Express"),
        (3, "Federal Shipping"),
    ],
    "INSERT INTO Suppliers (SupplierID, CompanyName) VALUES (?, ?)": [
        (1, "Exotic Liquids"),
        (2, "New Orleans Cajun Delights"),
    ],
    "INSERT INTO Categories (CategoryID, CategoryName) VALUES (?, ?)": [
        (1, "Beverages"),
        (2, "Condiments"),
    ],
    "INSERT INTO Products (ProductID, ProductName, SupplierID, CategoryID) VALUES (?, ?, ?, ?)": [
        (1, "Chai", 1, 1),
        (2, "Chang", 1, 1),
        (3, "Aniseed Syrup", 2, 2),
        # supplier and category rows deliberately missing
        (4, "Orphan Tea", 99, 99),
    ],
}


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "northwind.sqlite"


@pytest.fixture
def backend(db_path: Path) -> SqliteBackend:
    b = SqliteBackend(str(db_path))
    create_tables(b)
    with closing(sqlite3.connect(db_path)) as conn:
        for sql, rows in REFERENCE_ROWS.items():
            conn.executemany(sql, rows)
        conn.commit()
    return b


@pytest.fixture
def repo(backend: SqliteBackend) -> OrderRepository:
    return OrderRepository(backend)


@pytest.fixture
def count_rows(db_path: Path):
    def _count(table: str, order_id: int | None = None) -> int:
        with closing(sqlite3.connect(db_path)) as conn:
            if order_id is None:
                return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
            return conn.execute(
                f"SELECT COUNT(*) FROM {table} WHERE OrderID = ?", (order_id,)
            ).fetchone()[0]

    return _count


@pytest.fixture
def make_order():
    def _make(
        customer: str = "ALFKI",
        employee_id: int = 1,
        shipper_id: int = 1,
        ship_name: str = "Alfreds Futterkiste",
        details: tuple = ((1, 10.0, 2, 0.0), (2, 5.0, 1, 0.1)),
        region: str | None = None,
    ) -> Order:
        order = Order(
            customer=Customer(code=customer),
            employee=Employee(id=employee_id),
            shipper=Shipper(id=shipper_id),
            order_date=datetime(1996, 7, 4, 9, 30),
            required_date=datetime(1996, 8, 1),
            shipped_date=datetime(1996, 7, 16),
            freight=32.38,
            ship_name=ship_name,
            shipping_address=ShippingAddress(
                address="Obere Str. 57",
                city="Berlin",
                region=region,
                postal_code="12209",
                country="Germany",
            ),
        )
        for product_id, price, qty, discount in details:
            order.add_detail(Product(id=product_id), unit_price=price, quantity=qty, discount=discount)
        return order

    return _make

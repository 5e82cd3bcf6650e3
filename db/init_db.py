"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from typing import Optional

from db.connection import Backend, get_backend
from utils.logger import get_logger

logger = get_logger(__name__)

# {identity} is filled with the backend's identity column definition.
SCHEMA_SQL = """
-- Reference tables: maintained outside this service, read during order assembly
CREATE TABLE IF NOT EXISTS Customers (
    CustomerID      VARCHAR(5) PRIMARY KEY,
    CompanyName     VARCHAR(40)
);

CREATE TABLE IF NOT EXISTS Employees (
    EmployeeID      {identity},
    FirstName       VARCHAR(10) NOT NULL,
    LastName        VARCHAR(20) NOT NULL,
    Country         VARCHAR(15)
);

CREATE TABLE IF NOT EXISTS Shippers (
    ShipperID       {identity},
    CompanyName     VARCHAR(40) NOT NULL
);

CREATE TABLE IF NOT EXISTS Suppliers (
    SupplierID      {identity},
    CompanyName     VARCHAR(40)
);

CREATE TABLE IF NOT EXISTS Categories (
    CategoryID      {identity},
    CategoryName    VARCHAR(15)
);

CREATE TABLE IF NOT EXISTS Products (
    ProductID       {identity},
    ProductName     VARCHAR(40) NOT NULL,
    SupplierID      INTEGER,
    CategoryID      INTEGER
);

-- Order aggregate: header + lines, written by the order repository
CREATE TABLE IF NOT EXISTS Orders (
    OrderID         {identity},
    CustomerID      VARCHAR(5) NOT NULL,
    EmployeeID      INTEGER NOT NULL,
    OrderDate       TIMESTAMP NOT NULL,
    RequiredDate    TIMESTAMP NOT NULL,
    ShippedDate     TIMESTAMP,
    ShipVia         INTEGER NOT NULL,
    Freight         NUMERIC(19,4) NOT NULL DEFAULT 0,
    ShipName        VARCHAR(40) NOT NULL,
    ShipAddress     VARCHAR(60) NOT NULL,
    ShipCity        VARCHAR(15) NOT NULL,
    ShipRegion      VARCHAR(15),
    ShipPostalCode  VARCHAR(10) NOT NULL,
    ShipCountry     VARCHAR(15) NOT NULL
);

CREATE TABLE IF NOT EXISTS OrderDetails (
    OrderID         INTEGER NOT NULL REFERENCES Orders(OrderID),
    ProductID       INTEGER NOT NULL REFERENCES Products(ProductID),
    UnitPrice       NUMERIC(19,4) NOT NULL,
    Quantity        INTEGER NOT NULL,
    Discount        REAL NOT NULL DEFAULT 0,
    PRIMARY KEY (OrderID, ProductID)
);

CREATE INDEX IF NOT EXISTS idx_orderdetails_product ON OrderDetails(ProductID);
"""


def render_schema(backend: Backend) -> str:
    """Return SCHEMA_SQL with the backend's identity column type filled in."""
    return SCHEMA_SQL.format(identity=backend.identity_column)


def create_tables(backend: Optional[Backend] = None) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    backend = backend or get_backend()
    conn = backend.connect()
    try:
        backend.run_script(conn, render_schema(backend))
        conn.commit()
        logger.info(f"Database schema initialized successfully ({backend.name}).")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        conn.close()


if __name__ == "__main__":
    create_tables()
    print("✅ Database schema created successfully.")

"""
repositories/lookups.py
-----------------------
Point lookups for the entities an order references.

Each lookup is a single independent query on the caller's unit of work.
Structural references (employee, shipper, product) must exist; display
names (customer, supplier, category) fall back to a placeholder.
"""

from typing import Optional

from db.params import Parameters
from db.unit_of_work import UnitOfWork
from models.order import Employee, Product, Shipper
from repositories.exceptions import NotFoundError
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_COMPANY_NAME = "Default Company Name"
DEFAULT_SUPPLIER_NAME = "Default Supplier Name"
DEFAULT_CATEGORY_NAME = "Default Category Name"


class LookupResolver:
    """Resolves foreign-key references against one open unit of work."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    # ── DISPLAY NAMES ─────────────────────────────────────

    def _name_or_default(self, sql: str, params: Parameters, default: str, what: str) -> str:
        name = self.uow.scalar(sql, params)
        if name is None:
            logger.warning(f"No {what} name found, using '{default}'")
            return default
        return name

    def customer_name(self, customer_id: str) -> str:
        """Company name of a customer, or the default placeholder."""
        sql = "SELECT CompanyName FROM Customers WHERE CustomerID = %(customer_id)s;"
        return self._name_or_default(
            sql, Parameters(customer_id=customer_id), DEFAULT_COMPANY_NAME,
            f"customer '{customer_id}'",
        )

    def supplier_name(self, supplier_id: Optional[int]) -> str:
        sql = "SELECT CompanyName FROM Suppliers WHERE SupplierID = %(supplier_id)s;"
        return self._name_or_default(
            sql, Parameters(supplier_id=supplier_id), DEFAULT_SUPPLIER_NAME,
            f"supplier {supplier_id}",
        )

    def category_name(self, category_id: Optional[int]) -> str:
        sql = "SELECT CategoryName FROM Categories WHERE CategoryID = %(category_id)s;"
        return self._name_or_default(
            sql, Parameters(category_id=category_id), DEFAULT_CATEGORY_NAME,
            f"category {category_id}",
        )

    # ── REQUIRED REFERENCES ───────────────────────────────

    def employee(self, employee_id: int) -> Employee:
        """
        Fetch the employee who took an order.

        Raises:
            NotFoundError: If no Employees row has this id.
        """
        sql = """
            SELECT EmployeeID, FirstName, LastName, Country
            FROM Employees WHERE EmployeeID = %(employee_id)s;
        """
        row = self.uow.fetch_one(sql, Parameters(employee_id=employee_id))
        if row is None:
            raise NotFoundError(f"Employee with ID {employee_id} not found.")
        return Employee(
            id=int(row["employeeid"]),
            first_name=row["firstname"],
            last_name=row["lastname"],
            country=row["country"],
        )

    def shipper(self, shipper_id: int) -> Shipper:
        """
        Fetch the shipper an order ships via.

        Raises:
            NotFoundError: If no Shippers row has this id.
        """
        sql = "SELECT ShipperID, CompanyName FROM Shippers WHERE ShipperID = %(shipper_id)s;"
        row = self.uow.fetch_one(sql, Parameters(shipper_id=shipper_id))
        if row is None:
            raise NotFoundError(f"Shipper with ID {shipper_id} not found.")
        return Shipper(id=int(row["shipperid"]), company_name=row["companyname"])

    def product(self, product_id: int) -> Product:
        """
        Fetch a product, then its supplier and category names.

        Raises:
            NotFoundError: If no Products row has this id.
        """
        sql = """
            SELECT ProductID, ProductName, SupplierID, CategoryID
            FROM Products WHERE ProductID = %(product_id)s;
        """
        row = self.uow.fetch_one(sql, Parameters(product_id=product_id))
        if row is None:
            raise NotFoundError(f"Product with ID {product_id} not found.")
        supplier_id = row["supplierid"]
        category_id = row["categoryid"]
        return Product(
            id=int(row["productid"]),
            product_name=row["productname"],
            supplier_id=supplier_id,
            category_id=category_id,
            supplier=self.supplier_name(supplier_id),
            category=self.category_name(category_id),
        )

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Seller(BaseModel):
    """A seller as supplied by the source system."""

    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)

    id: str
    first_name: str = ""
    last_name: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Product(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)

    sku: str
    purchase_price: float = Field(..., ge=0)


class Item(BaseModel):
    """One line of a purchase record."""

    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)

    sku: str
    quantity: int = Field(..., gt=0)
    sale_price: float = Field(..., ge=0)
    discount: float = Field(default=0, ge=0, le=100)


class PurchaseRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)

    seller_id: str
    items: list[Item] = Field(default_factory=list)
    # Informational only; revenue is always rebuilt from the items.
    total_amount: Optional[float] = None


class SalesDataset(BaseModel):
    """The three collections a seller report is computed from."""

    model_config = ConfigDict(extra="ignore")

    sellers: list[Seller]
    products: list[Product]
    purchase_records: list[PurchaseRecord]


class TopProduct(BaseModel):
    model_config = ConfigDict(frozen=True)

    sku: str
    quantity: int = Field(..., ge=0)


class SellerStat(BaseModel):
    """
    Running totals for one seller. Revenue and profit are kept at full
    precision here; rounding happens only when the report row is built.
    """

    seller_id: str
    name: str
    revenue: float = 0.0
    profit: float = 0.0
    sales_count: int = 0
    products_sold: dict[str, int] = Field(default_factory=dict)
    bonus: float = 0.0
    top_products: list[TopProduct] = Field(default_factory=list)


class SellerReport(BaseModel):
    """
    Defines the data contract for a single row of the final seller report.
    The aliases double as the CSV column headers.
    """

    seller_id: str = Field(..., alias="Seller ID")
    name: str = Field(..., alias="Name")
    revenue: float = Field(..., alias="Revenue")
    profit: float = Field(..., alias="Profit")
    sales_count: int = Field(default=0, ge=0, alias="Sales Count")
    top_products: list[TopProduct] = Field(default_factory=list, alias="Top Products")
    bonus: float = Field(default=0.0, alias="Bonus")

    # Allows construction by field name as well as by the CSV-friendly aliases.
    model_config = ConfigDict(populate_by_name=True, frozen=True)

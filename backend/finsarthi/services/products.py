"""Static catalog of example financial products used to ground AI suggestions."""

from typing import Literal, get_args

from pydantic import BaseModel

ProductCategory = Literal["savings", "investment", "loan"]
PRODUCT_CATEGORIES: tuple[str, ...] = get_args(ProductCategory)


class FinancialProduct(BaseModel):
    id: str
    name: str
    category: ProductCategory
    description: str


CATALOG: list[FinancialProduct] = [
    FinancialProduct(id="hys-1", name="SecureBank High-Yield Savings", category="savings",
                     description="A high-interest savings account with no monthly fees."),
    FinancialProduct(id="hys-2", name="FinFuture Online Savings", category="savings",
                     description="Easy-to-use online savings with competitive interest rates."),
    FinancialProduct(id="cd-1", name="CapitalGrowth 12-Month CD", category="savings",
                     description="A fixed-rate certificate of deposit for guaranteed returns."),
    FinancialProduct(id="mf-1", name="Global Tech Leaders Mutual Fund", category="investment",
                     description="Invests in a diversified portfolio of leading technology companies."),
    FinancialProduct(id="etf-1", name="All-World Index ETF", category="investment",
                     description="A low-cost ETF that tracks the global stock market."),
    FinancialProduct(id="bond-1", name="Govt. Infrastructure Bond", category="investment",
                     description="A government-backed bond with stable, long-term returns."),
    FinancialProduct(id="pl-1", name="SwiftCash Personal Loan", category="loan",
                     description="Flexible personal loans for various needs with quick approval."),
    FinancialProduct(id="hl-1", name="HomeFirst Mortgage Plan", category="loan",
                     description="Affordable home loans with multiple repayment options."),
    FinancialProduct(id="cl-1", name="AutoDrive Car Loan", category="loan",
                     description="Competitive interest rates for new and used car purchases."),
]


def get_products(category: str) -> list[dict[str, str]]:
    """Return name/description pairs for one category."""
    if category not in PRODUCT_CATEGORIES:
        raise ValueError(f"Unknown product category: {category}")
    return [
        {"name": product.name, "description": product.description}
        for product in CATALOG
        if product.category == category
    ]


def find_financial_products(category: str) -> list[dict[str, str]]:
    """Finds financial products for a category: savings, investment or loan.

    Use this to recommend specific product examples to the user.
    """
    return get_products(category)

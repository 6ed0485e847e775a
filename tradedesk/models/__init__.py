from tradedesk.models.customers import Customer
from tradedesk.models.products import Product
from tradedesk.models.customer_products import CustomerProduct
from tradedesk.models.sales import Sale
from tradedesk.models.sale_products import SaleProduct
from tradedesk.models.users import User

__all__ = [
    "Customer",
    "Product",
    "CustomerProduct",
    "Sale",
    "SaleProduct",
    "User",
]

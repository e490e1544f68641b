"""Ad Exchange Seller API surface."""

from .call import ApiCall
from .media import MediaDownload
from .pagination import iter_items, iter_pages
from .resources import DATE_PATTERN
from .service import AdExchangeSellerService

__all__ = [
    "AdExchangeSellerService",
    "ApiCall",
    "MediaDownload",
    "iter_pages",
    "iter_items",
    "DATE_PATTERN",
]

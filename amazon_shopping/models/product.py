"""
Canonical search data contract.
Everything the caller sees depends on this shape.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, List, Dict, Any, Union

Amount = Union[Decimal, float, int]


@dataclass(frozen=True)
class SearchQuery:
    """
    Caller search parameters.
    Validated by the tool layer, never re-validated by the client.
    """
    keywords: str
    category: Optional[str] = None
    min_price: Optional[Amount] = None
    max_price: Optional[Amount] = None
    sort_by: Optional[str] = None


@dataclass(frozen=True)
class NormalizedPrice:
    """Price of the first offer listing. `display` is always present."""
    display: str
    amount: Optional[float] = None
    currency: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"display": self.display}
        if self.amount is not None:
            data["amount"] = self.amount
        if self.currency is not None:
            data["currency"] = self.currency
        return data


@dataclass(frozen=True)
class ProductSummary:
    """
    Stable product shape returned for every search item.
    Optional fields are absent (None) rather than empty.
    """
    asin: str
    title: str
    detail_page_url: Optional[str] = None
    price: Optional[NormalizedPrice] = None
    rating: Optional[float] = None
    total_reviews: Optional[int] = None
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization, omitting absent fields."""
        data: Dict[str, Any] = {"asin": self.asin, "title": self.title}
        if self.detail_page_url is not None:
            data["detailPageUrl"] = self.detail_page_url
        if self.price is not None:
            data["price"] = self.price.to_dict()
        if self.rating is not None:
            data["rating"] = self.rating
        if self.total_reviews is not None:
            data["totalReviews"] = self.total_reviews
        if self.image_url is not None:
            data["imageUrl"] = self.image_url
        return data


@dataclass(frozen=True)
class SearchResult:
    """Products in provider reply order, plus the provider request id."""
    products: List[ProductSummary] = field(default_factory=list)
    request_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "products": [product.to_dict() for product in self.products]
        }
        if self.request_id is not None:
            data["requestId"] = self.request_id
        return data

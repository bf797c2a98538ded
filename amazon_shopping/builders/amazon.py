"""
Builds the SearchItems request document from a caller query.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple

from amazon_shopping.models.product import Amount, SearchQuery
from amazon_shopping.models.request import ProviderRequestDocument

# Requested response fields. Order is part of the request body.
SEARCH_RESOURCES: Tuple[str, ...] = (
    "Images.Primary.Small",
    "Images.Primary.Medium",
    "ItemInfo.Title",
    "ItemInfo.ByLineInfo",
    "Offers.Listings.Price",
    "CustomerReviews.Count",
    "CustomerReviews.StarRating",
)


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, ties away from zero."""
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def to_minor_units(amount: Amount) -> Optional[int]:
    """
    Convert a currency amount to integer minor units (cents).

    Uses the decimal value of the amount so 0.005 becomes 1 and 19.999
    becomes 2000. Negative amounts clamp to 0. Infinite or NaN amounts
    return None, meaning no price filter.
    """
    cents = Decimal(str(amount)) * 100
    if not cents.is_finite():
        return None
    return max(0, round_half_up(cents))


def _minor_units_or_none(amount: Optional[Amount]) -> Optional[int]:
    return to_minor_units(amount) if amount is not None else None


class AmazonRequestBuilder:
    """Turns a SearchQuery into the provider request document."""

    @staticmethod
    def build(query: SearchQuery, partner_tag: str) -> ProviderRequestDocument:
        return ProviderRequestDocument(
            keywords=query.keywords,
            partner_tag=partner_tag,
            resources=SEARCH_RESOURCES,
            search_index=query.category or None,
            sort_by=query.sort_by or None,
            min_price=_minor_units_or_none(query.min_price),
            max_price=_minor_units_or_none(query.max_price),
        )

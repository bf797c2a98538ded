"""
Explicit normalization layer.
Converts raw SearchItems replies into the stable SearchResult shape.
"""
import json
import logging
import math
from decimal import Decimal
from typing import List, Dict, Any, Optional

from amazon_shopping.builders.amazon import round_half_up
from amazon_shopping.errors import MalformedResponse, ProviderRejected
from amazon_shopping.models.product import NormalizedPrice, ProductSummary, SearchResult

logger = logging.getLogger(__name__)

UNKNOWN_CODE = "UnknownCode"
UNKNOWN_MESSAGE = "Unknown error from Amazon Product Advertising API"
IMAGE_SIZES = ("Medium", "Small", "Large")


def dig(data: Any, *path: str) -> Any:
    """Follow nested keys, returning None as soon as a level is missing or not a dict."""
    current = data
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def first_present(*values: Any) -> Any:
    """First value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def parse_number(value: Any) -> Optional[float]:
    """Accept finite numbers or numeric strings."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def parse_integer(value: Any) -> Optional[int]:
    """parse_number, then round half away from zero."""
    number = parse_number(value)
    if number is None:
        return None
    return round_half_up(Decimal(str(number)))


def format_error_messages(errors: Any) -> Optional[str]:
    """Join provider errors as "<Code>: <Message>; ..." or None if there are none."""
    if not isinstance(errors, list) or not errors:
        return None

    parts = []
    for error in errors:
        code = dig(error, "Code")
        message = dig(error, "Message")
        parts.append(f"{code if code is not None else UNKNOWN_CODE}: "
                     f"{message if message is not None else UNKNOWN_MESSAGE}")
    return "; ".join(parts)


class AmazonNormalizer:
    """
    Normalizes raw Product Advertising API replies.
    Per-item problems degrade to missing fields, never to errors.
    """

    @staticmethod
    def normalize(raw_text: str, http_status: int) -> SearchResult:
        """
        Turn a raw reply into a SearchResult.

        Args:
            raw_text: Reply body as text
            http_status: HTTP status code of the reply

        Returns:
            SearchResult with products in reply order. Items without an ASIN
            are dropped, so products can be shorter than the reply item list.

        Raises:
            MalformedResponse: If the body is not a JSON object
            ProviderRejected: If the reply carries errors or a non-2xx status
        """
        payload = AmazonNormalizer.parse_payload(raw_text)

        error_message = format_error_messages(payload.get("Errors"))
        if error_message is not None:
            raise ProviderRejected(error_message)

        if not 200 <= http_status < 300:
            raise ProviderRejected(f"Amazon API responded with status {http_status}")

        items = dig(payload, "SearchResult", "Items")
        products = AmazonNormalizer.normalize_batch(items if isinstance(items, list) else [])

        request_id = payload.get("RequestId")
        return SearchResult(
            products=products,
            request_id=request_id if isinstance(request_id, str) and request_id else None,
        )

    @staticmethod
    def parse_payload(raw_text: str) -> Dict[str, Any]:
        if not raw_text:
            return {}

        try:
            payload = json.loads(raw_text)
        except ValueError as e:
            raise MalformedResponse(
                f"Unable to parse Amazon API response as JSON: {str(e)}"
            ) from e

        if not isinstance(payload, dict):
            raise MalformedResponse(
                f"Unable to parse Amazon API response as JSON: expected an object, "
                f"got {type(payload).__name__}"
            )
        return payload

    @staticmethod
    def normalize_batch(raw_items: List[Any]) -> List[ProductSummary]:
        """
        Normalize items in order.
        Items without an ASIN cannot be identified and are skipped.
        """
        normalized = []

        for index, raw in enumerate(raw_items):
            product = AmazonNormalizer.normalize_item(raw)
            if product is None:
                logger.warning(f"Skipping search item {index}: no ASIN")
                continue
            normalized.append(product)

        return normalized

    @staticmethod
    def normalize_item(item: Any) -> Optional[ProductSummary]:
        asin = non_empty_str(dig(item, "ASIN"))
        if asin is None:
            return None

        reviews = dig(item, "CustomerReviews")
        rating = parse_number(dig(reviews, "StarRating"))
        if rating is not None and not 0 <= rating <= 5:
            rating = None

        total_reviews = parse_integer(first_present(
            dig(reviews, "TotalReviewCount"),
            dig(reviews, "Count"),
        ))
        if total_reviews is not None and total_reviews < 0:
            total_reviews = None

        return ProductSummary(
            asin=asin,
            title=non_empty_str(dig(item, "ItemInfo", "Title", "DisplayValue")) or asin,
            detail_page_url=non_empty_str(dig(item, "DetailPageURL")),
            price=AmazonNormalizer._normalize_price(item),
            rating=rating,
            total_reviews=total_reviews,
            image_url=AmazonNormalizer._extract_image_url(item),
        )

    @staticmethod
    def _normalize_price(item: Any) -> Optional[NormalizedPrice]:
        """Price of the first listing; no display amount means no price."""
        listings = dig(item, "Offers", "Listings")
        if not isinstance(listings, list) or not listings:
            return None

        price = dig(listings[0], "Price")
        display = non_empty_str(dig(price, "DisplayAmount"))
        if display is None:
            return None

        amount = dig(price, "Amount")
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount):
            amount = None

        return NormalizedPrice(
            display=display,
            amount=amount,
            currency=non_empty_str(dig(price, "Currency")),
        )

    @staticmethod
    def _extract_image_url(item: Any) -> Optional[str]:
        primary = dig(item, "Images", "Primary")
        for size in IMAGE_SIZES:
            url = non_empty_str(dig(primary, size, "URL"))
            if url:
                return url
        return None

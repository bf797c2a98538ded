"""
search_products tool: caller-facing validation and result formatting.
Shared by the MCP server and the HTTP API.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from amazon_shopping.errors import InputValidationError
from amazon_shopping.models.product import SearchQuery, SearchResult
from amazon_shopping.services.amazon_service import AmazonClient

TOOL_NAME = "search_products"
TOOL_TITLE = "Amazon Product Search"
TOOL_DESCRIPTION = (
    "Search Amazon for products using keywords with optional category and price filters."
)

SortKey = Literal[
    "Featured",
    "Price:LowToHigh",
    "Price:HighToLow",
    "NewestArrivals",
    "AvgCustomerReviews",
]


class SearchProductsInput(BaseModel):
    """Arguments accepted by the search_products tool."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    keywords: str = Field(min_length=1, description="Provide at least one keyword to search for.")
    category: Optional[str] = Field(default=None, min_length=1, description="Amazon search index, e.g. Electronics.")
    min_price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False, alias="minPrice")
    max_price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False, alias="maxPrice")
    sort_by: Optional[SortKey] = Field(default=None, alias="sortBy")

    @model_validator(mode="after")
    def check_price_range(self) -> "SearchProductsInput":
        if (self.min_price is not None and self.max_price is not None
                and self.min_price > self.max_price):
            raise ValueError("minPrice cannot be greater than maxPrice.")
        return self

    def to_query(self) -> SearchQuery:
        return SearchQuery(
            keywords=self.keywords,
            category=self.category,
            min_price=self.min_price,
            max_price=self.max_price,
            sort_by=self.sort_by,
        )


class PriceOutput(BaseModel):
    display: str
    amount: Optional[float] = None
    currency: Optional[str] = None


class ProductOutput(BaseModel):
    """Serialized ProductSummary."""
    model_config = ConfigDict(populate_by_name=True)

    asin: str
    title: str
    detail_page_url: Optional[str] = Field(default=None, alias="detailPageUrl")
    price: Optional[PriceOutput] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    total_reviews: Optional[int] = Field(default=None, ge=0, alias="totalReviews")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")


class SearchProductsOutput(BaseModel):
    """Structured content returned by the search_products tool."""
    model_config = ConfigDict(populate_by_name=True)

    products: List[ProductOutput]
    request_id: Optional[str] = Field(default=None, alias="requestId")


def input_schema() -> Dict[str, Any]:
    """JSON schema advertised to tool callers (camelCase argument names)."""
    return SearchProductsInput.model_json_schema(by_alias=True)


def output_schema() -> Dict[str, Any]:
    """JSON schema of SearchResult.to_dict()."""
    return SearchProductsOutput.model_json_schema(by_alias=True)


def validate_search_input(arguments: Mapping[str, Any]) -> SearchQuery:
    """
    Validate raw tool arguments.

    Raises:
        InputValidationError: with every problem, one per line
    """
    try:
        parsed = SearchProductsInput.model_validate(dict(arguments or {}))
    except ValidationError as e:
        details = "\n".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'input'}: {error['msg']}"
            for error in e.errors()
        )
        raise InputValidationError(f"Invalid search_products arguments.\n{details}") from e
    return parsed.to_query()


def _format_rating(rating: float) -> str:
    return f"{Decimal(str(rating)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)}"


def format_product_results(result: SearchResult, query: str) -> str:
    """Plain-text listing for chat clients."""
    if not result.products:
        return f'No products found for "{query}".'

    blocks = []
    for index, product in enumerate(result.products, start=1):
        lines = [f"{index}. {product.title} (ASIN: {product.asin})"]

        if product.price is not None:
            lines.append(f"   Price: {product.price.display}")

        if product.rating is not None:
            reviews_text = ""
            if product.total_reviews is not None:
                plural = "" if product.total_reviews == 1 else "s"
                reviews_text = f" from {product.total_reviews} review{plural}"
            lines.append(f"   Rating: {_format_rating(product.rating)}{reviews_text}")

        if product.detail_page_url:
            lines.append(f"   URL: {product.detail_page_url}")

        if product.image_url:
            lines.append(f"   Image: {product.image_url}")

        blocks.append("\n".join(lines))

    return "\n\n".join(blocks)


async def run_search_products(client: AmazonClient, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate, search, and package text plus structured content."""
    query = validate_search_input(arguments)
    result = await client.search(query)

    return {
        "content": [
            {"type": "text", "text": format_product_results(result, query.keywords)}
        ],
        "structuredContent": result.to_dict(),
    }

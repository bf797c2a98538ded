"""
Test data contract stability.
Serialized results must keep their camelCase shape and omit absent fields.
"""
import pytest
from dataclasses import FrozenInstanceError

from amazon_shopping.models.product import (
    NormalizedPrice,
    ProductSummary,
    SearchQuery,
    SearchResult,
)
from amazon_shopping.models.request import ProviderRequestDocument, SignedRequest


def test_full_product_contract():
    product = ProductSummary(
        asin="B0TEST1234",
        title="Test Product",
        detail_page_url="https://amazon.example/dp/B0TEST1234",
        price=NormalizedPrice(display="$29.99", amount=29.99, currency="USD"),
        rating=4.5,
        total_reviews=100,
        image_url="https://images.example/medium.jpg",
    )

    assert product.to_dict() == {
        "asin": "B0TEST1234",
        "title": "Test Product",
        "detailPageUrl": "https://amazon.example/dp/B0TEST1234",
        "price": {"display": "$29.99", "amount": 29.99, "currency": "USD"},
        "rating": 4.5,
        "totalReviews": 100,
        "imageUrl": "https://images.example/medium.jpg",
    }


def test_minimal_product_omits_absent_fields():
    product = ProductSummary(asin="B0TEST1234", title="B0TEST1234")

    assert not hasattr(product, "has_price")
    assert product.to_dict() == {"asin": "B0TEST1234", "title": "B0TEST1234"}


def test_price_without_amount_or_currency():
    assert NormalizedPrice(display="See price in cart").to_dict() == {
        "display": "See price in cart"
    }


def test_search_result_contract():
    result = SearchResult(
        products=[ProductSummary(asin="B000000001", title="One")],
        request_id="REQ-1",
    )

    assert result.to_dict() == {
        "products": [{"asin": "B000000001", "title": "One"}],
        "requestId": "REQ-1",
    }
    assert SearchResult().to_dict() == {"products": []}


def test_value_objects_are_immutable():
    query = SearchQuery(keywords="books")

    with pytest.raises(FrozenInstanceError):
        query.keywords = "games"


def test_request_document_contract():
    document = ProviderRequestDocument(
        keywords="lamp",
        partner_tag="tag-20",
        resources=("ItemInfo.Title",),
        max_price=500,
    )

    assert document.to_dict() == {
        "Keywords": "lamp",
        "PartnerTag": "tag-20",
        "PartnerType": "Associates",
        "Resources": ["ItemInfo.Title"],
        "MaxPrice": 500,
    }


def test_signed_request_header_map_preserves_values():
    request = SignedRequest(
        url="https://webservices.amazon.com/paapi5/searchitems",
        headers=(("Content-Type", "application/json"), ("Accept", "application/json")),
        body=b"{}",
    )

    assert request.method == "POST"
    assert request.header_map == {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }

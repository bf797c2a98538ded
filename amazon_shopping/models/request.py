"""
Outbound request contract for the Product Advertising API.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple, Dict, Any

PARTNER_TYPE = "Associates"


@dataclass(frozen=True)
class ProviderRequestDocument:
    """SearchItems request body, before JSON serialization."""
    keywords: str
    partner_tag: str
    resources: Tuple[str, ...]
    partner_type: str = PARTNER_TYPE
    search_index: Optional[str] = None
    sort_by: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Provider field names; optional filters only when supplied."""
        data: Dict[str, Any] = {
            "Keywords": self.keywords,
            "PartnerTag": self.partner_tag,
            "PartnerType": self.partner_type,
            "Resources": list(self.resources),
        }
        if self.search_index is not None:
            data["SearchIndex"] = self.search_index
        if self.sort_by is not None:
            data["SortBy"] = self.sort_by
        if self.min_price is not None:
            data["MinPrice"] = self.min_price
        if self.max_price is not None:
            data["MaxPrice"] = self.max_price
        return data


@dataclass(frozen=True)
class SigningContext:
    """Per-request signing inputs. Never persisted."""
    access_key_id: str
    secret_key: str
    region: str
    service_name: str
    host: str
    path: str
    target: str
    timestamp: datetime

    def __repr__(self) -> str:
        # keep the secret out of logs and tracebacks
        return (
            f"SigningContext(access_key_id={self.access_key_id!r}, region={self.region!r}, "
            f"service_name={self.service_name!r}, host={self.host!r}, path={self.path!r}, "
            f"target={self.target!r}, timestamp={self.timestamp!r})"
        )


@dataclass(frozen=True)
class SignedRequest:
    """Fully signed HTTP request, ready for the transport."""
    url: str
    headers: Tuple[Tuple[str, str], ...]
    body: bytes
    method: str = "POST"

    @property
    def header_map(self) -> Dict[str, str]:
        return dict(self.headers)

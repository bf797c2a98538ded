"""
AWS Signature Version 4 for the Product Advertising API.

Pure functions of their inputs: the timestamp arrives through the
SigningContext, nothing here reads the wall clock.
"""
import hashlib
import hmac
from datetime import datetime, timezone
from typing import Optional, Sequence, Tuple

from amazon_shopping.models.request import SigningContext

ALGORITHM = "AWS4-HMAC-SHA256"
SCOPE_TERMINATOR = "aws4_request"
CONTENT_ENCODING = "amz-1.0"
CONTENT_TYPE = "application/json; charset=UTF-8"

HeaderPairs = Sequence[Tuple[str, str]]


def _sign(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def format_amz_date(timestamp: datetime) -> str:
    """YYYYMMDDTHHMMSSZ in UTC. Naive datetimes are taken as UTC."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc)
    return timestamp.strftime("%Y%m%dT%H%M%SZ")


def get_signature_key(secret_key: str, date_stamp: str, region: str, service_name: str) -> bytes:
    k_date = _sign(("AWS4" + secret_key).encode("utf-8"), date_stamp)
    k_region = _sign(k_date, region)
    k_service = _sign(k_region, service_name)
    return _sign(k_service, SCOPE_TERMINATOR)


def standard_headers(ctx: SigningContext, amz_date: str) -> Tuple[Tuple[str, str], ...]:
    """The signed PA-API header set. Order is load-bearing."""
    return (
        ("content-encoding", CONTENT_ENCODING),
        ("content-type", CONTENT_TYPE),
        ("host", ctx.host),
        ("x-amz-date", amz_date),
        ("x-amz-target", ctx.target),
    )


def canonical_header_block(headers: HeaderPairs) -> Tuple[str, str]:
    """Return (canonical headers, signed headers list) for ordered pairs."""
    canonical = "".join(f"{name.lower()}:{value}\n" for name, value in headers)
    signed = ";".join(name.lower() for name, _ in headers)
    return canonical, signed


def credential_scope(date_stamp: str, region: str, service_name: str) -> str:
    return f"{date_stamp}/{region}/{service_name}/{SCOPE_TERMINATOR}"


class AWS4Signer:
    """Stateless AWS4-HMAC-SHA256 signer."""

    def canonical_request(self, method: str, path: str, headers: HeaderPairs, body: bytes) -> str:
        canonical_headers, signed_headers = canonical_header_block(headers)
        return "\n".join([
            method,
            path,
            "",
            canonical_headers,
            signed_headers,
            _sha256_hex(body),
        ])

    def string_to_sign(self, amz_date: str, scope: str, canonical_request: str) -> str:
        return "\n".join([
            ALGORITHM,
            amz_date,
            scope,
            _sha256_hex(canonical_request.encode("utf-8")),
        ])

    def sign(
        self,
        method: str,
        path: str,
        headers_to_sign: Optional[HeaderPairs],
        body: bytes,
        ctx: SigningContext,
    ) -> Tuple[str, str]:
        """
        Sign a request.

        Args:
            method: HTTP method
            path: Request path, no query string
            headers_to_sign: Ordered (name, value) pairs; None signs the
                standard PA-API header set for ctx
            body: Exact request body bytes
            ctx: Credentials, scope and timestamp

        Returns:
            (Authorization header value, X-Amz-Date header value)
        """
        amz_date = format_amz_date(ctx.timestamp)
        date_stamp = amz_date[:8]

        if headers_to_sign is None:
            headers_to_sign = standard_headers(ctx, amz_date)
        _, signed_headers = canonical_header_block(headers_to_sign)

        scope = credential_scope(date_stamp, ctx.region, ctx.service_name)
        canonical = self.canonical_request(method, path, headers_to_sign, body)
        to_sign = self.string_to_sign(amz_date, scope, canonical)

        signing_key = get_signature_key(ctx.secret_key, date_stamp, ctx.region, ctx.service_name)
        signature = hmac.new(signing_key, to_sign.encode("utf-8"), hashlib.sha256).hexdigest()

        authorization = (
            f"{ALGORITHM} Credential={ctx.access_key_id}/{scope}, "
            f"SignedHeaders={signed_headers}, Signature={signature}"
        )
        return authorization, amz_date

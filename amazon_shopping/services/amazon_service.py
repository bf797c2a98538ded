"""
Product Advertising API client.
Build, sign, send, normalize. Errors from any stage propagate unchanged.
"""
import json

from amazon_shopping.builders.amazon import AmazonRequestBuilder
from amazon_shopping.config import AmazonCredentials
from amazon_shopping.errors import ExternalServiceError
from amazon_shopping.logger import logger
from amazon_shopping.models.product import SearchQuery, SearchResult
from amazon_shopping.models.request import SignedRequest, SigningContext
from amazon_shopping.normalizers.amazon import AmazonNormalizer
from amazon_shopping.services.transport import Transport
from amazon_shopping.signing.aws4 import AWS4Signer, CONTENT_ENCODING, CONTENT_TYPE
from amazon_shopping.utils.clock import Clock, utc_now

SERVICE_NAME = "ProductAdvertisingAPI"
SEARCH_ITEMS_PATH = "/paapi5/searchitems"
SEARCH_ITEMS_TARGET = "com.amazon.paapi5.v1.ProductAdvertisingAPIv1.SearchItems"


class AmazonClient:
    """
    SearchItems client over an injected transport and clock.
    Holds no per-call state, so concurrent searches need no coordination.
    """
    
    def __init__(self, credentials: AmazonCredentials, transport: Transport,
                 clock: Clock = utc_now):
        self.credentials = credentials
        self.transport = transport
        self.clock = clock
        self.signer = AWS4Signer()
    
    async def search(self, query: SearchQuery) -> SearchResult:
        """
        Search Amazon for products.
        
        Args:
            query: Caller search parameters
            
        Returns:
            Normalized SearchResult
            
        Raises:
            TransportFailure: If the HTTP exchange fails
            MalformedResponse: If the reply is not JSON
            ProviderRejected: If Amazon reports an error
        """
        logger.info(f"Searching Amazon for: '{query.keywords}'")
        
        document = AmazonRequestBuilder.build(query, self.credentials.partner_tag)
        body = json.dumps(document.to_dict()).encode("utf-8")
        request = self.build_signed_request(body)
        
        response = await self.transport.send(
            request.method, request.url, request.header_map, request.body
        )
        
        try:
            result = AmazonNormalizer.normalize(response.body, response.status)
        except ExternalServiceError as e:
            logger.error(f"Amazon search for '{query.keywords}' failed "
                         f"(status {response.status}): {e}")
            raise

        logger.info(
            f"Amazon search for '{query.keywords}' returned {len(result.products)} products "
            f"(request id: {result.request_id})"
        )
        return result
    
    def signing_context(self) -> SigningContext:
        return SigningContext(
            access_key_id=self.credentials.access_key_id,
            secret_key=self.credentials.secret_key,
            region=self.credentials.region,
            service_name=SERVICE_NAME,
            host=self.credentials.host,
            path=SEARCH_ITEMS_PATH,
            target=SEARCH_ITEMS_TARGET,
            timestamp=self.clock(),
        )
    
    def build_signed_request(self, body: bytes) -> SignedRequest:
        """Sign a SearchItems body with the current clock reading."""
        ctx = self.signing_context()
        authorization, amz_date = self.signer.sign("POST", ctx.path, None, body, ctx)
        
        return SignedRequest(
            url=f"https://{ctx.host}{ctx.path}",
            headers=(
                ("Content-Encoding", CONTENT_ENCODING),
                ("Content-Type", CONTENT_TYPE),
                ("X-Amz-Date", amz_date),
                ("X-Amz-Target", ctx.target),
                ("Authorization", authorization),
                ("Accept", "application/json"),
            ),
            body=body,
        )

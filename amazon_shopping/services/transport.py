"""
HTTP transport for the Product Advertising API.
All network I/O is isolated here; the client only sees TransportResponse.
"""
import aiohttp
import asyncio
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Protocol

from amazon_shopping.config import config
from amazon_shopping.errors import TransportFailure
from amazon_shopping.logger import logger


@dataclass(frozen=True)
class TransportResponse:
    """Status, headers and raw body text of an HTTP reply."""
    status: int
    body: str
    headers: Dict[str, str] = field(default_factory=dict)


class Transport(Protocol):
    async def send(self, method: str, url: str, headers: Mapping[str, str],
                   body: bytes) -> TransportResponse:
        ...


class AiohttpTransport:
    """
    aiohttp-backed transport.
    Owns one ClientSession; timeouts are applied here, not by the client.
    """
    
    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT
        self.session: Optional[aiohttp.ClientSession] = None
    
    async def initialize(self):
        """Create the HTTP session."""
        if self.session is not None:
            return
        
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        logger.info(f"HTTP transport initialized (timeout: {self.timeout}s)")
    
    async def close(self):
        """Close HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None
    
    async def __aenter__(self) -> "AiohttpTransport":
        await self.initialize()
        return self
    
    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
    
    async def send(self, method: str, url: str, headers: Mapping[str, str],
                   body: bytes) -> TransportResponse:
        """
        Perform one HTTP exchange.
        
        Raises:
            TransportFailure: If the exchange could not complete
        """
        if self.session is None:
            await self.initialize()
        
        try:
            async with self.session.request(method, url, headers=dict(headers), data=body) as response:
                # undecodable bytes become U+FFFD; the normalizer judges the JSON
                text = await response.text(errors="replace")
                return TransportResponse(
                    status=response.status,
                    body=text,
                    headers=dict(response.headers)
                )
        except aiohttp.ClientError as e:
            logger.error(f"Network error calling {url}: {str(e)}")
            raise TransportFailure(f"Network error calling {url}: {str(e)}") from e
        except asyncio.TimeoutError as e:
            logger.error(f"Timeout calling {url}")
            raise TransportFailure(f"Timeout calling {url}") from e

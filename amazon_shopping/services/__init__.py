"""
Services package initialization.
Centralizes service imports.
"""

from amazon_shopping.services.amazon_service import AmazonClient
from amazon_shopping.services.transport import AiohttpTransport, Transport, TransportResponse

__all__ = [
    'AmazonClient',
    'AiohttpTransport',
    'Transport',
    'TransportResponse'
]

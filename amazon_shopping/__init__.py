"""
Amazon Shopping - signed Product Advertising API search with normalized results.
"""

__version__ = "0.1.0"

from amazon_shopping.config import config, AmazonCredentials, load_amazon_credentials
from amazon_shopping.logger import logger
from amazon_shopping.errors import (
    ConfigError,
    NetworkError,
    ExternalServiceError,
    InputValidationError,
    TransportFailure,
    ProviderRejected,
    MalformedResponse
)

__all__ = [
    'config',
    'logger',
    'AmazonCredentials',
    'load_amazon_credentials',
    'ConfigError',
    'NetworkError',
    'ExternalServiceError',
    'InputValidationError',
    'TransportFailure',
    'ProviderRejected',
    'MalformedResponse'
]

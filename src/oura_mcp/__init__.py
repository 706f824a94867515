"""Oura MCP Server Package

A Model Context Protocol (MCP) server exposing the Oura ring API as
resources and tools, with stdout guarded so only protocol frames reach
the transport.
"""

from .auth import AuthMode, CredentialProvider, OAuthCredential, StaticToken
from .catalog import ENDPOINTS, EndpointDescriptor
from .client import OuraClient
from .config import Config, get_config
from .consts import PACKAGE_VERSION
from .dispatcher import RequestDispatcher
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    OuraMCPError,
    UpstreamError,
    ValidationError,
)
from .models import DateRange
from .output_guard import OutputGuard

__version__ = PACKAGE_VERSION

__all__ = [
    "__version__",
    "get_config",
    "Config",
    "AuthMode",
    "CredentialProvider",
    "StaticToken",
    "OAuthCredential",
    "ENDPOINTS",
    "EndpointDescriptor",
    "DateRange",
    "OuraClient",
    "RequestDispatcher",
    "OutputGuard",
    "OuraMCPError",
    "ConfigurationError",
    "ValidationError",
    "AuthenticationError",
    "UpstreamError",
]

"""External service clients.

All clients inherit from BaseHTTPClient and convert httpx failures into
``TransportError``.
"""

from repo_pager.infra.external.base_client import BaseHTTPClient
from repo_pager.infra.external.graphql_client import GraphQLClient
from repo_pager.infra.external.tabby import TabbyRepositoryClient

__all__ = [
    "BaseHTTPClient",
    "GraphQLClient",
    "TabbyRepositoryClient",
]

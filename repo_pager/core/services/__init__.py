"""Base classes for business logic services."""

from repo_pager.core.services.base import BaseService

__all__ = ["BaseService"]

"""
BinderKeep services.

Business logic for collection tracking and the external collaborators it
consumes (card catalog, identity provider).
"""

from binderkeep.services.catalog import CatalogClient, CatalogError
from binderkeep.services.collection_service import CollectionService
from binderkeep.services.identity import (
    HttpIdentityVerifier,
    IdentityVerifier,
    StaticIdentityVerifier,
    get_identity_verifier,
)
from binderkeep.services.user_directory import resolve_account

__all__ = [
    "CatalogClient",
    "CatalogError",
    "CollectionService",
    "HttpIdentityVerifier",
    "IdentityVerifier",
    "StaticIdentityVerifier",
    "get_identity_verifier",
    "resolve_account",
]

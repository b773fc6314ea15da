"""Client-side helpers: the local shadow store and the storefront API client"""

from .shadow_store import (
    ShadowCartItem,
    ShadowWishlistItem,
    LocalShadowStore,
    InMemoryShadowStore,
    JsonFileShadowStore,
    ShadowStoreSync,
)
from .sinks import ShadowSink, AccessLayerSink
from .storefront import StorefrontClient

__all__ = [
    "ShadowCartItem",
    "ShadowWishlistItem",
    "LocalShadowStore",
    "InMemoryShadowStore",
    "JsonFileShadowStore",
    "ShadowStoreSync",
    "ShadowSink",
    "AccessLayerSink",
    "StorefrontClient",
]

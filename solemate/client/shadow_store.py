"""
Local shadow store

Device-local mirror of cart and wishlist state kept before the shopper has
any server-side identity. It is an injectable capability: nothing reads it
implicitly, and :class:`ShadowStoreSync` pushes it to an owner explicitly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging
import uuid

from solemate.services.owner import Owner
from solemate.services.migration_service import BestEffort

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class ShadowCartItem:
    variant_id: uuid.UUID
    quantity: int

@dataclass(frozen=True)
class ShadowWishlistItem:
    product_id: uuid.UUID
    variant_id: Optional[uuid.UUID] = None

def _empty_state() -> Dict[str, Any]:
    return {"cart": {}, "wishlist": []}

class LocalShadowStore(ABC):
    """
    Cart/wishlist mirror with the same merge rules as the server

    Subclasses only decide where the state lives (``_load`` / ``_save``).
    Repeated cart adds sum quantities; repeated wishlist adds are no-ops.
    """

    @abstractmethod
    def _load(self) -> Dict[str, Any]:
        ...

    @abstractmethod
    def _save(self, state: Dict[str, Any]) -> None:
        ...

    def cart_items(self) -> List[ShadowCartItem]:
        return [
            ShadowCartItem(variant_id=uuid.UUID(variant_id), quantity=quantity)
            for variant_id, quantity in self._load()["cart"].items()
        ]

    def wishlist_items(self) -> List[ShadowWishlistItem]:
        return [
            ShadowWishlistItem(
                product_id=uuid.UUID(product_id),
                variant_id=uuid.UUID(variant_id) if variant_id else None
            )
            for product_id, variant_id in self._load()["wishlist"]
        ]

    def is_empty(self) -> bool:
        state = self._load()
        return not state["cart"] and not state["wishlist"]

    def add_cart_item(self, variant_id: uuid.UUID, quantity: int = 1) -> ShadowCartItem:
        if quantity <= 0:
            raise ValueError(f"Quantity must be greater than 0, got {quantity}")

        state = self._load()
        key = str(variant_id)
        state["cart"][key] = state["cart"].get(key, 0) + quantity
        self._save(state)
        return ShadowCartItem(variant_id=variant_id, quantity=state["cart"][key])

    def remove_cart_item(self, variant_id: uuid.UUID, quantity: Optional[int] = None) -> None:
        """Drop ``quantity`` units (all of them when None)"""
        state = self._load()
        key = str(variant_id)
        if key not in state["cart"]:
            return

        remaining = 0 if quantity is None else state["cart"][key] - quantity
        if remaining > 0:
            state["cart"][key] = remaining
        else:
            del state["cart"][key]
        self._save(state)

    def add_wishlist_item(
        self,
        product_id: uuid.UUID,
        variant_id: Optional[uuid.UUID] = None
    ) -> ShadowWishlistItem:
        state = self._load()
        key = self._wishlist_key(product_id, variant_id)
        if key not in state["wishlist"]:
            state["wishlist"].append(key)
            self._save(state)
        return ShadowWishlistItem(product_id=product_id, variant_id=variant_id)

    def remove_wishlist_item(self, product_id: uuid.UUID, variant_id: Optional[uuid.UUID] = None) -> None:
        state = self._load()
        key = self._wishlist_key(product_id, variant_id)
        if key in state["wishlist"]:
            state["wishlist"].remove(key)
            self._save(state)

    def clear(self) -> None:
        self._save(_empty_state())

    @staticmethod
    def _wishlist_key(product_id: uuid.UUID, variant_id: Optional[uuid.UUID]) -> List[Optional[str]]:
        # Lists rather than tuples so the state survives a JSON round trip
        return [str(product_id), str(variant_id) if variant_id else None]

class InMemoryShadowStore(LocalShadowStore):
    """Process-local store, mostly for tests and short-lived clients"""

    def __init__(self):
        self._state = _empty_state()

    def _load(self) -> Dict[str, Any]:
        return {
            "cart": dict(self._state["cart"]),
            "wishlist": [list(key) for key in self._state["wishlist"]],
        }

    def _save(self, state: Dict[str, Any]) -> None:
        self._state = state

class JsonFileShadowStore(LocalShadowStore):
    """Store persisted as a JSON document on the device"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return _empty_state()

        try:
            state = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning(f"Shadow store at {self.path} is corrupt, starting empty")
            return _empty_state()

        state.setdefault("cart", {})
        state.setdefault("wishlist", [])
        return state

    def _save(self, state: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(state), encoding="utf-8")
        tmp_path.replace(self.path)

class ShadowStoreSync:
    """Pushes a shadow store to a server-side owner through a sink"""

    def __init__(self, store: LocalShadowStore, sink):
        self.store = store
        self.sink = sink

    async def flush_to(self, owner: Owner) -> BestEffort:
        """
        Push every local item to ``owner``, one at a time

        An item leaves the local store only once the sink accepted it, so a
        partial failure keeps the rest for the next flush. Never raises.
        """
        cart_items = self.store.cart_items()
        wishlist_items = self.store.wishlist_items()

        if not cart_items and not wishlist_items:
            return BestEffort(attempted=False, succeeded=False)

        outcome = BestEffort(attempted=True, succeeded=True)

        for item in cart_items:
            try:
                await self.sink.add_to_cart(owner, item.variant_id, item.quantity)
            except Exception as e:
                logger.warning(f"Could not push shadow cart item {item.variant_id}: {e}", exc_info=True)
                outcome.succeeded = False
                outcome.error = str(e)
                continue

            self.store.remove_cart_item(item.variant_id, item.quantity)
            outcome.cart_merged += 1

        for item in wishlist_items:
            try:
                await self.sink.add_to_wishlist(owner, item.product_id, item.variant_id)
            except Exception as e:
                logger.warning(f"Could not push shadow wishlist item {item.product_id}: {e}", exc_info=True)
                outcome.succeeded = False
                outcome.error = str(e)
                continue

            self.store.remove_wishlist_item(item.product_id, item.variant_id)
            outcome.wishlist_merged += 1

        logger.info(
            f"Shadow store flush to {owner.kind} owner: "
            f"{outcome.cart_merged} cart items, {outcome.wishlist_merged} wishlist items"
        )
        return outcome

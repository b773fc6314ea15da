"""
Owner of cart and wishlist rows

Every storage call receives an ``Owner``: either an authenticated account or an
anonymous session. The helpers below are the only place that maps an owner onto
the ``account_id`` / ``session_id`` columns, so a row can never be written with
both or neither set.
"""

from dataclasses import dataclass
from typing import Any, Dict, Union
import uuid

@dataclass(frozen=True)
class AccountOwner:
    id: uuid.UUID

    kind = "account"

@dataclass(frozen=True)
class SessionOwner:
    id: str

    kind = "session"

Owner = Union[AccountOwner, SessionOwner]

def owner_column(model, owner: Owner):
    """Column of ``model`` that holds this kind of owner"""
    if isinstance(owner, AccountOwner):
        return model.account_id
    if isinstance(owner, SessionOwner):
        return model.session_id
    raise TypeError(f"Unsupported owner: {owner!r}")

def owner_filter(model, owner: Owner):
    """WHERE clause selecting rows held by ``owner``"""
    return owner_column(model, owner) == owner.id

def owner_values(owner: Owner) -> Dict[str, Any]:
    """Column values for a row held by ``owner``"""
    if isinstance(owner, AccountOwner):
        return {"account_id": owner.id, "session_id": None}
    if isinstance(owner, SessionOwner):
        return {"account_id": None, "session_id": owner.id}
    raise TypeError(f"Unsupported owner: {owner!r}")

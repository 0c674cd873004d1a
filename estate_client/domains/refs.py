"""
Relational references as returned by the API.

The backend returns a related record either populated (an embedded object with
`_id`) or as a bare identifier string. Both are parsed into a `Ref` and compared
through `ref_matches`, never by poking at the raw payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class Populated:
    """Embedded related record. `data` keeps the raw fields for display."""

    id: str
    data: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


@dataclass(frozen=True)
class IdRef:
    """Bare identifier pointing at a related record."""

    id: str

    def get(self, key: str, default: Any = None) -> Any:
        return default


Ref = Union[Populated, IdRef]


def _id_of(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (str, int)):
        s = str(value).strip()
        return s or None
    return None


def parse_ref(value: Any) -> Ref | None:
    """
    Parse a reference field. Returns None when the value is absent or unusable.

    >>> parse_ref("U1")
    IdRef(id='U1')
    >>> parse_ref({"_id": "U1", "name": "Asha"}).id
    'U1'
    """
    if isinstance(value, Populated) or isinstance(value, IdRef):
        return value
    if isinstance(value, Mapping):
        ref_id = _id_of(value.get("_id"))
        if ref_id is None:
            ref_id = _id_of(value.get("id"))
        if ref_id is None:
            return None
        return Populated(id=ref_id, data=dict(value))
    ref_id = _id_of(value)
    return IdRef(id=ref_id) if ref_id is not None else None


def ref_id(ref: Ref | None) -> str | None:
    return ref.id if ref is not None else None


def ref_matches(ref: Ref | None, identity_id: Any) -> bool:
    """True when `ref` points at `identity_id`. A missing side never matches."""
    if ref is None:
        return False
    target = _id_of(identity_id)
    return target is not None and ref.id == target

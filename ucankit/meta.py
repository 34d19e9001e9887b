"""Meta key/value pairs carried by a UCAN token."""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterator, List, Tuple

from ucankit.args import (
    _ItemSource,
    _format_entries,
    _kind,
    _same_entries,
    _to_node,
)


class MetaNotFoundError(KeyError):
    """Raised when a key is missing from the meta."""

    def __str__(self) -> str:
        return f"key not found in meta: {self.args[0]!r}"


class Meta:
    """An ordered set of meta entries holding IPLD-compatible values."""

    def __init__(self) -> None:
        self._keys: List[str] = []
        self._values: Dict[str, Any] = {}

    def _get_kind(self, key: str, kind: str) -> Any:
        node = self.get_node(key)
        if _kind(node) != kind:
            raise TypeError(
                f"value for key {key!r} is of kind {_kind(node)}, not {kind}"
            )
        return node

    def get_bool(self, key: str) -> bool:
        """The value under ``key`` as a bool."""
        return self._get_kind(key, "bool")

    def get_string(self, key: str) -> str:
        """The value under ``key`` as a string."""
        return self._get_kind(key, "string")

    def get_int(self, key: str) -> int:
        """The value under ``key`` as an integer."""
        return self._get_kind(key, "int")

    def get_float(self, key: str) -> float:
        """The value under ``key`` as a float."""
        return self._get_kind(key, "float")

    def get_bytes(self, key: str) -> bytes:
        """The value under ``key`` as bytes."""
        return self._get_kind(key, "bytes")

    def get_node(self, key: str) -> Any:
        """The raw value under ``key``."""
        try:
            return self._values[key]
        except KeyError:
            raise MetaNotFoundError(key) from None

    def add(self, key: str, val: Any) -> None:
        """Insert a new key; duplicates and unsupported types fail."""
        if key in self._values:
            raise ValueError(f'duplicate key "{key}"')
        node = _to_node(val)
        self._keys.append(key)
        self._values[key] = node

    def include(self, other: _ItemSource) -> None:
        """Merge in the entries of ``other``, keeping existing values on conflict."""
        for key, value in other.items():
            if key in self._values:
                continue
            self._values[key] = _to_node(value)
            self._keys.append(key)

    def items(self) -> Iterator[Tuple[str, Any]]:
        """Iterate over key/value pairs in key order."""
        for key in self._keys:
            yield key, self._values[key]

    def read_only(self) -> ReadOnlyMeta:
        """A read-only view of this meta."""
        return ReadOnlyMeta(self)

    def clone(self) -> Meta:
        """A deep copy."""
        res = Meta()
        res._keys = list(self._keys)
        res._values = copy.deepcopy(self._values)
        return res

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._keys))

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ReadOnlyMeta):
            other = other._meta
        if not isinstance(other, Meta):
            return NotImplemented
        return _same_entries(self._keys, self._values, other._keys, other._values)

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        self._keys.sort()
        return _format_entries(self.items())

    def __repr__(self) -> str:
        return f"Meta({dict(self.items())!r})"


class ReadOnlyMeta:
    """A read-only facade over Meta."""

    def __init__(self, meta: Meta) -> None:
        self._meta = meta

    def get_bool(self, key: str) -> bool:
        """The value under ``key`` as a bool."""
        return self._meta.get_bool(key)

    def get_string(self, key: str) -> str:
        """The value under ``key`` as a string."""
        return self._meta.get_string(key)

    def get_int(self, key: str) -> int:
        """The value under ``key`` as an integer."""
        return self._meta.get_int(key)

    def get_float(self, key: str) -> float:
        """The value under ``key`` as a float."""
        return self._meta.get_float(key)

    def get_bytes(self, key: str) -> bytes:
        """The value under ``key`` as bytes."""
        return self._meta.get_bytes(key)

    def get_node(self, key: str) -> Any:
        """The raw value under ``key``."""
        return self._meta.get_node(key)

    def items(self) -> Iterator[Tuple[str, Any]]:
        """Iterate over key/value pairs in key order."""
        return self._meta.items()

    def writeable_clone(self) -> Meta:
        """A modifiable deep copy of the underlying meta."""
        return self._meta.clone()

    def __len__(self) -> int:
        return len(self._meta)

    def __iter__(self) -> Iterator[str]:
        return iter(self._meta)

    def __contains__(self, key: object) -> bool:
        return key in self._meta

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Meta, ReadOnlyMeta)):
            return self._meta == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return str(self._meta)

    def __repr__(self) -> str:
        return f"ReadOnlyMeta({dict(self.items())!r})"
"""Arguments passed to a command within an invocation token."""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, List, Optional, Protocol, Tuple

from ucankit.cid import CID

MAX_INT53 = 2**53 - 1
MIN_INT53 = -(2**53 - 1)


class _ItemSource(Protocol):
    def items(self) -> Iterable[Tuple[str, Any]]: ...


class ArgsNotFoundError(KeyError):
    """Raised when a key is missing from the arguments."""

    def __str__(self) -> str:
        return f"key not found in args: {self.args[0]!r}"


def _to_node(val: Any) -> Any:
    if val is None or isinstance(val, (bool, int, float, str, CID)):
        return val
    if isinstance(val, (bytes, bytearray, memoryview)):
        return bytes(val)
    if isinstance(val, (list, tuple)):
        return [_to_node(item) for item in val]
    if isinstance(val, Mapping):
        out = {}
        for key, item in val.items():
            if not isinstance(key, str):
                raise TypeError(f"map keys must be strings, got {type(key).__name__}")
            out[key] = _to_node(item)
        return out
    raise TypeError(f"unsupported value type: {type(val).__name__}")


def _check_int_bounds(node: Any) -> None:
    if isinstance(node, bool):
        return
    if isinstance(node, int):
        if not MIN_INT53 <= node <= MAX_INT53:
            raise ValueError(f"integer value {node} exceeds safe integer bounds")
    elif isinstance(node, list):
        for item in node:
            _check_int_bounds(item)
    elif isinstance(node, dict):
        for item in node.values():
            _check_int_bounds(item)


_KINDS = (
    (type(None), "null"),
    (bool, "bool"),
    (int, "int"),
    (float, "float"),
    (str, "string"),
    (bytes, "bytes"),
    (CID, "link"),
    (list, "list"),
    (dict, "map"),
)


def _kind(node: Any) -> Optional[str]:
    for node_type, name in _KINDS:
        if isinstance(node, node_type):
            return name
    return None


def _deep_equal(a: Any, b: Any) -> bool:
    kind = _kind(a)
    if kind != _kind(b):
        return False
    if kind == "list":
        return len(a) == len(b) and all(_deep_equal(x, y) for x, y in zip(a, b))
    if kind == "map":
        return len(a) == len(b) and all(
            ka == kb and _deep_equal(va, vb)
            for (ka, va), (kb, vb) in zip(a.items(), b.items())
        )
    return a == b


def _same_entries(
    keys: List[str],
    values: Dict[str, Any],
    other_keys: List[str],
    other_values: Dict[str, Any],
) -> bool:
    if len(keys) != len(other_keys) or len(values) != len(other_values):
        return False
    return all(
        key in other_values and _deep_equal(values[key], other_values[key])
        for key in keys
    )


def _indent(text: str) -> str:
    return text.replace("\n", "\n\t")


def _format_node(node: Any) -> str:
    if node is None:
        return "null"
    if isinstance(node, bool):
        return f"bool{{{str(node).lower()}}}"
    if isinstance(node, int):
        return f"int{{{node}}}"
    if isinstance(node, float):
        return f"float{{{node!r}}}"
    if isinstance(node, str):
        return f"string{{{json.dumps(node, ensure_ascii=False)}}}"
    if isinstance(node, bytes):
        return f"bytes{{{node.hex()}}}"
    if isinstance(node, CID):
        return f"link{{{node}}}"
    if isinstance(node, list):
        if not node:
            return "list{}"
        body = "".join(
            f"\n\t{i}: {_indent(_format_node(item))}" for i, item in enumerate(node)
        )
        return f"list{{{body}\n}}"
    if isinstance(node, dict):
        if not node:
            return "map{}"
        body = "".join(
            f"\n\t{_format_node(key)}: {_indent(_format_node(item))}"
            for key, item in node.items()
        )
        return f"map{{{body}\n}}"
    return repr(node)


def _format_entries(pairs: Iterable[Tuple[str, Any]]) -> str:
    body = "".join(
        f"\n\t{key}: {_indent(_format_node(node))}," for key, node in pairs
    )
    return "{" + (body + "\n" if body else "") + "}"


class Args:
    """An ordered set of named command arguments holding IPLD-compatible values."""

    def __init__(self) -> None:
        self._keys: List[str] = []
        self._values: Dict[str, Any] = {}

    def get_node(self, key: str) -> Any:
        """Return the value stored under ``key``."""
        try:
            return self._values[key]
        except KeyError:
            raise ArgsNotFoundError(key) from None

    def add(self, key: str, val: Any) -> None:
        """Insert a new key; duplicates, unsupported types and unsafe integers fail."""
        if key in self._values:
            raise ValueError(f'duplicate key "{key}"')
        node = _to_node(val)
        try:
            _check_int_bounds(node)
        except ValueError as exc:
            raise ValueError(f'value for key "{key}": {exc}') from exc
        self._values[key] = node
        self._keys.append(key)

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

    def to_ipld(self) -> Dict[str, Any]:
        """The arguments as an IPLD map with sorted keys."""
        self._keys.sort()
        return {key: self._values[key] for key in self._keys}

    def read_only(self) -> ReadOnlyArgs:
        """A read-only view of these arguments."""
        return ReadOnlyArgs(self)

    def clone(self) -> Args:
        """A deep copy."""
        res = Args()
        res._keys = list(self._keys)
        res._values = copy.deepcopy(self._values)
        return res

    def validate(self) -> None:
        """Check that every value respects the safe integer bounds."""
        for key, value in self._values.items():
            try:
                _check_int_bounds(value)
            except ValueError as exc:
                raise ValueError(f'value for key "{key}": {exc}') from exc

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._keys))

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ReadOnlyArgs):
            other = other._args
        if not isinstance(other, Args):
            return NotImplemented
        return _same_entries(self._keys, self._values, other._keys, other._values)

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        self._keys.sort()
        return _format_entries(self.items())

    def __repr__(self) -> str:
        return f"Args({dict(self.items())!r})"


class ReadOnlyArgs:
    """A read-only facade over Args."""

    def __init__(self, args: Args) -> None:
        self._args = args

    def get_node(self, key: str) -> Any:
        """Return the value stored under ``key``."""
        return self._args.get_node(key)

    def items(self) -> Iterator[Tuple[str, Any]]:
        """Iterate over key/value pairs in key order."""
        return self._args.items()

    def to_ipld(self) -> Dict[str, Any]:
        """The arguments as an IPLD map with sorted keys."""
        return self._args.to_ipld()

    def writeable_clone(self) -> Args:
        """A modifiable deep copy of the underlying arguments."""
        return self._args.clone()

    def __len__(self) -> int:
        return len(self._args)

    def __iter__(self) -> Iterator[str]:
        return iter(self._args)

    def __contains__(self, key: object) -> bool:
        return key in self._args

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Args, ReadOnlyArgs)):
            return self._args == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return str(self._args)

    def __repr__(self) -> str:
        return f"ReadOnlyArgs({dict(self.items())!r})"


class Builder:
    """Fluent construction of Args, collecting errors until build time."""

    def __init__(self) -> None:
        self._args = Args()
        self._errors: List[Exception] = []

    def add(self, key: str, val: Any) -> Builder:
        """Add a key/value pair, remembering any error it causes."""
        try:
            self._args.add(key, val)
        except (TypeError, ValueError) as exc:
            self._errors.append(exc)
        return self

    def build(self) -> Args:
        """Return the assembled Args, or raise the errors met while adding."""
        if not self._errors:
            return self._args
        if len(self._errors) == 1:
            raise self._errors[0]
        raise ValueError("\n".join(str(err) for err in self._errors)) from self._errors[0]

    def build_ipld(self) -> Dict[str, Any]:
        """Like build, then convert the Args to an IPLD map."""
        return self.build().to_ipld()
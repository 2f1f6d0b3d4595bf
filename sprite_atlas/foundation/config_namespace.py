"""Strict mapping reader used by manifest and tool-config parsing.

Every getter marks its key as read; `assert_consumed` then rejects whatever
the document contains beyond that, so typos surface as errors instead of
being silently ignored.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

_MISSING = object()


@dataclass
class ConfigNamespace:
    data: Mapping[str, Any]
    path: str
    _read: set[str] = field(default_factory=set, init=False, repr=False)

    def key_path(self, key: str) -> str:
        return f"{self.path}.{key}" if self.path else key

    def assert_consumed(self) -> None:
        unknown = sorted(str(key) for key in self.data if key not in self._read)
        if unknown:
            read = ", ".join(sorted(self._read)) or "<none>"
            raise ValueError(
                f"Unknown config keys under {self.path or '<root>'}: {', '.join(unknown)} (consumed: {read})"
            )

    def get_raw(self, key: str, *, default: Any = _MISSING) -> Any:
        """Return the untyped value for `key`, marking it consumed."""

        self._read.add(key)
        if key in self.data:
            return self.data[key]
        if default is _MISSING:
            raise ValueError(f"Missing required config key: {self.key_path(key)}")
        return default

    def get_bool(self, key: str, *, default: bool | object = _MISSING) -> bool:
        value = self.get_raw(key, default=default)
        if not isinstance(value, bool):
            raise TypeError(f"{self.key_path(key)} must be a boolean (type={type(value).__name__})")
        return value

    def get_int(
        self,
        key: str,
        *,
        default: int | object = _MISSING,
        min_value: int | None = None,
        max_value: int | None = None,
    ) -> int:
        value = self.get_raw(key, default=default)
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{self.key_path(key)} must be an int (type={type(value).__name__})")
        if min_value is not None and value < min_value:
            raise ValueError(f"{self.key_path(key)} must be >= {min_value} (got {value})")
        if max_value is not None and value > max_value:
            raise ValueError(f"{self.key_path(key)} must be <= {max_value} (got {value})")
        return value

    def get_str(
        self,
        key: str,
        *,
        default: str | None | object = _MISSING,
        choices: Iterable[str] | None = None,
    ) -> str | None:
        value = self.get_raw(key, default=default)
        if value is None:
            return None
        if not isinstance(value, str):
            raise TypeError(f"{self.key_path(key)} must be a string (type={type(value).__name__})")
        value = value.strip()
        if not value:
            raise ValueError(f"{self.key_path(key)} cannot be empty")
        if choices is not None and value not in choices:
            raise ValueError(
                f"{self.key_path(key)} must be one of: {', '.join(sorted(choices))} (got {value!r})"
            )
        return value

    def get_pair(self, key: str, *, default: tuple[int, int] | object = _MISSING) -> tuple[int, int]:
        return parse_pair(self.get_raw(key, default=default), self.key_path(key))


def parse_pair(raw: Any, path: str, *, min_value: int = 0) -> tuple[int, int]:
    """Parse a vector given as `[x, y]` or as a mapping with exactly the keys `x` and `y`."""

    if isinstance(raw, Mapping):
        keys = set(raw)
        if keys != {"x", "y"}:
            raise ValueError(f"{path} must have exactly the keys x, y (got {', '.join(sorted(map(str, keys))) or '<none>'})")
        items = [raw["x"], raw["y"]]
    elif isinstance(raw, (list, tuple)):
        if len(raw) != 2:
            raise ValueError(f"{path} must have exactly 2 components (got {len(raw)})")
        items = list(raw)
    else:
        raise TypeError(f"{path} must be a 2-element list or an x/y mapping (type={type(raw).__name__})")

    for idx, item in enumerate(items):
        if isinstance(item, bool) or not isinstance(item, int):
            raise TypeError(f"{path}[{idx}] must be an int (type={type(item).__name__})")
        if item < min_value:
            raise ValueError(f"{path}[{idx}] must be >= {min_value} (got {item})")
    return items[0], items[1]

"""Record representations and the attribute access used by the tree builder.

Fetched rows arrive either as plain mappings or as rich :class:`ModelInstance`
wrappers. A rich record keeps a shadow copy of its attributes in
``data_values``; every attribute the builder adds or removes must be mirrored
there, so the builder never touches record attributes directly and goes
through :func:`record_access` instead.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping, MutableMapping, Protocol, runtime_checkable


@runtime_checkable
class ShadowedRecord(Protocol):
    """Capability marker for records carrying a shadow value store."""

    data_values: Dict[str, Any]


class ModelInstance(MutableMapping[str, Any]):
    """Mapping-style record that mirrors its values into ``data_values``.

    Item assignment only touches the visible attributes; callers that need the
    shadow store kept in step use :class:`ShadowRecordAccess`.
    """

    def __init__(self, model_name: str, values: Mapping[str, Any] | None = None) -> None:
        self.model_name = model_name
        self._attributes: Dict[str, Any] = dict(values or {})
        self.data_values: Dict[str, Any] = dict(self._attributes)

    def __getitem__(self, key: str) -> Any:
        return self._attributes[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._attributes[key] = value

    def __delitem__(self, key: str) -> None:
        del self._attributes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"{type(self).__name__}({self.model_name!r}, {self._attributes!r})"


def is_model_instance(record: object) -> bool:
    """Return whether ``record`` is a rich record with a shadow store."""

    return isinstance(record, ShadowedRecord)


class RecordAccess:
    """Attribute access for plain mapping records."""

    def __init__(self, record: MutableMapping[str, Any]) -> None:
        self._record = record

    @property
    def record(self) -> MutableMapping[str, Any]:
        return self._record

    def get(self, key: str, default: Any = None) -> Any:
        return self._record.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._record[key] = value

    def delete(self, key: str) -> None:
        self._record.pop(key, None)


class ShadowRecordAccess(RecordAccess):
    """Attribute access that mirrors mutations into ``data_values``."""

    def set(self, key: str, value: Any) -> None:
        super().set(key, value)
        self._record.data_values[key] = value  # type: ignore[attr-defined]

    def delete(self, key: str) -> None:
        super().delete(key)
        self._record.data_values.pop(key, None)  # type: ignore[attr-defined]


def record_access(record: MutableMapping[str, Any]) -> RecordAccess:
    """Return the accessor matching the record's capabilities."""

    if is_model_instance(record):
        return ShadowRecordAccess(record)
    return RecordAccess(record)


__all__ = [
    "ModelInstance",
    "ShadowedRecord",
    "is_model_instance",
    "RecordAccess",
    "ShadowRecordAccess",
    "record_access",
]

"""Typed TAXII 2.1 resources and their JSON mapping.

Decoding is strict on required fields and permissive on unknown ones, so
newer servers adding fields keep working. Timestamps stay ISO-8601 strings.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from cc_taxii2_client.errors import ConfigurationError, DeserializationError

TAXII_MEDIA_TYPE = "application/taxii+json;version=2.1"
STIX_MEDIA_TYPE = "application/stix+json;version=2.1"

_MISSING = object()


def _ensure_mapping(data: Any, model: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise DeserializationError(
            f"{model}: expected a JSON object, got {type(data).__name__}"
        )
    return data


def _field(
    data: Mapping[str, Any],
    key: str,
    expected: Union[type, tuple[type, ...]],
    model: str,
    default: Any = _MISSING,
) -> Any:
    """Fetch ``key`` from ``data`` checking its JSON type.

    Fields without a default are required.
    """
    value = data.get(key, _MISSING)
    if value is _MISSING or value is None:
        if default is _MISSING:
            raise DeserializationError(f"{model}: missing required field '{key}'")
        return default
    # bool is a subclass of int; never accept it where a number is expected
    if not isinstance(value, expected) or (
        isinstance(value, bool) and bool not in _as_tuple(expected)
    ):
        raise DeserializationError(
            f"{model}: field '{key}' has unexpected type {type(value).__name__}"
        )
    return value


def _as_tuple(expected: Union[type, tuple[type, ...]]) -> tuple[type, ...]:
    return expected if isinstance(expected, tuple) else (expected,)


def _string_list(data: Mapping[str, Any], key: str, model: str, required: bool) -> list[str]:
    values = _field(data, key, list, model, _MISSING if required else [])
    if not all(isinstance(v, str) for v in values):
        raise DeserializationError(f"{model}: field '{key}' must be a list of strings")
    return list(values)


def _drop_none(payload: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}


@dataclass(frozen=True)
class Discovery:
    """Server discovery document (``/taxii2/``)."""

    title: str
    api_roots: list[str]
    description: Optional[str] = None
    contact: Optional[str] = None
    default: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Discovery":
        data = _ensure_mapping(data, "Discovery")
        return cls(
            title=_field(data, "title", str, "Discovery"),
            api_roots=_string_list(data, "api_roots", "Discovery", required=True),
            description=_field(data, "description", str, "Discovery", None),
            contact=_field(data, "contact", str, "Discovery", None),
            default=_field(data, "default", str, "Discovery", None),
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "title": self.title,
                "description": self.description,
                "contact": self.contact,
                "default": self.default,
                "api_roots": list(self.api_roots),
            }
        )


@dataclass(frozen=True)
class APIRoot:
    """Information about a single API root."""

    title: str
    versions: frozenset[str]
    max_content_length: int
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "APIRoot":
        data = _ensure_mapping(data, "APIRoot")
        return cls(
            title=_field(data, "title", str, "APIRoot"),
            versions=frozenset(_string_list(data, "versions", "APIRoot", required=True)),
            max_content_length=_field(data, "max_content_length", int, "APIRoot"),
            description=_field(data, "description", str, "APIRoot", None),
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "title": self.title,
                "description": self.description,
                "versions": sorted(self.versions),
                "max_content_length": self.max_content_length,
            }
        )


@dataclass(frozen=True)
class Collection:
    """A collection of STIX objects under an API root."""

    id: str
    title: str
    can_read: bool
    can_write: bool
    media_types: list[str] = field(default_factory=list)
    description: Optional[str] = None
    alias: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Collection":
        data = _ensure_mapping(data, "Collection")
        return cls(
            id=_field(data, "id", str, "Collection"),
            title=_field(data, "title", str, "Collection"),
            can_read=_field(data, "can_read", bool, "Collection"),
            can_write=_field(data, "can_write", bool, "Collection"),
            media_types=_string_list(data, "media_types", "Collection", required=False),
            description=_field(data, "description", str, "Collection", None),
            alias=_field(data, "alias", str, "Collection", None),
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "title": self.title,
                "description": self.description,
                "alias": self.alias,
                "can_read": self.can_read,
                "can_write": self.can_write,
                "media_types": list(self.media_types),
            }
        )


def parse_collections(data: Any) -> list[Collection]:
    """Decode a ``collections`` resource into a list of Collection."""
    data = _ensure_mapping(data, "Collections")
    items = _field(data, "collections", list, "Collections", [])
    return [Collection.from_dict(item) for item in items]


@dataclass(frozen=True)
class Envelope:
    """A page of STIX objects returned from a collection."""

    objects: list[dict[str, Any]] = field(default_factory=list)
    more: bool = False
    next: Optional[str] = None

    def __post_init__(self) -> None:
        if self.more and not self.next:
            raise DeserializationError("Envelope: more=True requires a next cursor")

    @classmethod
    def from_dict(cls, data: Any) -> "Envelope":
        data = _ensure_mapping(data, "Envelope")
        objects = _field(data, "objects", list, "Envelope", [])
        if not all(isinstance(obj, Mapping) for obj in objects):
            raise DeserializationError("Envelope: every object must be a JSON object")
        more = _field(data, "more", bool, "Envelope", False)
        next_cursor = _field(data, "next", str, "Envelope", None)
        if more and not next_cursor:
            raise DeserializationError("Envelope: 'more' is true but 'next' is missing")
        return cls(objects=[dict(obj) for obj in objects], more=more, next=next_cursor)

    @classmethod
    def from_json(cls, text: str) -> "Envelope":
        try:
            data = json.loads(text)
        except ValueError as e:
            raise DeserializationError(f"Envelope: invalid JSON: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"objects": [dict(obj) for obj in self.objects]}
        if self.more:
            payload["more"] = True
        if self.next is not None:
            payload["next"] = self.next
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class ManifestRecord:
    """One entry of a collection manifest."""

    id: str
    date_added: str
    version: str
    media_type: str = STIX_MEDIA_TYPE

    @classmethod
    def from_dict(cls, data: Any) -> "ManifestRecord":
        data = _ensure_mapping(data, "ManifestRecord")
        return cls(
            id=_field(data, "id", str, "ManifestRecord"),
            date_added=_field(data, "date_added", str, "ManifestRecord"),
            version=_field(data, "version", str, "ManifestRecord"),
            media_type=_field(data, "media_type", str, "ManifestRecord", STIX_MEDIA_TYPE),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date_added": self.date_added,
            "version": self.version,
            "media_type": self.media_type,
        }


def parse_manifest(data: Any) -> list[ManifestRecord]:
    """Decode a ``manifest`` resource into its records, in response order."""
    data = _ensure_mapping(data, "Manifest")
    items = _field(data, "objects", list, "Manifest", [])
    return [ManifestRecord.from_dict(item) for item in items]


@dataclass(frozen=True)
class Status:
    """Outcome of adding objects to a collection."""

    id: str
    status: str
    total_count: int
    success_count: int = 0
    failure_count: int = 0
    pending_count: int = 0
    request_timestamp: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Status":
        data = _ensure_mapping(data, "Status")
        return cls(
            id=_field(data, "id", str, "Status"),
            status=_field(data, "status", str, "Status"),
            total_count=_field(data, "total_count", int, "Status"),
            success_count=_field(data, "success_count", int, "Status", 0),
            failure_count=_field(data, "failure_count", int, "Status", 0),
            pending_count=_field(data, "pending_count", int, "Status", 0),
            request_timestamp=_field(data, "request_timestamp", str, "Status", None),
        )


@dataclass(frozen=True)
class CCIndicator:
    """A CloudCover indicator of compromise."""

    id: str
    type: str
    created: str
    modified: str
    name: str
    description: str
    pattern: str
    pattern_type: str
    pattern_version: str
    spec_version: str
    valid_from: str

    @classmethod
    def from_dict(cls, data: Any) -> "CCIndicator":
        data = _ensure_mapping(data, "CCIndicator")
        return cls(**{name: _field(data, name, str, "CCIndicator") for name in _CC_FIELDS})

    def to_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in _CC_FIELDS}


_CC_FIELDS = (
    "id",
    "type",
    "created",
    "modified",
    "name",
    "description",
    "pattern",
    "pattern_type",
    "pattern_version",
    "spec_version",
    "valid_from",
)


@dataclass(frozen=True)
class ObjectFilters:
    """Query filters for the objects and manifest endpoints."""

    added_after: Optional[str] = None
    limit: Optional[int] = None
    match_type: Optional[Union[str, list[str]]] = None
    match_id: Optional[Union[str, list[str]]] = None

    # wire parameter name -> attribute
    PARAMS = {
        "added_after": "added_after",
        "limit": "limit",
        "match[type]": "match_type",
        "match[id]": "match_id",
    }

    def __post_init__(self) -> None:
        if self.limit is not None and (
            isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit < 1
        ):
            raise ConfigurationError(f"Invalid limit: {self.limit!r}")
        if self.added_after is not None and not isinstance(self.added_after, str):
            raise ConfigurationError(f"Invalid added_after: {self.added_after!r}")
        for wire_name in ("match[type]", "match[id]"):
            value = getattr(self, self.PARAMS[wire_name])
            if value is None or isinstance(value, str):
                continue
            if not isinstance(value, (list, tuple)) or not all(
                isinstance(v, str) for v in value
            ):
                raise ConfigurationError(
                    f"Invalid {wire_name}: {value!r}. Must be a string or list of strings"
                )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "ObjectFilters":
        unknown = sorted(set(mapping) - set(cls.PARAMS))
        if unknown:
            raise ConfigurationError(
                f"Unknown filter(s): {', '.join(unknown)}. "
                f"Must be among {tuple(cls.PARAMS)}"
            )
        return cls(**{cls.PARAMS[key]: value for key, value in mapping.items()})

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        for wire_name, attr in self.PARAMS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                value = ",".join(value)
            params[wire_name] = str(value)
        return params


FiltersArg = Optional[Union[ObjectFilters, Mapping[str, Any]]]


def coerce_filters(filters: FiltersArg) -> ObjectFilters:
    """Accept an ObjectFilters, a plain mapping of wire names, or None."""
    if filters is None:
        return ObjectFilters()
    if isinstance(filters, ObjectFilters):
        return filters
    return ObjectFilters.from_mapping(filters)

"""JSON and XML (de)serialization of request and response bodies."""

import collections.abc
import types
from enum import Enum
from typing import Any, Union, get_args, get_origin
from xml.etree import ElementTree

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from fluent_http.errors import DeserializationError, SerializationError
from fluent_http.utils.logging import get_logger

logger = get_logger(__name__)


class MediaType(str, Enum):
    """Media types the client can negotiate."""

    JSON = "application/json"
    XML = "application/xml"


_COLLECTION_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.Collection,
    collections.abc.Iterable,
)


def negotiate_media_type(content_type: str | None, accept: str | None = None) -> MediaType:
    """Pick the body format from the response Content-Type, then the Accept type.

    Defaults to JSON when neither names a known format.
    """
    for candidate in (content_type, accept):
        if not candidate:
            continue
        value = candidate.split(";", 1)[0].strip().lower()
        if value.endswith("json"):
            return MediaType.JSON
        if value.endswith("xml"):
            return MediaType.XML
    return MediaType.JSON


def is_collection_type(target: Any) -> bool:
    """Check whether a type annotation describes a collection of items."""
    if target in (list, tuple, set, frozenset):
        return True
    return get_origin(target) in _COLLECTION_ORIGINS


def type_name(target: Any) -> str:
    """Readable name of a type annotation for error messages."""
    return getattr(target, "__name__", None) or repr(target)


class Serializer:
    """Converts entities to and from JSON or XML payloads.

    Validation goes through pydantic TypeAdapters, so models, dataclasses,
    TypedDicts and plain containers are all accepted.
    """

    def __init__(self):
        self._adapters: dict[Any, TypeAdapter] = {}

    def adapter(self, target: Any) -> TypeAdapter:
        """Get or create the TypeAdapter for a type."""
        try:
            return self._adapters[target]
        except KeyError:
            adapter = TypeAdapter(target)
            self._adapters[target] = adapter
            return adapter
        except TypeError:
            # Unhashable annotation, skip the cache
            return TypeAdapter(target)

    def serialize(self, entity: Any, media_type: MediaType = MediaType.JSON) -> bytes:
        """Serialize an entity for a request body.

        Args:
            entity: Value to send
            media_type: Negotiated body format

        Returns:
            Encoded body

        Raises:
            SerializationError: If the entity cannot be encoded
        """
        if isinstance(entity, bytes):
            return entity
        if isinstance(entity, str):
            return entity.encode("utf-8")

        try:
            adapter = self.adapter(type(entity))
            if media_type == MediaType.XML:
                value = adapter.dump_python(entity, mode="json", by_alias=True)
                root = _build_element(_root_tag(entity), value)
                return ElementTree.tostring(root, encoding="utf-8")
            return adapter.dump_json(entity, by_alias=True)
        except (PydanticSerializationError, ValueError, TypeError) as e:
            raise SerializationError(
                f"Cannot serialize {type_name(type(entity))} as {media_type.value}: {e}",
                media_type=media_type.value,
                target_type=type_name(type(entity)),
            ) from e

    def deserialize(
        self,
        data: bytes,
        response_type: Any,
        media_type: MediaType = MediaType.JSON,
        status_code: int | None = None,
    ) -> Any:
        """Deserialize a response body into the requested type.

        Args:
            data: Raw body bytes
            response_type: Target type annotation
            media_type: Negotiated body format
            status_code: Response status, carried into errors

        Returns:
            Validated value of response_type

        Raises:
            DeserializationError: If the body does not match response_type
        """
        adapter = self.adapter(response_type)
        try:
            if media_type == MediaType.XML:
                root = ElementTree.fromstring(data)
                if is_collection_type(response_type):
                    value: Any = [_element_to_python(child) for child in root]
                else:
                    value = _element_to_python(root)
                return adapter.validate_python(_fit_to_type(value, response_type))
            return adapter.validate_json(data)
        except (ValidationError, ElementTree.ParseError) as e:
            logger.warning(
                "response_deserialization_failed",
                target_type=type_name(response_type),
                media_type=media_type.value,
                status_code=status_code,
            )
            raise DeserializationError(
                f"Response body is not a valid {type_name(response_type)} ({media_type.value}): {e}",
                status_code=status_code,
                media_type=media_type.value,
                target_type=type_name(response_type),
            ) from e


def _local_name(tag: str) -> str:
    """Strip an XML namespace from a tag."""
    return tag.rsplit("}", 1)[-1]


def _element_to_python(element: ElementTree.Element) -> Any:
    """Convert an element into dicts, lists and strings.

    Repeated child tags become lists; leaves become their stripped text.
    """
    children = list(element)
    if not children:
        text = (element.text or "").strip()
        if text:
            return text
        return dict(element.attrib) or None

    result: dict[str, Any] = dict(element.attrib)
    for child in children:
        tag = _local_name(child.tag)
        value = _element_to_python(child)
        if tag in result:
            existing = result[tag]
            if not isinstance(existing, list):
                result[tag] = [existing]
            result[tag].append(value)
        else:
            result[tag] = value
    return result


def _strip_optional(target: Any) -> Any:
    if get_origin(target) in (Union, types.UnionType):
        args = [arg for arg in get_args(target) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return target


def _as_items(value: Any) -> list[Any]:
    """Items of a list-typed element.

    Accepts repeated sibling tags (already a list), a wrapper element whose
    children share one tag (<items><Pet/><Pet/></items>), or a lone item.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, dict) and len(value) == 1:
        (inner,) = value.values()
        return inner if isinstance(inner, list) else [inner]
    return [value]


def _fit_to_type(value: Any, target: Any) -> Any:
    """Reshape converted XML into the layout the target type validates."""
    target = _strip_optional(target)
    if is_collection_type(target):
        args = get_args(target)
        item_type = args[0] if args and args[0] is not Ellipsis else Any
        return [_fit_to_type(item, item_type) for item in _as_items(value)]

    if (
        isinstance(value, dict)
        and get_origin(target) is None
        and isinstance(target, type)
        and issubclass(target, BaseModel)
    ):
        fitted = dict(value)
        for name, field in target.model_fields.items():
            for key in {name, field.alias}:
                if key and key in fitted:
                    fitted[key] = _fit_to_type(fitted[key], field.annotation)
        return fitted
    return value


def _root_tag(entity: Any) -> str:
    if isinstance(entity, (list, tuple, set, frozenset)):
        return "items"
    if isinstance(entity, dict):
        return "item"
    return type(entity).__name__


def _build_element(tag: str, value: Any) -> ElementTree.Element:
    """Build an element tree from a JSON-compatible value."""
    element = ElementTree.Element(tag)
    if isinstance(value, dict):
        for key, child in value.items():
            _append_children(element, str(key), child)
    elif isinstance(value, list):
        for child in value:
            element.append(_build_element("item", child))
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    elif value is not None:
        element.text = str(value)
    return element


def _append_children(parent: ElementTree.Element, tag: str, value: Any) -> None:
    # Lists inside objects are written as repeated tags
    if isinstance(value, list):
        for item in value:
            parent.append(_build_element(tag, item))
    else:
        parent.append(_build_element(tag, value))

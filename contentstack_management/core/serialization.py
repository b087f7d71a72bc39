# JSON serializer settings shared by the client and its services.

import abc
import json
from datetime import date, datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Type, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic_core import to_jsonable_python

from contentstack_management.exceptions import ContentstackSerializationError

ConverterT = TypeVar("ConverterT", bound=Type["JsonConverter"])


def to_utc(value: datetime) -> datetime:
    """Normalizes a datetime to UTC. Naive values are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Datetime field type that always holds a UTC instant after validation
UtcDatetime = Annotated[datetime, AfterValidator(to_utc)]


def format_datetime(value: datetime) -> str:
    """ISO-8601 rendering of the UTC instant, with a `Z` suffix."""
    return to_utc(value).isoformat().replace("+00:00", "Z")


class JsonConverter(abc.ABC):
    """Custom mapping between a Python type and its JSON representation."""

    @abc.abstractmethod
    def can_convert(self, value_type: type) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def write(self, value: Any) -> Any:
        """Returns a JSON-compatible representation of value."""
        raise NotImplementedError

    @abc.abstractmethod
    def read(self, data: Any, value_type: type) -> Any:
        """Builds a value of value_type from decoded JSON data."""
        raise NotImplementedError


# Converter classes registered with @json_converter, in registration order
REGISTERED_CONVERTERS: List[Type[JsonConverter]] = []


def json_converter(cls: ConverterT) -> ConverterT:
    """Class decorator registering a JsonConverter for discovery by new clients."""
    if not (isinstance(cls, type) and issubclass(cls, JsonConverter)):
        raise TypeError(f"{cls!r} is not a JsonConverter subclass")
    if cls not in REGISTERED_CONVERTERS:
        REGISTERED_CONVERTERS.append(cls)
    return cls


def discover_converters() -> List[JsonConverter]:
    """Instantiates every registered converter class."""
    return [converter_class() for converter_class in REGISTERED_CONVERTERS]


class SerializerSettings(BaseModel):
    """Serialization policies applied to request and response payloads.

    Attributes:
        date_parse_handling: Parse date-like strings when decoding untyped JSON.
        date_format: Output format of dates; only "iso" is supported.
        datetime_zone_utc: Normalize every datetime to UTC.
        omit_null: Drop None-valued fields from serialized output.
        converters: Custom converters, consulted before the built-in rules.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    date_parse_handling: bool = Field(default=False)
    date_format: str = Field(default="iso", pattern="^iso$")
    datetime_zone_utc: bool = Field(default=True)
    omit_null: bool = Field(default=True)
    converters: List[JsonConverter] = Field(default_factory=list)


class ContentstackSerializer:
    """Serializes payloads to JSON and deserializes responses under SerializerSettings."""

    def __init__(self, settings: Optional[SerializerSettings] = None):
        self.settings = settings or SerializerSettings()

    def _converter_for(self, value_type: Any) -> Optional[JsonConverter]:
        if not isinstance(value_type, type):
            return None
        for converter in self.settings.converters:
            if converter.can_convert(value_type):
                return converter
        return None

    def _format_datetime(self, value: datetime) -> str:
        if self.settings.datetime_zone_utc:
            return format_datetime(value)
        return value.isoformat()

    def to_jsonable(self, value: Any) -> Any:
        """Converts value to plain JSON data."""
        converter = self._converter_for(type(value))
        if converter is not None:
            return self.to_jsonable(converter.write(value))

        if value is None or isinstance(value, (str, int, float, bool)):
            return value
        if isinstance(value, BaseModel):
            return self.to_jsonable(value.model_dump(mode="python", by_alias=True))
        if isinstance(value, datetime):
            return self._format_datetime(value)
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, Enum):
            return self.to_jsonable(value.value)
        if isinstance(value, dict):
            result: Dict[str, Any] = {}
            for key, item in value.items():
                if item is None and self.settings.omit_null:
                    continue
                result[str(key)] = self.to_jsonable(item)
            return result
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self.to_jsonable(item) for item in value]
        try:
            return to_jsonable_python(value)
        except Exception as e:
            raise ContentstackSerializationError(f"Cannot serialize value of type {type(value).__name__}: {e}") from e

    def dumps(self, value: Any) -> str:
        return json.dumps(self.to_jsonable(value), separators=(",", ":"))

    def dumps_bytes(self, value: Any) -> bytes:
        return self.dumps(value).encode("utf-8")

    def loads(self, text: str | bytes, value_type: Optional[type] = None) -> Any:
        """Decodes JSON text, optionally into value_type.

        Without a value_type the plain JSON data is returned; strings are kept
        as strings unless date_parse_handling is enabled.

        Raises:
            ContentstackSerializationError: If the text is not JSON or does not fit value_type.
        """
        try:
            data = json.loads(text) if text else None
        except ValueError as e:
            raise ContentstackSerializationError(f"Response body is not valid JSON: {e}") from e

        if value_type is None:
            if self.settings.date_parse_handling:
                return self._parse_dates(data)
            return data

        converter = self._converter_for(value_type)
        try:
            if converter is not None:
                result = converter.read(data, value_type)
            else:
                result = TypeAdapter(value_type).validate_python(data)
        except (ValidationError, TypeError, ValueError) as e:
            raise ContentstackSerializationError(
                f"Cannot deserialize response into {getattr(value_type, '__name__', value_type)}: {e}"
            ) from e

        if self.settings.datetime_zone_utc:
            return self._normalize_datetimes(result)
        return result

    def _normalize_datetimes(self, value: Any) -> Any:
        """Returns value with every datetime it holds, at any depth, moved to UTC."""
        if isinstance(value, datetime):
            return to_utc(value)
        if isinstance(value, BaseModel):
            changes = {name: self._normalize_datetimes(getattr(value, name)) for name in type(value).model_fields}
            return value.model_copy(update=changes)
        if isinstance(value, dict):
            return {key: self._normalize_datetimes(item) for key, item in value.items()}
        if isinstance(value, list):
            return [self._normalize_datetimes(item) for item in value]
        if isinstance(value, tuple):
            return tuple(self._normalize_datetimes(item) for item in value)
        return value

    def _parse_dates(self, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: self._parse_dates(item) for key, item in data.items()}
        if isinstance(data, list):
            return [self._parse_dates(item) for item in data]
        if isinstance(data, str) and "T" in data:
            try:
                parsed = datetime.fromisoformat(data)
            except ValueError:
                return data
            return to_utc(parsed) if self.settings.datetime_zone_utc else parsed
        return data

"""Type converters: per-primitive encoding of Value fields to bytes.

Usage:
    converters = Converters()
    data = converters.encode(int, 33)      # b"33"
    converters.decode(int, data)           # 33

    # Custom types
    converters.register(SimpleConverter(UUID, lambda v: v.bytes, lambda b: UUID(bytes=b)))
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from kvgraph.core.errors import ConverterError


@runtime_checkable
class TypeConverter(Protocol):
    """Encodes values of one Python type to bytes and back."""

    value_type: type

    def encode(self, value: Any) -> bytes: ...

    def decode(self, data: bytes) -> Any: ...


@dataclass(frozen=True, slots=True)
class SimpleConverter:
    """Converter built from a pair of functions."""

    value_type: type
    encoder: Callable[[Any], bytes]
    decoder: Callable[[bytes], Any]

    def encode(self, value: Any) -> bytes:
        return self.encoder(value)

    def decode(self, data: bytes) -> Any:
        return self.decoder(data)


@dataclass(frozen=True, slots=True)
class EnumConverter:
    """Stores enum members by name."""

    value_type: type[Enum]

    def encode(self, value: Any) -> bytes:
        return value.name.encode("utf-8")

    def decode(self, data: bytes) -> Any:
        return self.value_type[data.decode("utf-8")]


def _decode_bool(data: bytes) -> bool:
    if data == b"1":
        return True
    if data == b"0":
        return False
    raise ValueError(f"invalid bool encoding {data!r}")


def _text(data: bytes) -> str:
    return data.decode("utf-8")


BUILTIN_CONVERTERS: tuple[TypeConverter, ...] = (
    SimpleConverter(str, lambda v: v.encode("utf-8"), _text),
    SimpleConverter(int, lambda v: str(v).encode("ascii"), lambda b: int(_text(b))),
    SimpleConverter(float, lambda v: repr(v).encode("ascii"), lambda b: float(_text(b))),
    SimpleConverter(bool, lambda v: b"1" if v else b"0", _decode_bool),
    SimpleConverter(bytes, bytes, bytes),
    SimpleConverter(
        datetime, lambda v: v.isoformat().encode("ascii"), lambda b: datetime.fromisoformat(_text(b))
    ),
    SimpleConverter(
        date, lambda v: v.isoformat().encode("ascii"), lambda b: date.fromisoformat(_text(b))
    ),
    SimpleConverter(Decimal, lambda v: str(v).encode("ascii"), lambda b: Decimal(_text(b))),
)


class Converters:
    """Registry of converters keyed by exact value type.

    Enum subclasses get an EnumConverter on first use unless one is registered.

    Args:
        converters: Converters to register (default: BUILTIN_CONVERTERS).
    """

    def __init__(self, converters: Iterable[TypeConverter] | None = None):
        self._by_type: dict[type, TypeConverter] = {}
        for converter in BUILTIN_CONVERTERS if converters is None else converters:
            self.register(converter)

    def register(self, converter: TypeConverter) -> None:
        """Register a converter, replacing any existing one for its type."""
        self._by_type[converter.value_type] = converter

    def for_type(self, value_type: Any) -> TypeConverter:
        """Get the converter for a declared type.

        Raises:
            ConverterError: If no converter handles the type.
        """
        converter = self._by_type.get(value_type)
        if converter is not None:
            return converter
        if isinstance(value_type, type) and issubclass(value_type, Enum):
            converter = EnumConverter(value_type)
            self._by_type[value_type] = converter
            return converter
        raise ConverterError(f"no converter registered for {value_type!r}")

    def encode(self, value_type: Any, value: Any) -> bytes:
        """Encode a value declared as value_type.

        Raises:
            ConverterError: If there is no converter or the value does not match.
        """
        converter = self.for_type(value_type)
        # Subclasses (bool for int, datetime for date) would not decode back
        if type(value) is not converter.value_type:
            raise ConverterError(
                f"expected {converter.value_type.__name__}, got {type(value).__name__}"
            )
        return converter.encode(value)

    def decode(self, value_type: Any, data: bytes) -> Any:
        """Decode stored bytes back to value_type.

        Raises:
            ConverterError: If there is no converter or the bytes are malformed.
        """
        converter = self.for_type(value_type)
        try:
            return converter.decode(data)
        except (ValueError, KeyError, InvalidOperation) as e:
            raise ConverterError(
                f"cannot decode {data!r} as {converter.value_type.__name__}"
            ) from e

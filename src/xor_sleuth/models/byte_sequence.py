from __future__ import annotations
import base64
import binascii
from enum import Enum
from typing import Iterable, Iterator, Union

BytesLike = Union[bytes, bytearray, memoryview]


class DecodingError(ValueError):
    """Text could not be parsed into bytes, or bytes could not be rendered as text."""


class LengthMismatchError(ValueError):

    def __init__(self, left: int, right: int):
        super().__init__(f"Cannot XOR sequences of different lengths ({left} and {right})")
        self.left = left
        self.right = right


class TextEncoding(Enum):
    ASCII = "ascii"
    HEX = "hex"
    BASE64 = "base64"

    def decode(self, text: str) -> bytes:
        """ Parse text in this encoding into raw bytes. """
        try:
            if self is TextEncoding.ASCII:
                return text.encode("ascii")
            elif self is TextEncoding.HEX:
                # unhexlify rejects odd lengths and embedded whitespace
                return binascii.unhexlify(text.strip())
            else:
                return base64.b64decode(text.strip(), validate=True)
        except ValueError as e:
            # binascii.Error and UnicodeEncodeError are both ValueErrors
            raise DecodingError(f"Invalid {self.value} text: {e}") from e

    def encode(self, data: bytes) -> str:
        """ Render raw bytes as text in this encoding. """
        if self is TextEncoding.ASCII:
            try:
                return data.decode("ascii")
            except UnicodeDecodeError as e:
                raise DecodingError(f"Bytes are not valid ASCII: {e}") from e
        elif self is TextEncoding.HEX:
            return data.hex()
        else:
            return base64.b64encode(data).decode("ascii")


class ByteSequence:
    """Immutable run of byte values tagged with the encoding used to render it."""

    __slots__ = ("__data", "__encoding")

    def __init__(self, data: BytesLike | Iterable[int] = b"", encoding: TextEncoding = TextEncoding.ASCII):
        # bytes() rejects ints outside 0..255 with ValueError
        self.__data = bytes(data)
        self.__encoding = encoding

    @classmethod
    def from_text(cls, text: str, encoding: TextEncoding = TextEncoding.ASCII) -> 'ByteSequence':
        return cls(encoding.decode(text), encoding)

    @classmethod
    def from_hex(cls, hex_string: str) -> 'ByteSequence':
        """ Decode hex digits into bytes that render as plain ASCII text. """
        return cls(TextEncoding.HEX.decode(hex_string))

    @classmethod
    def from_base64(cls, b64_string: str) -> 'ByteSequence':
        return cls(TextEncoding.BASE64.decode(b64_string))

    @classmethod
    def repeat(cls, byte_value: int, length: int, encoding: TextEncoding = TextEncoding.ASCII) -> 'ByteSequence':
        """ Key stream of a single byte guess. """
        if not 0 <= byte_value <= 255:
            raise ValueError(f"Byte value out of range: {byte_value}")
        if length < 0:
            raise ValueError(f"Length must be non-negative: {length}")
        return cls(bytes([byte_value]) * length, encoding)

    @classmethod
    def cycle(cls, key: 'ByteSequence | BytesLike', length: int) -> 'ByteSequence':
        """ Key stream of a repeating key, truncated to length. """
        key_bytes = bytes(key)
        if not key_bytes:
            raise ValueError("Key must not be empty")
        if length < 0:
            raise ValueError(f"Length must be non-negative: {length}")
        count, remainder = divmod(length, len(key_bytes))
        return cls(key_bytes * count + key_bytes[:remainder])

    @staticmethod
    def xor(left: 'ByteSequence', right: 'ByteSequence') -> 'ByteSequence':
        if len(left) != len(right):
            raise LengthMismatchError(len(left), len(right))
        return ByteSequence((a ^ b for a, b in zip(left.bytes, right.bytes)), left.encoding)

    @property
    def bytes(self) -> bytes:
        return self.__data

    @property
    def encoding(self) -> TextEncoding:
        return self.__encoding

    def with_encoding(self, encoding: TextEncoding) -> 'ByteSequence':
        return ByteSequence(self.__data, encoding)

    def to_text(self) -> str:
        return self.__encoding.encode(self.__data)

    def to_hex(self) -> str:
        return self.__data.hex()

    def to_base64(self) -> str:
        return TextEncoding.BASE64.encode(self.__data)

    def pretty(self, sep: str = " ") -> str:
        return sep.join(f"{b:02x}" for b in self.__data)

    def __xor__(self, other: 'ByteSequence') -> 'ByteSequence':
        if not isinstance(other, ByteSequence):
            return NotImplemented
        return ByteSequence.xor(self, other)

    def __len__(self) -> int:
        return len(self.__data)

    def __iter__(self) -> Iterator[int]:
        return iter(self.__data)

    def __getitem__(self, index: int) -> int:
        return self.__data[index]

    def __bytes__(self) -> bytes:
        return self.__data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ByteSequence):
            return NotImplemented
        return self.__data == other.__data

    def __hash__(self) -> int:
        return hash(self.__data)

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"ByteSequence({self.__data!r}, {self.__encoding})"

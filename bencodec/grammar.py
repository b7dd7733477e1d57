from dataclasses import dataclass
from typing import Union

INTEGER = ord('i')
LIST = ord('l')
DICTIONARY = ord('d')
TERMINATOR = ord('e')
SEPARATOR = ord(':')
MINUS = ord('-')


def is_digit(byte: int) -> bool:
    return 0x30 <= byte <= 0x39


def starts_node(byte: int) -> bool:
    return is_digit(byte) or byte in (INTEGER, LIST, DICTIONARY)


@dataclass(frozen=True)
class Integer:
    kind = 'integer'

    value: int
    offset: int


@dataclass(frozen=True)
class ByteString:
    kind = 'string'

    value: bytes
    offset: int


@dataclass(frozen=True)
class List:
    kind = 'list'

    items: tuple['Node', ...]
    offset: int


@dataclass(frozen=True)
class Dictionary:
    kind = 'dictionary'

    # Entries keep input order, keys are unique.
    entries: tuple[tuple[ByteString, 'Node'], ...]
    offset: int


Node = Union[Integer, ByteString, List, Dictionary]

import collections.abc
from typing import Any, Optional
from dataclasses_json import Undefined
from bencodec import grammar
from bencodec.grammar import (
    DICTIONARY, INTEGER, LIST, MINUS, SEPARATOR, TERMINATOR, is_digit, starts_node
)
from bencodec.shapes import MappingShape, RecordShape, SequenceShape, shape_of, type_name
from bencodec.errors import (
    DictionaryKeyNotString,
    DuplicateKey,
    IntegerOutOfRange,
    MalformedInteger,
    MalformedStringLength,
    MissingIntegerTerminator,
    NestingTooDeep,
    NoData,
    StringLengthOverrun,
    TrailingData,
    UnexpectedByte,
    UnsupportedType,
    UnterminatedDictionary,
    UnterminatedList,
)


class Decoder:
    MAX_DEPTH = 256
    INTEGER_BITS = 64

    def __init__(
        self,
        data: bytes,
        max_depth: int = MAX_DEPTH,
        integer_bits: Optional[int] = INTEGER_BITS
    ):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise UnsupportedType(type_name(type(data)))
        self.data = bytes(data)
        self.offset = 0
        self.max_depth = max_depth
        self.integer_bits = integer_bits
        self._depth = 0


    def parse(self) -> grammar.Node:
        self.offset = 0
        self._depth = 0
        if not self.data:
            raise NoData(0)
        node = self._parse_node()
        if self.offset < len(self.data):
            raise TrailingData(self.offset)
        return node


    def _peek(self) -> Optional[int]:
        if self.offset >= len(self.data):
            return None
        return self.data[self.offset]


    def _digits_end(self, start: int) -> int:
        end = start
        while end < len(self.data) and is_digit(self.data[end]):
            end += 1
        return end


    def _enter(self, offset: int):
        self._depth += 1
        if self._depth > self.max_depth:
            raise NestingTooDeep(offset, self.max_depth)


    def _parse_node(self) -> grammar.Node:
        byte = self._peek()
        if byte is None:
            raise NoData(self.offset)
        if is_digit(byte):
            return self._parse_string()
        if byte == INTEGER:
            return self._parse_int()
        if byte == LIST:
            return self._parse_list()
        if byte == DICTIONARY:
            return self._parse_dict()
        raise UnexpectedByte(self.offset, byte)


    def _parse_string(self) -> grammar.ByteString:
        start = self.offset
        colon = self._digits_end(start)
        if colon >= len(self.data) or self.data[colon] != SEPARATOR:
            raise MalformedStringLength(start)

        begin = colon + 1
        digits = self.data[start:colon].lstrip(b'0')
        if len(digits) > len(str(len(self.data) - begin)):
            raise StringLengthOverrun(start, None, colon - start)

        length = int(digits or b'0')
        end = begin + length
        if end > len(self.data):
            raise StringLengthOverrun(start, length)

        self.offset = end
        return grammar.ByteString(self.data[begin:end], start)


    def _parse_int(self) -> grammar.Integer:
        start = self.offset
        begin = start + 1
        negative = begin < len(self.data) and self.data[begin] == MINUS
        if negative:
            begin += 1

        end = self._digits_end(begin)
        if end == begin:
            raise MalformedInteger(begin)

        digits = self.data[begin:end]
        # Only the literal zero may start with '0', and it has no sign.
        if digits[0] == ord('0') and (len(digits) > 1 or negative):
            raise MalformedInteger(begin)

        if end >= len(self.data) or self.data[end] != TERMINATOR:
            raise MissingIntegerTerminator(end)

        if self.integer_bits:
            limit = 2 ** (self.integer_bits - 1) - (0 if negative else 1)
            if len(digits) > len(str(limit)) or int(digits) > limit:
                raise IntegerOutOfRange(begin, self.integer_bits)
        try:
            value = int(digits)
        except ValueError:
            raise IntegerOutOfRange(begin, None) from None

        self.offset = end + 1
        return grammar.Integer(-value if negative else value, start)


    def _parse_list(self) -> grammar.List:
        start = self.offset
        self._enter(start)
        self.offset += 1

        items = []
        while (byte := self._peek()) != TERMINATOR:
            if byte is None or not starts_node(byte):
                raise UnterminatedList(self.offset)
            items.append(self._parse_node())

        self.offset += 1
        self._depth -= 1
        return grammar.List(tuple(items), start)


    def _parse_dict(self) -> grammar.Dictionary:
        start = self.offset
        self._enter(start)
        self.offset += 1

        entries = []
        seen: set[bytes] = set()
        while (byte := self._peek()) != TERMINATOR:
            if byte is None or not starts_node(byte):
                raise UnterminatedDictionary(self.offset)
            if not is_digit(byte):
                raise DictionaryKeyNotString(self.offset)

            key = self._parse_string()
            if key.value in seen:
                raise DuplicateKey(key.offset, key.value)
            seen.add(key.value)

            if self._peek() is None:
                raise UnterminatedDictionary(self.offset)
            entries.append((key, self._parse_node()))

        self.offset += 1
        self._depth -= 1
        return grammar.Dictionary(tuple(entries), start)


def decode(
    data: bytes,
    shape: Any,
    *,
    undefined: Optional[Undefined] = None,
    max_depth: int = Decoder.MAX_DEPTH,
    integer_bits: Optional[int] = Decoder.INTEGER_BITS
) -> Any:
    target = shape_of(shape)
    node = Decoder(data, max_depth, integer_bits).parse()
    return target.materialize(node, undefined)


def decode_into(
    data: bytes,
    target: Any,
    shape: Any = None,
    *,
    undefined: Optional[Undefined] = None,
    max_depth: int = Decoder.MAX_DEPTH,
    integer_bits: Optional[int] = Decoder.INTEGER_BITS
):
    """Decodes `data` into the existing object `target`.

    Dataclass instances get the fields present in the input assigned, lists
    and dicts get their whole contents replaced. `shape` defaults to the type
    of `target`, which is enough for records; containers need the element
    type spelled out, e.g. `decode_into(data, items, list[int])`.

    `target` is only modified once the input has been fully parsed and every
    value has been built, so it is left as it was when an error is raised.
    """
    compiled = shape_of(type(target) if shape is None else shape)
    decoder = Decoder(data, max_depth, integer_bits)

    if isinstance(compiled, RecordShape):
        if not isinstance(target, compiled.record) or compiled.frozen:
            raise UnsupportedType(type_name(type(target)))
        values = compiled.values(decoder.parse(), undefined)
        for name, value in values.items():
            setattr(target, name, value)
        return

    if isinstance(compiled, SequenceShape) and isinstance(target, collections.abc.MutableSequence):
        target[:] = compiled.materialize(decoder.parse(), undefined)
        return

    if isinstance(compiled, MappingShape) and isinstance(target, collections.abc.MutableMapping):
        values = compiled.materialize(decoder.parse(), undefined)
        target.clear()
        target.update(values)
        return

    raise UnsupportedType(type_name(type(target)))

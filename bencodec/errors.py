from typing import Optional


class BencodeError(ValueError):
    def __init__(self, message: str, offset: Optional[int] = None):
        super().__init__(message)
        self.offset = offset


class DecodeError(BencodeError):
    pass


class EncodeError(BencodeError):
    pass


class NoData(DecodeError):
    def __init__(self, offset: int):
        super().__init__(f'no data to read at offset {offset}', offset)


class UnexpectedByte(DecodeError):
    def __init__(self, offset: int, byte: int):
        super().__init__(
            f'expected start of integer, string, list, or dictionary at offset {offset}',
            offset
        )
        self.byte = byte


class MalformedInteger(DecodeError):
    def __init__(self, offset: int):
        super().__init__(f'expected integer at offset {offset}', offset)


class MissingIntegerTerminator(DecodeError):
    def __init__(self, offset: int):
        super().__init__(f'expected terminator for integer at offset {offset}', offset)


class MalformedStringLength(DecodeError):
    def __init__(self, offset: int):
        super().__init__(
            f'expected colon between length and value for string at offset {offset}',
            offset
        )


class StringLengthOverrun(DecodeError):
    def __init__(self, offset: int, length: Optional[int], digits: int = 0):
        # length is None when its digit run is too long to fit the input.
        described = length if length is not None else f'of {digits} digits'
        super().__init__(
            f'string at offset {offset} has length {described}, yet there are not that many bytes left',
            offset
        )
        self.length = length
        self.digits = digits


class UnterminatedList(DecodeError):
    def __init__(self, offset: int):
        super().__init__(f'expected terminator for list at offset {offset}', offset)


class UnterminatedDictionary(DecodeError):
    def __init__(self, offset: int):
        super().__init__(f'expected terminator for dictionary at offset {offset}', offset)


class DictionaryKeyNotString(DecodeError):
    def __init__(self, offset: int):
        super().__init__(f'dictionary key at offset {offset} is not a string', offset)


class DuplicateKey(DecodeError):
    def __init__(self, offset: int, key: bytes):
        super().__init__(f'duplicate dictionary key {key!r} at offset {offset}', offset)
        self.key = key


class TypeMismatch(DecodeError):
    def __init__(self, offset: int, found: str, expected: str):
        super().__init__(f'cannot decode {found} at offset {offset} into {expected}', offset)
        self.found = found
        self.expected = expected


class TrailingData(DecodeError):
    def __init__(self, offset: int):
        super().__init__(f'trailing data at offset {offset} cannot be parsed', offset)


class UnknownKey(DecodeError):
    def __init__(self, offset: int, key: bytes, record: str):
        super().__init__(f'unknown key {key!r} at offset {offset} for {record}', offset)
        self.key = key
        self.record = record


class NonASCIIString(EncodeError):
    def __init__(self, value: str, offset: Optional[int] = None):
        super().__init__(f'strings may not contain non-ascii characters: {value}', offset)
        self.value = value


class NonASCIIBytes(NonASCIIString, DecodeError):
    pass


class IntegerOutOfRange(MalformedInteger):
    def __init__(self, offset: int, bits: Optional[int]):
        DecodeError.__init__(
            self,
            f'integer at offset {offset} does not fit in {bits} bits' if bits
            else f'integer at offset {offset} is too long to convert',
            offset
        )
        self.bits = bits


class FieldTagError(EncodeError):
    pass


class MissingFieldTag(FieldTagError):
    def __init__(self, record: str, field: str, offset: Optional[int] = None):
        super().__init__(f'found field {record}.{field} with no key tag', offset)
        self.record = record
        self.field = field


class DuplicateFieldTag(FieldTagError):
    def __init__(self, record: str, tag: str, offset: Optional[int] = None):
        super().__init__(f'found more than one field of {record} tagged {tag!r}', offset)
        self.record = record
        self.tag = tag


class UnsupportedType(BencodeError, TypeError):
    def __init__(self, kind: str, offset: Optional[int] = None):
        super().__init__(f'encountered unsupported type: {kind}', offset)
        self.kind = kind


class NestingTooDeep(BencodeError):
    def __init__(self, offset: int, limit: int):
        super().__init__(f'nesting deeper than {limit} levels at offset {offset}', offset)
        self.limit = limit

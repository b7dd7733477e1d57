"""
Typed Bencode encoder and decoder.
"""
from .encoder import Encoder, encode
from .decoder import Decoder, decode, decode_into
from .fields import FieldMap, field_map, field_tag, key
from .mixin import BencodeMixin
from .errors import (
    BencodeError,
    DecodeError,
    DictionaryKeyNotString,
    DuplicateFieldTag,
    DuplicateKey,
    EncodeError,
    FieldTagError,
    IntegerOutOfRange,
    MalformedInteger,
    MalformedStringLength,
    MissingFieldTag,
    MissingIntegerTerminator,
    NestingTooDeep,
    NoData,
    NonASCIIBytes,
    NonASCIIString,
    StringLengthOverrun,
    TrailingData,
    TypeMismatch,
    UnexpectedByte,
    UnknownKey,
    UnsupportedType,
    UnterminatedDictionary,
    UnterminatedList,
)

__all__ = [
    'encode', 'decode', 'decode_into', 'Encoder', 'Decoder',
    'key', 'field_tag', 'field_map', 'FieldMap', 'BencodeMixin',
    'BencodeError', 'DecodeError', 'EncodeError', 'FieldTagError',
    'NoData', 'UnexpectedByte', 'MalformedInteger', 'IntegerOutOfRange',
    'MissingIntegerTerminator',
    'MalformedStringLength', 'StringLengthOverrun', 'UnterminatedList',
    'UnterminatedDictionary', 'DictionaryKeyNotString', 'DuplicateKey',
    'TypeMismatch', 'TrailingData', 'UnknownKey', 'MissingFieldTag',
    'DuplicateFieldTag', 'NonASCIIString', 'NonASCIIBytes', 'UnsupportedType',
    'NestingTooDeep',
]

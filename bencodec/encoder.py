import dataclasses
from typing import Any
from bencodec.fields import field_map
from bencodec.errors import (
    DuplicateFieldTag, FieldTagError, NestingTooDeep, NonASCIIString, UnsupportedType
)


class Encoder:
    MAX_DEPTH = 256

    def __init__(self, max_depth: int = MAX_DEPTH):
        self.max_depth = max_depth
        self._buffer = bytearray()
        self._depth = 0


    def encode(self, value: Any) -> bytes:
        self._buffer = bytearray()
        self._depth = 0
        self._write(value)
        return bytes(self._buffer)


    def _write(self, value: Any):
        if isinstance(value, bool):
            raise UnsupportedType('bool', len(self._buffer))

        if isinstance(value, int):
            self._write_int(value)
        elif isinstance(value, str):
            self._write_str(value)
        elif isinstance(value, (bytes, bytearray)):
            self._write_bytes(bytes(value))
        elif isinstance(value, (list, tuple)):
            self._write_list(value)
        elif dataclasses.is_dataclass(value) and not isinstance(value, type):
            self._write_record(value)
        elif isinstance(value, dict):
            self._write_dict(value)
        else:
            raise UnsupportedType(type(value).__name__, len(self._buffer))


    def _write_int(self, value: int):
        self._buffer += f'i{int(value)}e'.encode()


    def _write_str(self, value: str):
        if not value.isascii():
            raise NonASCIIString(value, len(self._buffer))
        self._write_bytes(value.encode('ascii'))


    def _write_bytes(self, value: bytes):
        self._buffer += f'{len(value)}:'.encode() + value


    def _write_list(self, values: Any):
        self._enter()
        self._buffer += b'l'
        for value in values:
            self._write(value)
        self._buffer += b'e'
        self._depth -= 1


    def _write_record(self, record: Any):
        try:
            fields = field_map(type(record))
        except (FieldTagError, NonASCIIString) as error:
            error.offset = len(self._buffer)
            raise

        entries = []
        for spec in fields:
            value = getattr(record, spec.name)
            # Optional fields holding None are left out of the dictionary.
            if value is None and spec.optional:
                continue
            entries.append((spec.key, value))
        self._write_entries(entries)


    def _write_dict(self, values: dict):
        entries = []
        for key, value in values.items():
            if isinstance(key, str):
                if not key.isascii():
                    raise NonASCIIString(key, len(self._buffer))
                key = key.encode('ascii')
            elif not isinstance(key, bytes):
                raise UnsupportedType(f'{type(key).__name__} dictionary key', len(self._buffer))
            entries.append((key, value))

        keys = [key for key, _ in entries]
        if len(set(keys)) != len(keys):
            duplicate = next(key for key in keys if keys.count(key) > 1)
            raise DuplicateFieldTag('dict', duplicate.decode('latin-1'), len(self._buffer))

        self._write_entries(sorted(entries, key=lambda entry: entry[0]))


    def _write_entries(self, entries: list[tuple[bytes, Any]]):
        # Entries must already be sorted by key.
        self._enter()
        self._buffer += b'd'
        for key, value in entries:
            self._write_bytes(key)
            self._write(value)
        self._buffer += b'e'
        self._depth -= 1


    def _enter(self):
        self._depth += 1
        if self._depth > self.max_depth:
            raise NestingTooDeep(len(self._buffer), self.max_depth)


def encode(value: Any, *, max_depth: int = Encoder.MAX_DEPTH) -> bytes:
    return Encoder(max_depth).encode(value)

import types
import typing
import logging
import dataclasses
from functools import lru_cache
from typing import Any, Optional
from dataclasses import dataclass
from dataclasses_json import Undefined, config
from bencodec.errors import DuplicateFieldTag, MissingFieldTag, NonASCIIString


def key(tag: str, **kwargs: Any) -> Any:
    """Shorthand for `field(metadata=config(field_name=tag))`."""
    metadata = dict(kwargs.pop('metadata', None) or {})
    return dataclasses.field(metadata=config(metadata, field_name=tag), **kwargs)


def field_tag(field: dataclasses.Field) -> Optional[str]:
    overrides = field.metadata.get('dataclasses_json', {})
    letter_case = overrides.get('letter_case')
    if letter_case is None:
        return None
    return letter_case(field.name)


def undefined_policy(cls: type) -> Optional[Undefined]:
    class_config = getattr(cls, 'dataclass_json_config', None) or {}
    return class_config.get('undefined')


def is_optional(hint: Any) -> bool:
    return (
        typing.get_origin(hint) in (typing.Union, types.UnionType) and
        type(None) in typing.get_args(hint)
    )


@dataclass(frozen=True)
class FieldSpec:
    name: str
    tag: str
    key: bytes
    field: dataclasses.Field
    optional: bool = False


class FieldMap:
    def __init__(self, record: type):
        self.record = record
        self.by_key: dict[bytes, FieldSpec] = {}
        hints = typing.get_type_hints(record)

        for field in dataclasses.fields(record):
            tag = field_tag(field)
            if tag is None:
                raise MissingFieldTag(record.__name__, field.name)
            if not tag.isascii():
                raise NonASCIIString(tag)
            optional = is_optional(hints.get(field.name))
            spec = FieldSpec(field.name, tag, tag.encode('ascii'), field, optional)
            if spec.key in self.by_key:
                raise DuplicateFieldTag(record.__name__, tag)
            self.by_key[spec.key] = spec

        self.ordered = [self.by_key[k] for k in sorted(self.by_key)]


    def __iter__(self):
        return iter(self.ordered)


    def __len__(self) -> int:
        return len(self.ordered)


    def get(self, key: bytes) -> Optional[FieldSpec]:
        return self.by_key.get(key)


@lru_cache(maxsize=None)
def field_map(record: type) -> FieldMap:
    mapping = FieldMap(record)
    logging.debug(f'Field map for {record.__name__}: {[spec.tag for spec in mapping]}')
    return mapping

import types
import typing
import logging
import dataclasses
import collections.abc
from functools import lru_cache
from typing import Any, Callable, Optional
from dataclasses_json import Undefined
from bencodec import grammar
from bencodec.fields import FieldSpec, field_map, undefined_policy
from bencodec.errors import NonASCIIBytes, TypeMismatch, UnknownKey, UnsupportedType


class Shape:
    name = ''
    node_type: type = object


    def check(self, node: grammar.Node):
        if not isinstance(node, self.node_type):
            raise TypeMismatch(node.offset, node.kind, self.name)


    def materialize(self, node: grammar.Node, undefined: Optional[Undefined]) -> Any:
        raise NotImplementedError


    def zero(self) -> Any:
        raise NotImplementedError


class IntegerShape(Shape):
    name = 'int'
    node_type = grammar.Integer


    def materialize(self, node: grammar.Node, undefined: Optional[Undefined]) -> int:
        self.check(node)
        return node.value


    def zero(self) -> int:
        return 0


class StringShape(Shape):
    name = 'str'
    node_type = grammar.ByteString


    def materialize(self, node: grammar.Node, undefined: Optional[Undefined]) -> str:
        self.check(node)
        return _ascii(node)


    def zero(self) -> str:
        return ''


class BytesShape(Shape):
    name = 'bytes'
    node_type = grammar.ByteString


    def materialize(self, node: grammar.Node, undefined: Optional[Undefined]) -> bytes:
        self.check(node)
        return node.value


    def zero(self) -> bytes:
        return b''


class SequenceShape(Shape):
    node_type = grammar.List

    def __init__(self, element: Shape, container: Callable = list):
        self.element = element
        self.container = container
        if container is tuple:
            self.name = f'tuple[{element.name}, ...]'
        else:
            self.name = f'list[{element.name}]'


    def materialize(self, node: grammar.Node, undefined: Optional[Undefined]) -> Any:
        self.check(node)
        return self.container(self.element.materialize(item, undefined) for item in node.items)


    def zero(self) -> Any:
        return self.container()


class TupleShape(Shape):
    node_type = grammar.List

    def __init__(self, elements: list[Shape]):
        self.elements = elements
        self.name = f'tuple[{", ".join(e.name for e in elements)}]'


    def materialize(self, node: grammar.Node, undefined: Optional[Undefined]) -> tuple:
        self.check(node)
        if len(node.items) != len(self.elements):
            raise TypeMismatch(node.offset, f'list of {len(node.items)} elements', self.name)
        return tuple(
            shape.materialize(item, undefined)
            for shape, item in zip(self.elements, node.items)
        )


    def zero(self) -> tuple:
        return tuple(shape.zero() for shape in self.elements)


class OptionalShape(Shape):
    def __init__(self, inner: Shape):
        self.inner = inner
        self.node_type = inner.node_type
        self.name = f'Optional[{inner.name}]'


    def materialize(self, node: grammar.Node, undefined: Optional[Undefined]) -> Any:
        return self.inner.materialize(node, undefined)


    def zero(self) -> None:
        return None


class MappingShape(Shape):
    node_type = grammar.Dictionary

    def __init__(self, key_type: type, value: Shape):
        self.key_type = key_type
        self.value = value
        self.name = f'dict[{key_type.__name__}, {value.name}]'


    def materialize(self, node: grammar.Node, undefined: Optional[Undefined]) -> dict:
        self.check(node)
        result = {}
        for key, value in node.entries:
            k = _ascii(key) if self.key_type is str else key.value
            result[k] = self.value.materialize(value, undefined)
        return result


    def zero(self) -> dict:
        return {}


class RecordShape(Shape):
    node_type = grammar.Dictionary

    def __init__(self, record: type):
        self.record = record
        self.name = record.__name__
        self._fields: Optional[dict[bytes, tuple[FieldSpec, Shape]]] = None


    @property
    def fields(self) -> dict[bytes, tuple[FieldSpec, Shape]]:
        # Resolved on first use so that records may refer to themselves.
        if self._fields is None:
            hints = typing.get_type_hints(self.record)
            self._fields = {
                spec.key: (spec, shape_of(hints[spec.name]))
                for spec in field_map(self.record)
            }
        return self._fields


    @property
    def frozen(self) -> bool:
        return self.record.__dataclass_params__.frozen


    def values(self, node: grammar.Node, undefined: Optional[Undefined]) -> dict[str, Any]:
        """Materializes the entries of `node` that map to fields, by attribute name."""
        self.check(node)
        fields = self.fields
        policy = undefined or undefined_policy(self.record) or Undefined.EXCLUDE
        result = {}
        for key, value in node.entries:
            entry = fields.get(key.value)
            if entry is None:
                if policy is Undefined.RAISE:
                    raise UnknownKey(key.offset, key.value, self.name)
                logging.debug(f'Skipping unknown key {key.value!r} at offset {key.offset} for {self.name}')
                continue
            spec, shape = entry
            result[spec.name] = shape.materialize(value, undefined)
        return result


    def build(self, values: dict[str, Any]) -> Any:
        kwargs = {}
        late = {}
        for spec, shape in self.fields.values():
            if spec.name in values:
                value = values[spec.name]
            elif _has_default(spec.field):
                continue
            else:
                value = shape.zero()

            if spec.field.init:
                kwargs[spec.name] = value
            else:
                late[spec.name] = value

        instance = self.record(**kwargs)
        for name, value in late.items():
            object.__setattr__(instance, name, value)
        return instance


    def materialize(self, node: grammar.Node, undefined: Optional[Undefined]) -> Any:
        return self.build(self.values(node, undefined))


    def zero(self) -> Any:
        return self.build({})


INTEGER = IntegerShape()
STRING = StringShape()
BYTES = BytesShape()

_SEQUENCES = (list, collections.abc.Sequence, collections.abc.MutableSequence)
_MAPPINGS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)
_UNIONS = (typing.Union, types.UnionType)


@lru_cache(maxsize=None)
def shape_of(hint: Any) -> Shape:
    if hint is int:
        return INTEGER
    if hint is str:
        return STRING
    if hint is bytes:
        return BYTES
    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        return RecordShape(hint)

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)

    if origin in _SEQUENCES and len(args) == 1:
        return SequenceShape(shape_of(args[0]))

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return SequenceShape(shape_of(args[0]), tuple)
        if args == ((),):
            args = ()
        return TupleShape([shape_of(arg) for arg in args])

    if origin in _MAPPINGS and len(args) == 2 and args[0] in (str, bytes):
        return MappingShape(args[0], shape_of(args[1]))

    if origin in _UNIONS:
        members = [arg for arg in args if arg is not type(None)]
        if len(members) == 1 and len(args) == 2:
            return OptionalShape(shape_of(members[0]))

    raise UnsupportedType(type_name(hint))


def type_name(hint: Any) -> str:
    if isinstance(hint, type):
        return hint.__name__
    return repr(hint)


def _ascii(node: grammar.ByteString) -> str:
    try:
        return node.value.decode('ascii')
    except UnicodeDecodeError:
        raise NonASCIIBytes(node.value.decode('latin-1'), node.offset) from None


def _has_default(field: dataclasses.Field) -> bool:
    return (
        field.default is not dataclasses.MISSING or
        field.default_factory is not dataclasses.MISSING
    )

from typing import Optional, Type, TypeVar
from dataclasses_json import DataClassJsonMixin, Undefined
from bencodec.encoder import encode
from bencodec.decoder import decode

A = TypeVar('A', bound='BencodeMixin')


class BencodeMixin(DataClassJsonMixin):
    def to_bencode(self) -> bytes:
        return encode(self)


    @classmethod
    def from_bencode(cls: Type[A], data: bytes, *, undefined: Optional[Undefined] = None) -> A:
        return decode(data, cls, undefined=undefined)

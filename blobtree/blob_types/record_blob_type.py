#  Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Records are dataclasses. A record is stored as one JSON object blob that maps the stored name of each field to:

- the field value itself as a JSON literal, for fields marked `inline`
- a JSON array/object of element refs, for list/tuple/dict fields not marked `external`
- the ref of the blob that stores the field value, for everything else

The per-field decision is derived once per dataclass and kept in `RecordBlobType.fields`, this is also the shape the
stored object is read back into before being assigned to the destination.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, is_dataclass
from enum import Enum, auto, unique
from typing import TYPE_CHECKING, Any, Optional, TypeVar, get_type_hints

from structlog import get_logger
from typing_extensions import Self, override

from blobtree.blob_types.blob_type import BlobType, Kind, json_type_name
from blobtree.blob_types.container_blob_type import ContainerBlobType, parse_ref
from blobtree.exception import BlobTreeError, DecodingError, UnsupportedTypeError, UnsupportedValueError
from blobtree.tag import FieldSpec, field_specs

if TYPE_CHECKING:
    from _typeshed import DataclassInstance

    from blobtree.context import Context
    from blobtree.decoder import Decoder
    from blobtree.encoder import Encoder
    from blobtree.store import BlobRef

logger = get_logger()

D = TypeVar('D', bound='DataclassInstance')


@unique
class FieldMode(Enum):
    # the value is written in place as a JSON literal
    LITERAL = auto()
    # a container embedded as the JSON of its element refs
    REFS = auto()
    # a single ref to the blob of the value
    REF = auto()


@dataclass(frozen=True, slots=True)
class RecordField:
    spec: FieldSpec
    blob_type: BlobType
    mode: FieldMode


class RecordBlobType(BlobType[D]):
    """ Represents dataclass instances.

    Instances are cached in the type map per dataclass and the fields are resolved on first use, so a dataclass can
    refer to itself (through a reference or a container) without recursing forever while building.
    """

    __slots__ = ('record_class', '_type_map', '_fields', '_skipped_types')

    kind = Kind.RECORD

    record_class: type[D]
    _type_map: BlobType.TypeMap
    _fields: Optional[tuple[RecordField, ...]]
    # kinds of the skipped fields, only used for their zero values, None when the annotation has no kind
    _skipped_types: dict[str, Optional[BlobType]]

    def __init__(self, record_class: type[D], type_map: BlobType.TypeMap) -> None:
        self.record_class = record_class
        self._type_map = type_map
        self._fields = None
        self._skipped_types = {}

    @override
    @classmethod
    def _from_type(cls, type_: type[D], /, *, type_map: BlobType.TypeMap) -> Self:
        if not isinstance(type_, type) or not is_dataclass(type_):
            raise TypeError('expected a dataclass')
        cached = type_map.record_cache.get(type_)
        if cached is None:
            cached = cls(type_, type_map)
            type_map.record_cache[type_] = cached
        assert isinstance(cached, cls)
        return cached

    @property
    def fields(self) -> tuple[RecordField, ...]:
        if self._fields is None:
            self._resolve_fields()
        assert self._fields is not None
        return self._fields

    def _resolve_fields(self) -> None:
        record_name = self.record_class.__name__
        try:
            hints = get_type_hints(self.record_class)
        except NameError as e:
            raise UnsupportedTypeError(f'{record_name} (unresolved annotation)') from e
        dataclass_fields = dataclasses.fields(self.record_class)
        record_fields: list[RecordField] = []
        skipped_types: dict[str, Optional[BlobType]] = {}
        stored_names: set[str] = set()
        for field, spec in zip(dataclass_fields, field_specs(list(dataclass_fields))):
            if spec.skip:
                try:
                    skipped_types[field.name] = BlobType.from_type(hints.get(field.name, Any), type_map=self._type_map)
                except UnsupportedTypeError:
                    # skipped fields can hold anything, the ones without a kind decode as None
                    skipped_types[field.name] = None
                continue
            if spec.stored_name in stored_names:
                raise UnsupportedTypeError(f'{record_name} (duplicate stored name "{spec.stored_name}")')
            stored_names.add(spec.stored_name)
            try:
                blob_type = BlobType.from_type(hints.get(field.name, Any), type_map=self._type_map)
            except BlobTreeError as e:
                raise e.add_context(f'{record_name}.{field.name}')
            if spec.inline:
                mode = FieldMode.LITERAL
            elif blob_type.is_container() and not spec.external:
                mode = FieldMode.REFS
            else:
                mode = FieldMode.REF
            record_fields.append(RecordField(spec, blob_type, mode))
        self._skipped_types = skipped_types
        self._fields = tuple(record_fields)
        logger.debug(
            'record type resolved',
            record=record_name,
            fields={f.spec.stored_name: f.mode.name.lower() for f in record_fields},
            skipped=list(skipped_types),
        )

    def check_value(self, value: Any) -> D:
        if not isinstance(value, self.record_class):
            raise UnsupportedValueError(f'expected {self.record_class.__name__}, got {type(value).__name__}')
        return value

    @override
    def zero_value(self) -> D:
        return self.new_instance({}, None)

    @override
    def is_zero(self, value: D, /) -> bool:
        if value is None:
            return True
        return all(field.blob_type.is_zero(getattr(value, field.spec.name)) for field in self.fields)

    @override
    def encode(self, ctx: Context, encoder: Encoder, value: D, /) -> BlobRef:
        stored = self.encode_fields(ctx, encoder, self.check_value(value))
        return encoder.put(ctx, encoder.dump_json(stored, 'record'), 'record')

    def encode_fields(self, ctx: Context, encoder: Encoder, value: D) -> dict[str, BlobType.Json]:
        """ Build the JSON object of a record, encoding the children of every field that is not a literal.
        """
        stored: dict[str, BlobType.Json] = {}
        for field in self.fields:
            spec = field.spec
            item = getattr(value, spec.name)
            if spec.omit_empty and field.blob_type.is_zero(item):
                continue
            try:
                match field.mode:
                    case FieldMode.LITERAL:
                        stored[spec.stored_name] = field.blob_type.to_literal(item)
                    case FieldMode.REFS:
                        assert isinstance(field.blob_type, ContainerBlobType)
                        ctx.check()
                        stored[spec.stored_name] = field.blob_type.encode_refs(ctx, encoder, item)
                    case FieldMode.REF:
                        stored[spec.stored_name] = str(encoder.encode_value(ctx, item, field.blob_type))
            except BlobTreeError as e:
                raise e.add_context(f'field {spec.name}')
        return stored

    @override
    def _decode_data(self, ctx: Context, decoder: Decoder, data: bytes, current: D | None, /) -> D:
        values = self.decode_fields(ctx, decoder, data, current)
        return self.new_instance(values, current)

    def decode_into(self, ctx: Context, decoder: Decoder, ref: BlobRef, instance: D) -> None:
        """ Decode in place, fields that are skipped or not stored keep their current value.
        """
        data = decoder.fetch(ctx, ref)
        for name, value in self.decode_fields(ctx, decoder, data, instance).items():
            setattr(instance, name, value)

    def decode_fields(self, ctx: Context, decoder: Decoder, data: bytes, current: D | None) -> dict[str, Any]:
        """ Read the stored object and decode the fields present in it, returns a map of attribute name to value.
        """
        stored = decoder.load_json(data, 'record')
        if not isinstance(stored, dict):
            raise DecodingError(f'expected record object, found {json_type_name(stored)}')
        values: dict[str, Any] = {}
        for field in self.fields:
            spec = field.spec
            if spec.stored_name not in stored:
                continue
            json_value = stored[spec.stored_name]
            current_item = getattr(current, spec.name, None) if current is not None else None
            try:
                match field.mode:
                    case FieldMode.LITERAL:
                        values[spec.name] = field.blob_type.from_literal(json_value)
                    case FieldMode.REFS:
                        assert isinstance(field.blob_type, ContainerBlobType)
                        ctx.check()
                        refs = field.blob_type.parse_refs(json_value)
                        values[spec.name] = field.blob_type.build(ctx, decoder, refs, current_item)
                    case FieldMode.REF:
                        if json_value is None:
                            continue
                        ref = parse_ref(json_value)
                        values[spec.name] = decoder.decode_value(ctx, ref, field.blob_type, current_item)
            except BlobTreeError as e:
                raise e.add_context(f'field {spec.name}')
        return values

    def new_instance(self, values: dict[str, Any], current: D | None) -> D:
        """ Build a new instance from decoded values.

        Fields without a decoded value take their value from `current` when there is one, otherwise the zero value of
        their kind. Dataclass defaults are never used, a field left out by `omitempty` holds its zero value and must
        decode back to it.
        """
        kinds: dict[str, Optional[BlobType]] = {field.spec.name: field.blob_type for field in self.fields}
        kinds.update(self._skipped_types)
        init_kwargs: dict[str, Any] = {}
        late_values: dict[str, Any] = {}
        for field in dataclasses.fields(self.record_class):
            if field.name in values:
                value = values[field.name]
            elif current is not None:
                value = getattr(current, field.name)
            else:
                blob_type = kinds.get(field.name)
                value = blob_type.zero_value() if blob_type is not None else None
            if field.init:
                init_kwargs[field.name] = value
            else:
                late_values[field.name] = value
        instance = self.record_class(**init_kwargs)
        for name, value in late_values.items():
            # XXX: also works for frozen dataclasses
            object.__setattr__(instance, name, value)
        return instance

    @override
    def to_literal(self, value: D, /) -> BlobType.Json:
        value = self.check_value(value)
        literal: dict[str, BlobType.Json] = {}
        for field in self.fields:
            item = getattr(value, field.spec.name)
            if field.spec.omit_empty and field.blob_type.is_zero(item):
                continue
            try:
                literal[field.spec.stored_name] = field.blob_type.to_literal(item)
            except BlobTreeError as e:
                raise e.add_context(f'field {field.spec.name}')
        return literal

    @override
    def from_literal(self, json_value: BlobType.Json, /) -> D:
        if not isinstance(json_value, dict):
            raise DecodingError(f'expected object, found {json_type_name(json_value)}')
        values: dict[str, Any] = {}
        for field in self.fields:
            if field.spec.stored_name not in json_value:
                continue
            try:
                values[field.spec.name] = field.blob_type.from_literal(json_value[field.spec.stored_name])
            except BlobTreeError as e:
                raise e.add_context(f'field {field.spec.name}')
        return self.new_instance(values, None)

    @override
    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.record_class.__name__})'

from dataclasses import dataclass
from typing import Any, Optional

import pytest

from blobtree.blob_types import (
    BoolBlobType,
    DictBlobType,
    DynamicBlobType,
    Float32BlobType,
    Float64BlobType,
    Int64BlobType,
    ListBlobType,
    OptionalBlobType,
    RecordBlobType,
    StrBlobType,
    TupleBlobType,
    Uint8BlobType,
    VarTupleBlobType,
    make_blob_type,
)
from blobtree.exception import UnsupportedTypeError
from blobtree.types import Float32, Uint8


@dataclass
class Leaf:
    name: str


@dataclass
class Tree:
    leaves: list[Leaf]
    children: list['Tree']


@dataclass
class Broken:
    value: 'DoesNotExist'  # type: ignore[name-defined]  # noqa: F821


@pytest.mark.parametrize('type_,expected', [
    (bool, BoolBlobType),
    (int, Int64BlobType),
    (float, Float64BlobType),
    (Float32, Float32BlobType),
    (Uint8, Uint8BlobType),
    (str, StrBlobType),
    (list[int], ListBlobType),
    (tuple[int, ...], VarTupleBlobType),
    (tuple[int, str], TupleBlobType),
    (dict[str, int], DictBlobType),
    (Optional[int], OptionalBlobType),
    (int | None, OptionalBlobType),
    (Any, DynamicBlobType),
    (object, DynamicBlobType),
    (Leaf, RecordBlobType),
])
def test_blob_type_class(type_, expected):
    assert isinstance(make_blob_type(type_), expected)


def test_reprs():
    assert repr(make_blob_type(int)) == 'Int64BlobType()'
    assert repr(make_blob_type(list[str])) == 'ListBlobType(StrBlobType())'
    assert repr(make_blob_type(dict[Uint8, bool])) == 'DictBlobType(Uint8BlobType(), BoolBlobType())'
    assert repr(make_blob_type(tuple[int, str])) == 'TupleBlobType(Int64BlobType(), StrBlobType())'
    assert repr(make_blob_type(Optional[Leaf])) == 'OptionalBlobType(RecordBlobType(Leaf))'


def test_cached():
    assert make_blob_type(list[int]) is make_blob_type(list[int])
    assert make_blob_type(Leaf) is make_blob_type(Leaf)


def test_recursive_record():
    tree = make_blob_type(Tree)
    assert isinstance(tree, RecordBlobType)
    names = [field.spec.stored_name for field in tree.fields]
    assert names == ['leaves', 'children']


def test_unresolved_annotation():
    blob_type = make_blob_type(Broken)
    with pytest.raises(UnsupportedTypeError, match='unresolved annotation'):
        blob_type.fields


@pytest.mark.parametrize('type_', [
    complex,
    set[int],
    frozenset,
    int | str,
    Optional[int | str],
    list,
    dict[float, int],
    dict[str],
    tuple,
])
def test_unsupported(type_):
    with pytest.raises(UnsupportedTypeError):
        make_blob_type(type_)

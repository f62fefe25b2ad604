import dataclasses
from dataclasses import dataclass

import pytest

from blobtree.tag import METADATA_KEY, FieldSpec, blob_field, field_specs, parse_directive


@pytest.mark.parametrize('directive,expected', [
    (None, FieldSpec(name='X', stored_name='X')),
    ('', FieldSpec(name='X', stored_name='X')),
    ('-', FieldSpec(name='X', stored_name='X', skip=True)),
    ('b', FieldSpec(name='X', stored_name='b')),
    (',external', FieldSpec(name='X', stored_name='X', external=True)),
    (',omitempty', FieldSpec(name='X', stored_name='X', omit_empty=True)),
    ('x,inline,omitempty', FieldSpec(name='X', stored_name='x', inline=True, omit_empty=True)),
    # a directive made of a single word is a name, not an option
    ('inline', FieldSpec(name='X', stored_name='inline')),
    # unknown options are ignored
    ('y,nope,external', FieldSpec(name='X', stored_name='y', external=True)),
])
def test_parse_directive(directive, expected):
    assert parse_directive('X', directive) == expected


def test_field_specs_keeps_declaration_order():
    @dataclass
    class Sample:
        z: int = 0
        a: int = dataclasses.field(default=0, metadata={METADATA_KEY: 'aa,omitempty'})
        m: int = dataclasses.field(default=0, metadata={METADATA_KEY: '-'})

    specs = field_specs(list(dataclasses.fields(Sample)))
    assert [spec.name for spec in specs] == ['z', 'a', 'm']
    assert [spec.stored_name for spec in specs] == ['z', 'aa', 'm']
    assert specs[1].omit_empty
    assert specs[2].skip


def test_field_specs_rejects_non_str_directive():
    @dataclass
    class Sample:
        a: int = dataclasses.field(default=0, metadata={METADATA_KEY: 1})

    with pytest.raises(TypeError):
        field_specs(list(dataclasses.fields(Sample)))


def test_blob_field():
    @dataclass
    class Sample:
        a: int = blob_field('x', inline=True, default=1)
        b: list[int] = blob_field(external=True, omitempty=True, default_factory=list)
        c: bool = blob_field(skip=True, default=False)
        d: int = blob_field(default=0, metadata={'other': 1})

    a, b, c, d = dataclasses.fields(Sample)
    assert a.metadata[METADATA_KEY] == 'x,inline'
    assert a.default == 1
    assert b.metadata[METADATA_KEY] == ',external,omitempty'
    assert b.default_factory is list
    assert c.metadata[METADATA_KEY] == '-'
    assert d.metadata == {'other': 1, METADATA_KEY: ''}
    assert field_specs([a, b, c, d]) == [
        FieldSpec(name='a', stored_name='x', inline=True),
        FieldSpec(name='b', stored_name='b', external=True, omit_empty=True),
        FieldSpec(name='c', stored_name='c', skip=True),
        FieldSpec(name='d', stored_name='d'),
    ]

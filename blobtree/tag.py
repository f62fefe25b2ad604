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
Per-field directives for records.

A dataclass field takes its directive from `field(metadata={'blobtree': '<directive>'})`, or more conveniently from
`blob_field()`. A directive is a stored name followed by comma-separated options:

- `'-'` skips the field, it is neither encoded nor decoded
- `'name'` stores the field under `name` instead of the attribute name
- `'name,option,option'` sets the name and the options
- `',option,option'` only sets the options

Available options are:

- `inline`: the value is embedded in the record blob as a JSON literal, instead of being a ref to a separate blob
- `external`: for containers (list/tuple/dict), store the whole container as its own blob and embed a single ref, by
  default the container is embedded as a list/object of refs to its elements
- `omitempty`: leave the field out of the record blob when it holds its zero value

Unknown options are ignored.
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, Optional

METADATA_KEY = 'blobtree'

INLINE = 'inline'
EXTERNAL = 'external'
OMIT_EMPTY = 'omitempty'
SKIP = '-'


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """ How one record field is stored, derived once per record type.
    """

    # attribute name on the dataclass
    name: str
    # key used in the record blob
    stored_name: str
    skip: bool = False
    inline: bool = False
    external: bool = False
    omit_empty: bool = False


def parse_directive(name: str, directive: Optional[str]) -> FieldSpec:
    """ Parse one field directive.

    >>> parse_directive('B', 'b')
    FieldSpec(name='B', stored_name='b', skip=False, inline=False, external=False, omit_empty=False)
    >>> parse_directive('E', ',external,bogus')
    FieldSpec(name='E', stored_name='E', skip=False, inline=False, external=True, omit_empty=False)
    >>> parse_directive('I', '-').skip
    True
    >>> parse_directive('H', 'inline').stored_name
    'inline'
    """
    if directive is None or directive == '':
        return FieldSpec(name=name, stored_name=name)
    if directive == SKIP:
        return FieldSpec(name=name, stored_name=name, skip=True)
    stored_name, *options = directive.split(',')
    return FieldSpec(
        name=name,
        stored_name=stored_name or name,
        inline=INLINE in options,
        external=EXTERNAL in options,
        omit_empty=OMIT_EMPTY in options,
    )


def field_specs(fields: list[dataclasses.Field]) -> list[FieldSpec]:
    """ Derive the FieldSpec of each field, the declaration order is kept.
    """
    specs: list[FieldSpec] = []
    for field in fields:
        directive = field.metadata.get(METADATA_KEY)
        if directive is not None and not isinstance(directive, str):
            raise TypeError(f'field {field.name}: directive must be a str, got {type(directive).__name__}')
        specs.append(parse_directive(field.name, directive))
    return specs


def blob_field(
    name: str = '',
    *,
    skip: bool = False,
    inline: bool = False,
    external: bool = False,
    omitempty: bool = False,
    **kwargs: Any,
) -> Any:
    """ Shortcut for `dataclasses.field()` with a directive built from keyword arguments.

    Remaining keyword arguments (`default`, `default_factory`, ...) are forwarded to `dataclasses.field()`.
    """
    if skip:
        directive = SKIP
    else:
        options = [opt for opt, enabled in ((INLINE, inline), (EXTERNAL, external), (OMIT_EMPTY, omitempty)) if enabled]
        directive = ','.join([name, *options])
    metadata = dict(kwargs.pop('metadata', None) or {})
    metadata[METADATA_KEY] = directive
    return dataclasses.field(metadata=metadata, **kwargs)

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

import json
from typing import Any

_HTML_ESCAPES = {
    '<': '\\u003c',
    '>': '\\u003e',
    '&': '\\u0026',
}

# these two are valid in JSON strings but not in JavaScript source, they are always escaped
_LINE_SEPARATOR_ESCAPES = {
    '\u2028': '\\u2028',
    '\u2029': '\\u2029',
}


def json_loadb(raw: bytes) -> Any:
    """Compact loading as UTF-8 encoded bytes/string to a Python object."""
    # XXX: from Python3.6 onwards, json.loads can take bytes
    #      See: https://docs.python.org/3/library/json.html#json.loads
    try:
        return json.loads(raw)
    except UnicodeDecodeError as exc:
        # We cannot do `doc=raw` because it expects a str and there
        # is no way to decode it.
        raise json.JSONDecodeError(msg=str(exc), doc=raw.hex(), pos=exc.start) from exc


def json_dumpb_blob(obj: object, *, escape_html: bool = False, prefix: str = '', indent: str = '') -> bytes:
    """ Format obj the way container and record blobs are written.

    Object keys are sorted, the output always ends with a newline, U+2028 and U+2029 are always escaped, and `<`, `>`,
    `&` are escaped only when `escape_html` is set. When `prefix` or `indent` is non-empty the output is indented with
    `indent` per nesting level, and every line but the first starts with `prefix`. The prefix is written as is, the
    indent must not contain characters that get escaped.

    Non-finite floats are rejected with a `ValueError`.

    >>> json_dumpb_blob({'b': 1, 'a': ['x', '<y>']})
    b'{"a":["x","<y>"],"b":1}\\n'
    >>> json_dumpb_blob({'a': '<y>'}, escape_html=True)
    b'{"a":"\\\\u003cy\\\\u003e"}\\n'
    >>> print(json_dumpb_blob({'a': [1]}, prefix='>', indent='  ').decode(), end='')
    {
    >  "a": [
    >    1
    >  ]
    >}
    """
    if prefix or indent:
        text = json.dumps(obj, separators=(',', ': '), indent=indent, sort_keys=True, ensure_ascii=False,
                          allow_nan=False)
    else:
        text = json.dumps(obj, separators=(',', ':'), sort_keys=True, ensure_ascii=False, allow_nan=False)
    # XXX: these characters can only show up inside JSON strings until the prefix is added
    for char, escaped in _LINE_SEPARATOR_ESCAPES.items():
        text = text.replace(char, escaped)
    if escape_html:
        for char, escaped in _HTML_ESCAPES.items():
            text = text.replace(char, escaped)
    if prefix:
        first, *rest = text.split('\n')
        text = '\n'.join([first, *(prefix + line for line in rest)])
    return (text + '\n').encode('utf-8', errors='surrogateescape')

import hashlib

import pytest

from blobtree.exception import ParseError
from blobtree.store import BlobRef


def test_from_data_is_deterministic():
    assert BlobRef.from_data(b'foo') == BlobRef.from_data(b'foo')
    assert BlobRef.from_data(b'foo') != BlobRef.from_data(b'bar')
    assert BlobRef.from_data(b'foo').digest == hashlib.sha224(b'foo').digest()


@pytest.mark.parametrize('hash_name', ['sha1', 'sha224', 'sha256'])
def test_text_form(hash_name):
    ref = BlobRef.from_data(b'foo', hash_name)
    text = str(ref)
    assert text == f'{hash_name}-{hashlib.new(hash_name, b"foo").hexdigest()}'
    assert BlobRef.parse(text) == ref
    assert repr(ref) == f'BlobRef({text!r})'


def test_refs_are_hashable():
    refs = {BlobRef.from_data(b'a'), BlobRef.from_data(b'a'), BlobRef.from_data(b'b')}
    assert len(refs) == 2


@pytest.mark.parametrize('text', [
    '',
    'sha224',
    'sha224-',
    'sha224-zz',
    'SHA224-' + '00' * 28,
    'sha224-' + '00' * 27,
    'md5-' + '00' * 16,
])
def test_parse_invalid(text):
    with pytest.raises(ParseError):
        BlobRef.parse(text)


def test_invalid_construction():
    with pytest.raises(ValueError):
        BlobRef('sha224', b'\x00')
    with pytest.raises(ValueError):
        BlobRef.from_data(b'', 'md5')

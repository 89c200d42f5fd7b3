import pytest

from downpour.bencode import bdecode, decode
from downpour.element import ByteString, Integer, List, Dict, DecodedDocument
from downpour.error import InvalidByteStringData
from downpour.render import render, render_error, render_document


def test_render_bytestring():
    assert render(ByteString(b'announce')) == '"announce"'
    assert render(ByteString(b'')) == '""'
    assert render(ByteString('café'.encode())) == '"café"'
    assert render(ByteString(b'say "hi"')) == '"say \\"hi\\""'
    assert render(ByteString(b'a\\b')) == '"a\\\\b"'


def test_render_binary_bytestring_as_base64():
    assert render(ByteString(b'\xff\xfe')) == '"//4="'
    assert render(ByteString(b'\x80' * 3)) == '"gICA"'


def test_render_integer():
    assert render(Integer(10)) == '10'
    assert render(Integer(-18)) == '-18'
    assert render(Integer(0)) == '0'


def test_render_list():
    assert render(List(())) == '[]'
    assert render(bdecode(b'li10ei1el1:bee')[0]) == '[10, 1, ["b"]]'
    assert render(List((List(()), List(())))) == '[[], []]'


def test_render_dict():
    assert render(Dict(())) == '{}'
    assert render(bdecode(b'd1:ai10ee')[0]) == '{"a": 10}'
    assert render(bdecode(b'd1:bi1e1:al2:xyee')[0]) == '{"b": 1, "a": ["xy"]}'
    assert render(Dict(((b'\xff', Integer(1)),))) == '{"/w==": 1}'
    assert render(Dict(((b'k', Dict(((b'x', List(())),))),))) == '{"k": {"x": []}}'


def test_render_is_not_bencoding():
    data = b'd4:spaml1:a1:bee'
    assert render(bdecode(data)[0]) == '{"spam": ["a", "b"]}'
    assert render(bdecode(data)[0]).encode() != data


def test_render_deep_tree():
    depth = 5000
    element = List(())
    for _ in range(depth - 1):
        element = List((element,))
    assert render(element) == '[' * depth + ']' * depth


def test_render_rejects_non_element():
    with pytest.raises(TypeError):
        render(42)


def test_render_error():
    assert render_error(InvalidByteStringData(2, 'Truncated.')) == 'error at offset 2: InvalidByteStringData: Truncated.'


def test_render_document():
    document = decode(b'li10ei1el1:bee1:a')
    assert render_document(document) == '[10, 1, ["b"]]\n"a"'
    assert str(document) == render_document(document)
    assert render_document(DecodedDocument()) == ''

    document = decode(b'5:abc')
    assert render_document(document).startswith('error at offset 2: InvalidByteStringData: ')

'''
This module renders decoded elements as JSON-like text for display.

The output is lossy: byte strings that are not valid text are shown as Base64,
so the rendered text can never be turned back into the bencoded input.
'''

__all__ = ['render', 'render_error', 'render_document']

import base64

from downpour.config import TEXT_ENCODING
from downpour.element import ByteString, Integer, List, Dict, Element, DecodedDocument
from downpour.error import DecodeError




def _quote(bchars: bytes) -> str:
    try:
        chars = bchars.decode(TEXT_ENCODING)
    except UnicodeDecodeError:
        chars = base64.b64encode(bchars).decode('ascii')
    return '"' + chars.replace('\\', '\\\\').replace('"', '\\"') + '"'


def render(element: Element) -> str:
    ret: list[str] = []
    todo: list = [element]  # pending elements and literal text, next one last
    while todo:
        item = todo.pop()
        if isinstance(item, str):
            ret.append(item)
        elif isinstance(item, ByteString):
            ret.append(_quote(item.value))
        elif isinstance(item, Integer):
            ret.append(str(item.value))
        elif isinstance(item, List):
            parts: list = ['[']
            for i, child in enumerate(item.items):
                if i: parts.append(', ')
                parts.append(child)
            parts.append(']')
            todo.extend(reversed(parts))
        elif isinstance(item, Dict):
            parts = ['{']
            for i, (key, child) in enumerate(item.pairs):
                if i: parts.append(', ')
                parts.append(_quote(key) + ': ')
                parts.append(child)
            parts.append('}')
            todo.extend(reversed(parts))
        else:
            raise TypeError(f'Render expects ByteString|Integer|List|Dict, not {type(item)}.')
    return ''.join(ret)


def render_error(error: DecodeError) -> str:
    return f'error at offset {error.offset}: {error.kind}: {error.message}'


def render_document(document: DecodedDocument) -> str:
    '''Render each top-level element on its own line, or the error if the decode failed.'''
    if document.error is not None:
        return render_error(document.error)
    return '\n'.join(render(element) for element in document.elements)

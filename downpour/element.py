from __future__ import annotations


__all__ = ['ByteString', 'Integer', 'List', 'Dict', 'Element', 'DecodedDocument']

from dataclasses import dataclass
from typing import Any, Iterator

from downpour.error import DecodeError




@dataclass(frozen=True)
class ByteString():

    value: bytes = b''  # raw bytes, not necessarily valid text

    def unwrap(self) -> bytes:
        return self.value




@dataclass(frozen=True)
class Integer():

    value: int = 0  # always within signed 64-bit range

    def unwrap(self) -> int:
        return self.value




@dataclass(frozen=True)
class List():

    items: tuple[Element, ...] = ()  # in encounter order

    def unwrap(self) -> list:
        return _unwrap(self)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Element]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Element:
        return self.items[index]




@dataclass(frozen=True)
class Dict():

    '''
    Key/value pairs kept in encounter order.
    Neither key order nor key uniqueness is enforced, so duplicates are kept side by side.
    '''

    pairs: tuple[tuple[bytes, Element], ...] = ()

    def get(self, key: bytes, default: Any = None) -> Any:
        '''Return the value of the first pair under `key`.'''
        for k, v in self.pairs:
            if k == key:
                return v
        return default

    def keys(self) -> list[bytes]:
        return [k for k, _ in self.pairs]

    def unwrap(self) -> dict:
        #! the later duplicate overwrites the earlier one
        return _unwrap(self)

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[tuple[bytes, Element]]:
        return iter(self.pairs)

    def __contains__(self, key: bytes) -> bool:
        return any(k == key for k, _ in self.pairs)


Element = ByteString | Integer | List | Dict


def _unwrap(element: Element) -> Any:
    '''Convert an element to plain python values with a work-list, so the depth is not bounded by recursion.'''
    if isinstance(element, (ByteString, Integer)):
        return element.value

    ret: list|dict = [] if isinstance(element, List) else {}
    todo: list[tuple[List|Dict, list|dict]] = [(element, ret)]
    while todo:
        node, out = todo.pop()
        for key, child in (enumerate(node.items) if isinstance(node, List) else node.pairs):
            if isinstance(child, (ByteString, Integer)):
                value = child.value
            else:
                value = [] if isinstance(child, List) else {}
                todo.append((child, value))
            if isinstance(out, list):
                out.append(value)
            else:
                out[key] = value
    return ret




@dataclass(frozen=True)
class DecodedDocument():

    '''The all-or-nothing outcome of decoding one input: either every top-level element or one error.'''

    elements: tuple[Element, ...] = ()
    error: DecodeError|None = None

    def __post_init__(self):
        if self.error is not None and self.elements:
            raise ValueError('A failed document cannot carry elements.')

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        from downpour.render import render_document
        return render_document(self)

'''
This module provides the bdecode functions.

Every decoder takes the whole input plus a `start` offset and returns the decoded element
together with the offset of the first byte it did not consume.
All offsets, in results and in raised `DecodeError`s, are absolute positions in the given input,
so calling a decoder on a slice with `start=0` yields offsets relative to that slice.
'''

from __future__ import annotations


__all__ = [
    'read_ascii_int',
    'decode_bytestring',
    'decode_integer',
    'decode_list',
    'decode_dict',
    'dispatch',
    'bdecode',
    'decode',
    ]

from dataclasses import dataclass, field

from downpour.config import MAX_DEPTH as _DEPTH
from downpour.config import STRICT_DICT_KEYS as _STRICT
from downpour.config import INT64_MIN, INT64_MAX
from downpour.element import ByteString, Integer, List, Dict, Element, DecodedDocument
from downpour.error import (
    DecodeError,
    NothingToDecode,
    InvalidDigit,
    IntegerOverflow,
    MissingDelimiter,
    InvalidByteStringSize,
    InvalidByteStringData,
    MissingStartDelimiter,
    MissingEndDelimiter,
    InvalidIntegerValue,
    InvalidDictKey,
    DispatchFailed,
    NestingTooDeep,
    )


_ZERO = ord('0')
_NINE = ord('9')
_MINUS = ord('-')
_INT = ord('i')
_LIST = ord('l')
_DICT = ord('d')
_END = ord('e')
_COLON = b':'




def read_ascii_int(chars: bytes) -> int:
    '''
    Read an optionally negative run of ascii digits as a signed 64-bit integer.
    Offsets of raised errors are relative to `chars`.
    Leading zeros and `-0` are accepted.
    '''
    if not chars: raise NothingToDecode(0, 'Nothing to decode as integer.')

    negative = chars[0] == _MINUS
    first = 1 if negative else 0
    if first == len(chars): raise NothingToDecode(first, 'Integer sign is not followed by any digit.')

    # the magnitude limit differs by one between the two signs
    limit = -INT64_MIN if negative else INT64_MAX
    value = 0
    for i in range(first, len(chars)):
        c = chars[i]
        if not _ZERO <= c <= _NINE:
            raise InvalidDigit(i, f'Expect an ascii digit, not {bytes((c,))!r}.')
        value = value * 10 + (c - _ZERO)
        if value > limit:
            raise IntegerOverflow(i, 'Integer does not fit in 64 bits.')

    return -value if negative else value




def decode_bytestring(data: bytes, start: int = 0) -> tuple[ByteString, int]:
    '''Decode `<length>:<payload>` starting at `start`.'''
    colon = data.find(_COLON, start)
    if colon < 0: raise MissingDelimiter(start, "Cannot find ':' after byte string length.")

    try:
        length = read_ascii_int(data[start:colon])
    except DecodeError as e:
        raise InvalidByteStringSize(start + e.offset, f'Cannot read byte string length: {e.message}') from e
    if length < 0: raise InvalidByteStringSize(start, f'Byte string length cannot be negative, got {length}.')

    begin = colon + 1
    end = begin + length
    if end > len(data):
        raise InvalidByteStringData(
            begin, f'Byte string declares {length} bytes but only {len(data) - begin} remain (truncated input).'
            )

    return ByteString(bytes(data[begin:end])), end




def decode_integer(data: bytes, start: int = 0) -> tuple[Integer, int]:
    '''Decode `i<digits>e` starting at `start`.'''
    if data[start:start + 1] != b'i': raise MissingStartDelimiter(start, "Cannot read integer: missing leading 'i'.")

    end = data.find(b'e', start + 1)
    if end < 0: raise MissingEndDelimiter(start, "Cannot read integer: missing trailing 'e'.")

    try:
        value = read_ascii_int(data[start + 1:end])
    except DecodeError as e:
        raise InvalidIntegerValue(start + 1 + e.offset, f'Cannot read integer: {e.message}') from e

    return Integer(value), end + 1




@dataclass
class _Frame():

    '''An open list or dict awaiting its trailing `e`.'''

    start: int  # offset of the leading `l` or `d`
    is_dict: bool
    items: list = field(default_factory=list)
    key: bytes|None = None  # a dict key waiting for its value

    @property
    def name(self) -> str:
        return 'dict' if self.is_dict else 'list'

    def add(self, element: Element):
        if self.is_dict:
            self.items.append((self.key, element))
            self.key = None
        else:
            self.items.append(element)

    def close(self) -> Element:
        return Dict(tuple(self.items)) if self.is_dict else List(tuple(self.items))


def _decode_nested(data: bytes, start: int, max_depth: int, strict_keys: bool) -> tuple[Element, int]:
    '''
    Decode a list or dict, including everything nested in it, with an explicit stack of open frames.
    At most `max_depth` frames may be open at the same time.
    '''
    if max_depth < 1: raise NestingTooDeep(start, f'Nesting depth exceeds the limit of {max_depth}.')

    stack = [_Frame(start, data[start] == _DICT)]
    pos = start + 1
    while True:
        frame = stack[-1]
        awaiting_value = frame.is_dict and frame.key is not None

        if pos >= len(data):
            if awaiting_value:
                raise DispatchFailed(pos, 'Cannot read dict value: ran out of input.')
            raise MissingEndDelimiter(
                pos, f"Cannot read {frame.name} started at offset {frame.start}: ran out of input before trailing 'e'."
                )

        if not awaiting_value:
            if data[pos] == _END:
                pos += 1
                element = frame.close()
                stack.pop()
                if not stack:
                    return element, pos
                stack[-1].add(element)
                continue
            if frame.is_dict:
                try:
                    key, pos = decode_bytestring(data, pos)
                except DecodeError as e:
                    raise InvalidDictKey(e.offset, f'Cannot read dict key: {e.message}') from e
                if strict_keys and frame.items and key.value <= frame.items[-1][0]:
                    raise InvalidDictKey(
                        pos - len(key.value), f'Dict key {key.value!r} is not sorted after {frame.items[-1][0]!r}.'
                        )
                frame.key = key.value
                continue

        lead = data[pos]
        if _ZERO <= lead <= _NINE:
            element, pos = decode_bytestring(data, pos)
        elif lead == _INT:
            element, pos = decode_integer(data, pos)
        elif lead == _LIST or lead == _DICT:
            if len(stack) >= max_depth:
                raise NestingTooDeep(pos, f'Nesting depth exceeds the limit of {max_depth}.')
            stack.append(_Frame(pos, lead == _DICT))
            pos += 1
            continue
        else:
            raise DispatchFailed(pos, f'Cannot determine element type from {bytes((lead,))!r}.')
        frame.add(element)


def decode_list(
    data: bytes,
    start: int = 0,
    max_depth: int = _DEPTH,
    strict_keys: bool = _STRICT,
    ) -> tuple[List, int]:
    '''Decode `l<elements>e` starting at `start`.'''
    if data[start:start + 1] != b'l': raise MissingStartDelimiter(start, "Cannot read list: missing leading 'l'.")
    return _decode_nested(data, start, max_depth, strict_keys)


def decode_dict(
    data: bytes,
    start: int = 0,
    max_depth: int = _DEPTH,
    strict_keys: bool = _STRICT,
    ) -> tuple[Dict, int]:
    '''Decode `d<key><value>...e` starting at `start`.'''
    if data[start:start + 1] != b'd': raise MissingStartDelimiter(start, "Cannot read dict: missing leading 'd'.")
    return _decode_nested(data, start, max_depth, strict_keys)




def dispatch(
    data: bytes,
    start: int = 0,
    max_depth: int = _DEPTH,
    strict_keys: bool = _STRICT,
    ) -> tuple[Element, int]|None:
    '''
    Decode the element starting at `start`, picking the decoder by its leading byte.
    Return None if there is no input left at `start`.
    '''
    if start >= len(data):
        return None

    lead = data[start]
    if _ZERO <= lead <= _NINE:
        return decode_bytestring(data, start)
    elif lead == _INT:
        return decode_integer(data, start)
    elif lead == _LIST or lead == _DICT:
        return _decode_nested(data, start, max_depth, strict_keys)
    else:
        raise DispatchFailed(start, f'Cannot determine element type from {bytes((lead,))!r}.')




def bdecode(data: bytes, max_depth: int = _DEPTH, strict_keys: bool = _STRICT) -> list[Element]:
    '''
    Decode all concatenated top-level elements in `data`.
    An empty input decodes to an empty list. The first malformed element aborts the whole decode.
    '''
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f'Bdecode expects bytes, not {type(data)}.')
    data = bytes(data)

    ret: list[Element] = []
    pos = 0
    while (result := dispatch(data, pos, max_depth, strict_keys)) is not None:
        element, pos = result
        ret.append(element)
    return ret


def decode(data: bytes, max_depth: int = _DEPTH, strict_keys: bool = _STRICT) -> DecodedDocument:
    '''Like `bdecode()`, but report the outcome as a `DecodedDocument` instead of raising.'''
    try:
        return DecodedDocument(elements=tuple(bdecode(data, max_depth, strict_keys)))
    except DecodeError as e:
        return DecodedDocument(error=e)

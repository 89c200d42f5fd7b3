from __future__ import annotations


__all__ = ['TorrentSummary', 'fromBytes', 'fromTorrent']

import codecs
import os
import urllib.parse
import warnings
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import dateutil.tz
from natsort import os_sorted

from downpour.bencode import bdecode, decode_bytestring, dispatch
from downpour.config import MAX_DEPTH as _DEPTH
from downpour.config import STRICT_DICT_KEYS as _STRICT
from downpour.config import TEXT_ENCODING
from downpour.element import ByteString, Integer, List, Dict, Element
from downpour.error import NotATorrentError
from downpour.hasher import toSHA1

_SHA1_LEN = 20


def fromTorrent(path, max_depth: int = _DEPTH, strict_keys: bool = _STRICT) -> TorrentSummary:
    '''Wrapper function to read a torrent file and summarize it.'''
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"The supplied '{path}' does not exist.")
    return fromBytes(path.read_bytes(), max_depth, strict_keys)


def fromBytes(data: bytes, max_depth: int = _DEPTH, strict_keys: bool = _STRICT) -> TorrentSummary:
    '''
    Decode a torrent and pick out its well-known metainfo keys.
    Raise `DecodeError` on malformed bencoding and `NotATorrentError` if the content is not a single dict.
    Malformed optional keys are skipped with a warning.
    '''
    data = bytes(data)
    elements = bdecode(data, max_depth, strict_keys)
    if len(elements) != 1 or not isinstance(elements[0], Dict):
        raise NotATorrentError('Expect the torrent to hold exactly one bencoded dict.')
    fulldict: Dict = elements[0]

    # we need to know the encoding first
    encoding = _text(fulldict, b'encoding', TEXT_ENCODING) or TEXT_ENCODING
    try:
        codecs.lookup(encoding)
    except LookupError:
        warnings.warn(f"Unknown encoding '{encoding}', falling back to {TEXT_ENCODING}.")
        encoding = TEXT_ENCODING

    trackers: list[list[str]] = []
    announce = _text(fulldict, b'announce', encoding)
    if announce: trackers.append([announce])
    for tier in _list(fulldict, b'announce-list'):
        urls = [u for url in (tier.items if isinstance(tier, List) else ()) if (u := _bytes2str(url, encoding))]
        urls = [u for u in urls if not any(u in t for t in trackers)]
        if urls: trackers.append(urls)

    infodict = fulldict.get(b'info')
    has_info = isinstance(infodict, Dict)
    if not has_info:
        if infodict is not None: warnings.warn("Ignored 'info' as it is not a dict.")
        infodict = Dict()

    name = _text(infodict, b'name', encoding)
    files: list[_FileInfo] = []
    if b'files' in infodict:
        for entry in _list(infodict, b'files'):
            if not isinstance(entry, Dict):
                warnings.warn('Ignored a file entry as it is not a dict.')
                continue
            parts = tuple(_bytes2str(p, encoding) for p in _list(entry, b'path'))
            files.append(_FileInfo(path=parts, size=_int(entry, b'length')))
    elif b'length' in infodict:
        files.append(_FileInfo(path=(name,), size=_int(infodict, b'length')))

    pieces = infodict.get(b'pieces')
    num_pieces = len(pieces.value) // _SHA1_LEN if isinstance(pieces, ByteString) else 0

    span = _infoSpan(data, max_depth, strict_keys) if has_info else None
    return TorrentSummary(
        name=name,
        trackers=trackers,
        comment=_text(fulldict, b'comment', encoding),
        created_by=_text(fulldict, b'created by', encoding),
        creation_date=_int(fulldict, b'creation date'),
        encoding=encoding,
        piece_length=_int(infodict, b'piece length'),
        num_pieces=num_pieces,
        private=_int(infodict, b'private') == 1,
        source=_text(infodict, b'source', encoding),
        files=files,
        hash=toSHA1(data[span[0]:span[1]]).hex() if span else '',
        )


def _infoSpan(data: bytes, max_depth: int, strict_keys: bool) -> tuple[int, int]|None:
    '''Locate the raw bytes of the top-level `info` value, which is what the info-hash is taken over.'''
    pos = 1
    while pos < len(data) and data[pos] != ord('e'):
        key, pos = decode_bytestring(data, pos)
        begin = pos
        if (result := dispatch(data, pos, max_depth, strict_keys)) is None:
            break
        pos = result[1]
        if key.value == b'info':
            return begin, pos
    return None


def _bytes2str(element: Element|None, encoding: str) -> str:
    if isinstance(element, ByteString):
        return element.value.decode(encoding, errors='replace')
    return ''


def _text(d: Dict, key: bytes, encoding: str) -> str:
    value = d.get(key)
    if value is not None and not isinstance(value, ByteString):
        warnings.warn(f"Ignored '{key.decode()}' as it is not a byte string.")
    return _bytes2str(value, encoding)


def _int(d: Dict, key: bytes) -> int:
    value = d.get(key)
    if isinstance(value, Integer):
        return value.value
    if value is not None:
        warnings.warn(f"Ignored '{key.decode()}' as it is not an integer.")
    return 0


def _list(d: Dict, key: bytes) -> tuple[Element, ...]:
    value = d.get(key)
    if isinstance(value, List):
        return value.items
    if value is not None:
        warnings.warn(f"Ignored '{key.decode()}' as it is not a list.")
    return ()




@dataclass
class _FileInfo():
    path: tuple[str, ...]
    size: int

    @property
    def relpath(self) -> str:
        return os.path.join(*self.path) if self.path else ''




@dataclass
class TorrentSummary():

    '''The most common metadata of a torrent, as read from its bencoded content.'''

    name: str = ''  # the root name of the torrent
    trackers: list[list[str]] = field(default_factory=list)  # tiers of tracker urls, `announce` first
    comment: str = ''
    created_by: str = ''
    creation_date: int = 0  # seconds since 1970-01-01, 0 if absent
    encoding: str = TEXT_ENCODING
    piece_length: int = 0
    num_pieces: int = 0
    private: bool = False
    source: str = ''
    files: list[_FileInfo] = field(default_factory=list)
    hash: str = ''  # hex sha1 of the raw info dict, empty if there is no info dict

    @property
    def size(self) -> int:
        '''Return the total size of all files recorded in the torrent.'''
        return sum(f.size for f in self.files)

    @property
    def num_files(self) -> int:
        return len(self.files)

    @property
    def tracker_urls(self) -> list[str]:
        return [url for tier in self.trackers for url in tier]

    @property
    def sorted_files(self) -> list[_FileInfo]:
        '''Return the files in the order a file manager would show them.'''
        return os_sorted(self.files, key=lambda f: f.relpath)

    @property
    def date(self) -> datetime|None:
        '''Return the creation time in the local timezone.'''
        if self.creation_date <= 0:
            return None
        try:
            return datetime.fromtimestamp(self.creation_date, tz=dateutil.tz.tzlocal())
        except (OverflowError, OSError, ValueError):
            warnings.warn(f'Creation date {self.creation_date} is out of range.')
            return None

    @property
    def magnet(self) -> str:
        '''Return the magnet link of the torrent.'''
        ret = f"magnet:?xt=urn:btih:{self.hash}"
        if self.name:
            ret += f"&dn={urllib.parse.quote(self.name)}"
        if self.size:
            ret += f"&xl={self.size}"
        for url in self.tracker_urls:
            ret += f"&tr={urllib.parse.quote(url)}"
        return ret

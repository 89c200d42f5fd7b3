import hashlib

import pytest

from downpour.error import MissingEndDelimiter, NotATorrentError
from downpour.torrent import fromBytes, fromTorrent


ANNOUNCE = b'http://tracker.example.org:6969/announce'
BACKUP = b'udp://backup.example.org:1337/announce'


def bs(chars: bytes) -> bytes:
    return str(len(chars)).encode() + b':' + chars


def bi(num: int) -> bytes:
    return b'i' + str(num).encode() + b'e'


SINGLE_INFO = (
    b'd' + bs(b'length') + bi(1024) + bs(b'name') + bs(b'file.bin')
    + bs(b'piece length') + bi(16384) + bs(b'pieces') + bs(b'\x01' * 20) + b'e'
    )

MULTI_INFO = (
    b'd' + bs(b'files') + b'l'
    + b'd' + bs(b'length') + bi(5) + bs(b'path') + b'l' + bs(b'ep10.mkv') + b'e' + b'e'
    + b'd' + bs(b'length') + bi(3) + bs(b'path') + b'l' + bs(b'ep2.mkv') + b'e' + b'e'
    + b'e' + bs(b'name') + bs(b'show') + bs(b'piece length') + bi(32768)
    + bs(b'pieces') + bs(b'\x02' * 40) + bs(b'private') + bi(1) + bs(b'source') + bs(b'SRC') + b'e'
    )


def make_torrent(info: bytes = SINGLE_INFO, **extra: bytes) -> bytes:
    ret = b'd' + bs(b'announce') + bs(ANNOUNCE)
    ret += bs(b'announce-list') + b'l' + b'l' + bs(ANNOUNCE) + b'e' + b'l' + bs(BACKUP) + b'e' + b'e'
    for key, val in extra.items():
        ret += bs(key.replace('_', ' ').encode()) + val
    ret += bs(b'info') + info + b'e'
    return ret


def test_single_file_torrent():
    data = make_torrent(comment=bs(b'hello'), created_by=bs(b'downpour'), creation_date=bi(1700000000))
    summary = fromBytes(data)

    assert summary.name == 'file.bin'
    assert summary.trackers == [[ANNOUNCE.decode()], [BACKUP.decode()]]
    assert summary.tracker_urls == [ANNOUNCE.decode(), BACKUP.decode()]
    assert summary.comment == 'hello'
    assert summary.created_by == 'downpour'
    assert summary.creation_date == 1700000000
    assert summary.date is not None
    assert summary.date.timestamp() == 1700000000
    assert summary.encoding == 'utf-8'
    assert summary.piece_length == 16384
    assert summary.num_pieces == 1
    assert summary.private is False
    assert summary.num_files == 1
    assert summary.size == 1024
    assert summary.files[0].path == ('file.bin',)
    assert summary.hash == hashlib.sha1(SINGLE_INFO).hexdigest()
    assert summary.magnet.startswith(f'magnet:?xt=urn:btih:{summary.hash}&dn=file.bin&xl=1024&tr=http')


def test_multi_file_torrent():
    summary = fromBytes(make_torrent(MULTI_INFO))

    assert summary.name == 'show'
    assert summary.num_files == 2
    assert summary.size == 8
    assert [f.relpath for f in summary.files] == ['ep10.mkv', 'ep2.mkv']
    assert [f.relpath for f in summary.sorted_files] == ['ep2.mkv', 'ep10.mkv']
    assert summary.num_pieces == 2
    assert summary.private is True
    assert summary.source == 'SRC'
    assert summary.date is None
    assert summary.hash == hashlib.sha1(MULTI_INFO).hexdigest()


def test_torrent_without_info():
    summary = fromBytes(b'de')
    assert summary.hash == ''
    assert summary.files == []
    assert summary.trackers == []
    assert summary.magnet == 'magnet:?xt=urn:btih:'


def test_malformed_optional_keys_warn():
    with pytest.warns(UserWarning, match='comment'):
        summary = fromBytes(make_torrent(comment=bi(1)))
    assert summary.comment == ''

    with pytest.warns(UserWarning, match='creation date'):
        summary = fromBytes(make_torrent(creation_date=bs(b'yesterday')))
    assert summary.creation_date == 0

    with pytest.warns(UserWarning, match='info'):
        summary = fromBytes(make_torrent(info=b'le'))
    assert summary.name == ''
    assert summary.hash == ''
    assert summary.magnet.startswith('magnet:?xt=urn:btih:&')


def test_unknown_encoding_falls_back():
    with pytest.warns(UserWarning, match='Unknown encoding'):
        summary = fromBytes(make_torrent(encoding=bs(b'no-such-codec')))
    assert summary.encoding == 'utf-8'


def test_not_a_torrent():
    with pytest.raises(NotATorrentError):
        fromBytes(b'i1e')
    with pytest.raises(NotATorrentError):
        fromBytes(b'de1:a')
    with pytest.raises(NotATorrentError):
        fromBytes(b'')


def test_malformed_torrent_raises_decode_error():
    with pytest.raises(MissingEndDelimiter):
        fromBytes(make_torrent()[:-1])


def test_from_torrent_file(tmp_path):
    fpath = tmp_path / 'file.torrent'
    fpath.write_bytes(make_torrent())
    assert fromTorrent(fpath).name == 'file.bin'

    with pytest.raises(FileNotFoundError):
        fromTorrent(tmp_path / 'missing.torrent')

__all__ = ['Main', 'main']

import math
import shutil
import sys
import warnings
from pathlib import Path
from typing import Sequence

import tqdm

from downpour.bencode import decode
from downpour.cli import parser
from downpour.config import READ_CHUNK_SIZE
from downpour.error import DecodeError, NotATorrentError
from downpour.render import render_document, render_error
from downpour.torrent import TorrentSummary, fromBytes

_MAX_LISTED_FILES = 500




def _info(chars: str):
    print(f'I: {chars}', file=sys.stderr)


def _warn(chars: str):
    print(f'W: {chars}', file=sys.stderr)


def _error(chars: str):
    print(f'E: {chars}', file=sys.stderr)




class Main():

    def __init__(self, args):
        self.args = args

    @staticmethod
    def __readFile(fpath: Path, show_progress: bool) -> bytes:
        chunks: list[bytes] = []
        with fpath.open('rb') as fobj, tqdm.tqdm(
                total=fpath.stat().st_size,
                desc='Read',
                unit='B',
                unit_scale=True,
                ascii=True,
                dynamic_ncols=True,
                disable=None if show_progress else True,  # None hides the bar if not attached to a tty
                ) as pbar:
            while (read_bytes := fobj.read(READ_CHUNK_SIZE)):
                chunks.append(read_bytes)
                pbar.update(len(read_bytes))
        return b''.join(chunks)

    def __call__(self) -> int:
        if self.args.command == 'torrent':
            return self._torrent()
        elif self.args.command == 'bencoding':
            return self._bencoding()
        _error(f'Unexpected command {self.args.command}, please file a bug report.')
        return 2

    def _torrent(self) -> int:
        fpath: Path = self.args.fpath
        if not fpath.is_file():
            _error(f"The supplied '{fpath}' does not exist.")
            return 1
        try:
            data = self.__readFile(fpath, self.args.show_progress)
        except OSError as e:
            _error(f"Cannot read '{fpath}': {e}")
            return 1

        if not self.args.summary:
            return self._decode(data)

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter('always')
            try:
                summary = fromBytes(data, self.args.max_depth, self.args.strict_keys)
            except DecodeError as e:
                _error(render_error(e))
                return 1
            except NotATorrentError as e:
                _error(f"The supplied '{fpath}' is not a torrent: {e}")
                return 1
            self._print(summary)
        for w in caught:
            _warn(str(w.message))
        return 0

    def _bencoding(self) -> int:
        if self.args.encode:
            _error('Encoding json to bencoding is not supported.')
            return 2
        return self._decode(sys.stdin.buffer.read())

    def _decode(self, data: bytes) -> int:
        document = decode(data, self.args.max_depth, self.args.strict_keys)
        if not document.ok:
            _error(render_document(document))
            return 1
        if document.elements:
            print(render_document(document))
        else:
            _info('Nothing to decode.')
        return 0

    def _print(self, summary: TorrentSummary):
        width = shutil.get_terminal_size()[0]
        psize = summary.piece_length >> 10
        fnum = summary.num_files
        tdate = _.strftime('%Y/%m/%d %H:%M:%S %Z') if (_ := summary.date) else ''
        tfrom = summary.created_by

        print('General Info ' + '-' * (width - 14))
        print(f"Name: {summary.name}")
        print(f"Hash: {summary.hash}")
        print(f"Size: {summary.size:,} Bytes, {fnum} File" + ('s' if fnum != 1 else '') + f", {psize} KiB x {summary.num_pieces} Pieces")
        if tdate and tfrom:
            print(f"Time: {tdate} by {tfrom}")
        elif tdate:
            print(f"Time: {tdate}")
        elif tfrom:
            print(f"From: {tfrom}")
        if summary.comment:
            print(f"Comm: {summary.comment}")
        print(f"Else: {'Private' if summary.private else 'Public'} torrent" + (f" by {summary.source}" if summary.source else ''))
        print(f"Text: {summary.encoding}")

        print('Trackers ' + '-' * (width - 10))
        urls = summary.tracker_urls
        if urls:
            digits = _digits(len(urls))
            for i, url in enumerate(urls, start=1):
                print(f'{i:0>{digits}}: {url}')
        else:
            print('No tracker')

        print('Files ' + '-' * (width - 7))
        if not fnum:
            print('No file')
        digits = _digits(fnum)
        for i, fileinfo in enumerate(summary.sorted_files, start=1):
            print(f'{i:0>{digits}}: {fileinfo.relpath} ({fileinfo.size:,} bytes)')
            if i == _MAX_LISTED_FILES and fnum > i and not self.args.list_all:
                print(f'Truncated at {_MAX_LISTED_FILES} files (use -y/--yes to list all)')
                break


def _digits(num: int) -> int:
    return math.floor(math.log10(num)) + 1 if num > 0 else 1


def main(argv: Sequence[str]|None = None) -> int:
    args = parser.parse_args(argv)
    return Main(args)()

__all__ = ['parser']

import argparse
from pathlib import Path

from downpour.config import MAX_DEPTH
from downpour.version import DP_VER




class _CustomHelpFormatter(argparse.HelpFormatter):

    def __init__(self, prog):
        super().__init__(prog, max_help_position=50, width=100)

    def _format_action_invocation(self, action):
        if not action.option_strings or action.nargs == 0:
            return super()._format_action_invocation(action)
        default = self._get_default_metavar_for_optional(action)
        args_string = self._format_args(action, default)
        return ', '.join(action.option_strings) + ' ' + args_string


def _depth(chars: str) -> int:
    depth = int(chars)
    if depth < 1: raise argparse.ArgumentTypeError('nesting depth must be at least 1')
    return depth


_formatter = lambda prog: _CustomHelpFormatter(prog)

# options shared by both subcommands
_common = argparse.ArgumentParser(add_help=False)
_common.add_argument(
    '--max-depth',
    dest='max_depth',
    type=_depth,
    default=MAX_DEPTH,
    help=f'fail on lists/dicts nested deeper than this (default: {MAX_DEPTH})',
    metavar='number',
    )
_common.add_argument(
    '--strict',
    dest='strict_keys',
    action='store_true',
    help='reject dict keys that are unsorted or duplicated',
    )

parser = argparse.ArgumentParser(
    prog='downpour',
    description='A tool for interacting with BitTorrent trackers, DHT and peers',
    formatter_class=_formatter,
    )
parser.add_argument('--version', action='version', version=DP_VER)
subparsers = parser.add_subparsers(dest='command', metavar='command', required=True)

torrent_parser = subparsers.add_parser(
    'torrent',
    parents=[_common],
    formatter_class=_formatter,
    help='get details from torrent files',
    )
torrent_parser.add_argument(
    'fpath',
    type=Path,
    help='the torrent file to parse',
    metavar='path',
    )
torrent_parser.add_argument(
    '-s',
    '--summary',
    dest='summary',
    action='store_true',
    help='print general info, trackers and files instead of the decoded tree',
    )
torrent_parser.add_argument(
    '--no-progress',
    dest='show_progress',
    action='store_false',
    help='disable progress bar in reading torrent',
    )
torrent_parser.add_argument(
    '-y',
    '--yes',
    dest='list_all',
    action='store_true',
    help='list all files in summary instead of the first 500',
    )

bencoding_parser = subparsers.add_parser(
    'bencoding',
    parents=[_common],
    formatter_class=_formatter,
    help='work with bencoded data from stdin',
    )
_direction = bencoding_parser.add_mutually_exclusive_group()
_direction.add_argument(
    '-d',
    '--decode',
    dest='encode',
    action='store_false',
    help='decode bencoded data to json-like text (default)',
    )
_direction.add_argument(
    '-e',
    '--encode',
    dest='encode',
    action='store_true',
    help='encode json to bencoding (not supported yet)',
    )
bencoding_parser.set_defaults(encode=False)

__all__ = [
    'MAX_DEPTH',
    'STRICT_DICT_KEYS',
    'INT64_MIN',
    'INT64_MAX',
    'TEXT_ENCODING',
    'READ_CHUNK_SIZE',
    ]

MAX_DEPTH: int = 256
STRICT_DICT_KEYS: bool = False

INT64_MIN: int = -(1 << 63)
INT64_MAX: int = (1 << 63) - 1

TEXT_ENCODING: str = 'utf-8'
READ_CHUNK_SIZE: int = 64 << 10

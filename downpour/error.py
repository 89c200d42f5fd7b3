__all__ = [
    'DecodeError',
    'NothingToDecode',
    'InvalidDigit',
    'IntegerOverflow',
    'MissingDelimiter',
    'InvalidByteStringSize',
    'InvalidByteStringData',
    'MissingStartDelimiter',
    'MissingEndDelimiter',
    'InvalidIntegerValue',
    'InvalidDictKey',
    'DispatchFailed',
    'NestingTooDeep',
    'NotATorrentError',
    ]




class DecodeError(ValueError):

    '''Base of all bdecode failures, located by a byte offset into the decoded input.'''

    def __init__(self, offset: int, message: str):
        super().__init__(offset, message)
        self.offset = offset
        self.message = message

    @property
    def kind(self) -> str:
        return self.__class__.__name__

    def __str__(self) -> str:
        return f'{self.message} (at offset {self.offset})'

    def __repr__(self) -> str:
        return f'{self.kind}({self.offset!r}, {self.message!r})'

    def __eq__(self, other):
        if not isinstance(other, DecodeError):
            return NotImplemented
        return (self.kind, self.offset, self.message) == (other.kind, other.offset, other.message)

    def __hash__(self):
        return hash((self.kind, self.offset, self.message))




class NothingToDecode(DecodeError):
    pass




class InvalidDigit(DecodeError):
    pass




class IntegerOverflow(DecodeError):
    pass




class MissingDelimiter(DecodeError):
    pass




class InvalidByteStringSize(DecodeError):
    pass




class InvalidByteStringData(DecodeError):
    pass




class MissingStartDelimiter(DecodeError):
    pass




class MissingEndDelimiter(DecodeError):
    pass




class InvalidIntegerValue(DecodeError):
    pass




class InvalidDictKey(DecodeError):
    pass




class DispatchFailed(DecodeError):
    pass




class NestingTooDeep(DecodeError):
    pass




class NotATorrentError(ValueError):
    pass

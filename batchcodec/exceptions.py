class BatchCodecException(Exception):
    '''Base class to extend in order to throw exception in batchcodec.

    It carries the position of the failing record: "index" is the ordinal
    of the record (starting from one) and "offset" the position in bytes of
    its start into the input stream. The pipeline fills them when the error
    passes through it.
    '''

    def __init__(self, message, index=None, offset=None):
        self.message = message
        self.index = index
        self.offset = offset
        super().__init__(message)

    def __str__(self):
        where = []
        if self.index is not None:
            where.append(f'record {self.index}')
        if self.offset is not None:
            where.append(f'offset 0x{self.offset:x}')

        if not where:
            return self.message

        return f'{self.message} ({", ".join(where)})'


class FramingError(BatchCodecException):
    '''The stream doesn't contain a whole record where one was expected.'''
    pass


class InvalidRecordType(BatchCodecException):
    pass


class CharConversionError(BatchCodecException):
    '''A byte sequence is malformed or unmappable for one of the charsets.'''
    pass


class InvalidFieldSpan(BatchCodecException):
    '''A field span doesn't respect its invariants: this is a defect of
    the field tables, not of the data.'''
    pass


class ConfigurationError(BatchCodecException):
    pass

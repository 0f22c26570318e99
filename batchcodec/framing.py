"""
Framing: cut the input stream in records.

Three disciplines exist

 1. fixed byte count: each record is exactly "record_length" bytes
 2. fixed character count: each record is exactly "record_length" UTF-8 characters,
    the width of a character is given by the high bits of its leading byte
 3. variable block: each record starts with its own length, as a 32-bit big endian
    unsigned integer, followed by the record length and the payload

    .----------------------------------------.
    | block length  (u32) = 8 + len(payload) |
    | record length (u32) = 4 + len(payload) |
    | payload                                |
    '----------------------------------------'

Reading at the boundary of a record and finding nothing means the end of the
stream; finding something but not enough is a FramingError.
"""
import logging
import struct

from bitstring import Bits

from .enum import LayoutFamily
from .exceptions import FramingError, CharConversionError


logger = logging.getLogger(__name__)


U32_FORMAT = '>I'
U32_SIZE = struct.calcsize(U32_FORMAT)

BLOCK_HEADER_SIZE = 2 * U32_SIZE


def pack_u32(value: int) -> bytes:
    try:
        return struct.pack(U32_FORMAT, value)
    except struct.error as e:
        raise FramingError(f'length {value} doesn\'t fit in a 32-bit field') from e


def unpack_u32(raw: bytes, offset: int = 0) -> int:
    return struct.unpack_from(U32_FORMAT, raw, offset)[0]


def frame_block(payload: bytes) -> bytes:
    '''Build a variable block around the payload, lengths recomputed'''
    return pack_u32(BLOCK_HEADER_SIZE + len(payload)) + pack_u32(U32_SIZE + len(payload)) + payload


def utf8_width(lead: int) -> int:
    '''Return the number of bytes of the UTF-8 character starting with the byte "lead".

    The width is the number of leading ones of the byte (zero of them for ASCII);
    a lone one is a continuation byte and more than four are never valid.'''
    first_zero = Bits(uint=lead, length=8).find('0b0')

    if not first_zero:
        return 0

    leading_ones = first_zero[0]

    if leading_ones == 0:
        return 1

    if 2 <= leading_ones <= 4:
        return leading_ones

    return 0


class Record(object):
    '''Raw data of a record together with its position into the input stream'''

    def __init__(self, raw, offset=None, index=None):
        self.raw = raw
        self.offset = offset
        self.index = index

    def __repr__(self):
        return '<%s(index=%s, offset=%s, size=%d)>' % (
            self.__class__.__name__, self.index, self.offset, len(self.raw))

    def __len__(self):
        return len(self.raw)


class Block(Record):
    '''Variable block: the raw data includes the 8 bytes of the header'''

    def __init__(self, raw, **kwargs):
        if len(raw) < BLOCK_HEADER_SIZE:
            raise FramingError(
                f'variable length record must be at least {BLOCK_HEADER_SIZE} bytes '
                f'(block length + record length), but got {len(raw)} bytes')

        super().__init__(raw, **kwargs)

        if self.block_length != len(raw):
            raise FramingError(f'declared block length {self.block_length} differs from the {len(raw)} bytes read')

    def __repr__(self):
        return '<%s(index=%s, offset=%s, block_length=%d, record_length=%d)>' % (
            self.__class__.__name__, self.index, self.offset, self.block_length, self.record_length)

    @property
    def block_length(self):
        return unpack_u32(self.raw, 0)

    @property
    def record_length(self):
        return unpack_u32(self.raw, U32_SIZE)

    @property
    def payload(self):
        return self.raw[BLOCK_HEADER_SIZE:]


class Framer(object):
    """Base class to subclass from"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.count = 0

    def __repr__(self):
        return f'<{self.__class__.__name__}()>'

    def read_next(self, stream):
        '''Return the next Record or None at the end of the stream'''
        offset = stream.tell()

        record = self._read(stream, offset)

        if record is None:
            self.logger.debug('end of stream at offset %d after %d records' % (offset, self.count))
            return None

        self.count += 1
        record.offset = offset
        record.index = self.count

        return record

    def _read(self, stream, offset):
        raise NotImplementedError(f"method {self.__class__.__name__}._read() not implemented")

    def __call__(self, stream):
        '''Iterate over the records of the stream'''
        while (record := self.read_next(stream)) is not None:
            yield record


class FixedByteFramer(Framer):

    def __init__(self, record_length):
        super().__init__()
        self.record_length = record_length

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.record_length})>'

    def _read(self, stream, offset):
        raw = stream.read(self.record_length)

        if not raw:
            return None

        if len(raw) != self.record_length:
            raise FramingError(
                f'incomplete record read: expected {self.record_length} bytes, got {len(raw)} bytes',
                index=self.count + 1, offset=offset)

        return Record(raw)


class FixedCharFramer(Framer):
    '''Only for UTF-8 sources: the length is in characters, the size in bytes varies.'''

    def __init__(self, record_length):
        super().__init__()
        self.record_length = record_length

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.record_length})>'

    def _read(self, stream, offset):
        chunks = []
        for n_chars in range(self.record_length):
            lead = stream.read(1)

            if not lead:
                if n_chars == 0:
                    return None

                raise FramingError(
                    f'unexpected end of stream: expected {self.record_length} characters, got {n_chars}',
                    index=self.count + 1, offset=offset)

            width = utf8_width(lead[0])

            if not width:
                raise CharConversionError(
                    f'invalid UTF-8 leading byte 0x{lead[0]:02x} at character {n_chars}',
                    index=self.count + 1, offset=offset)

            tail = stream.read(width - 1)

            if len(tail) != width - 1:
                raise FramingError(
                    f'incomplete UTF-8 character at position {n_chars}',
                    index=self.count + 1, offset=offset)

            chunks.append(lead + tail)

        return Record(b''.join(chunks))


class VariableBlockFramer(Framer):

    def _read(self, stream, offset):
        head = stream.read(U32_SIZE)

        if not head:
            return None

        if len(head) != U32_SIZE:
            raise FramingError(
                f'incomplete block length: expected {U32_SIZE} bytes, got {len(head)}',
                index=self.count + 1, offset=offset)

        block_length = unpack_u32(head)

        if block_length < BLOCK_HEADER_SIZE:
            raise FramingError(
                f'invalid block length {block_length}, must be at least {BLOCK_HEADER_SIZE}',
                index=self.count + 1, offset=offset)

        rest = stream.read(block_length - U32_SIZE)

        if len(rest) != block_length - U32_SIZE:
            raise FramingError(
                f'incomplete block read: expected {block_length - U32_SIZE} bytes, got {len(rest)}',
                index=self.count + 1, offset=offset)

        block = Block(head + rest)

        self.logger.debug('read %r' % block)

        return block


def framer_for(layout, source_single):
    '''Return the framer for the layout; the whole-file layouts don't have one.'''
    if layout.family == LayoutFamily.VARIABLE_FRAMED:
        return VariableBlockFramer()

    if layout.family == LayoutFamily.FIXED_MIXED:
        if source_single.is_utf8:
            return FixedCharFramer(layout.record_length)

        return FixedByteFramer(layout.record_length)

    return None

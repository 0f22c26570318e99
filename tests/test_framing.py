import io

import pytest

from batchcodec import charsets
from batchcodec.enum import Layout
from batchcodec.exceptions import FramingError, CharConversionError
from batchcodec.framing import (
    BLOCK_HEADER_SIZE,
    Block,
    FixedByteFramer,
    FixedCharFramer,
    VariableBlockFramer,
    frame_block,
    framer_for,
    pack_u32,
    unpack_u32,
    utf8_width,
)
from batchcodec.streams import CHUNK_SIZE, Stream


def test_u32():
    assert pack_u32(10) == b'\x00\x00\x00\x0a'
    assert pack_u32(0xdeadbeef) == b'\xde\xad\xbe\xef'
    assert unpack_u32(b'\x00\x00\x01\x00') == 0x100
    assert unpack_u32(b'XX\x00\x00\x00\x06', offset=2) == 6

    with pytest.raises(FramingError):
        pack_u32(1 << 32)

    with pytest.raises(FramingError):
        pack_u32(-1)


def test_frame_block():
    assert frame_block(b'AB') == b'\x00\x00\x00\x0a\x00\x00\x00\x06AB'
    assert frame_block(b'') == b'\x00\x00\x00\x08\x00\x00\x00\x04'


@pytest.mark.parametrize('lead,width', [
    (0x00, 1),
    (0x41, 1),
    (0x7f, 1),
    (0x80, 0),
    (0xbf, 0),
    (0xc3, 2),
    (0xe4, 3),
    (0xf0, 4),
    (0xf8, 0),
    (0xff, 0),
])
def test_utf8_width(lead, width):
    assert utf8_width(lead) == width


def test_block():
    block = Block(frame_block(b'HELLO'), offset=0x10, index=2)

    assert block.block_length == 13
    assert block.record_length == 9
    assert block.payload == b'HELLO'
    assert len(block) == 13
    assert block.offset == 0x10

    with pytest.raises(FramingError):
        Block(b'\x00\x00\x00\x08')

    with pytest.raises(FramingError):
        Block(b'\x00\x00\x00\x20\x00\x00\x00\x04')


def test_fixed_byte_framer():
    framer = FixedByteFramer(4)
    stream = Stream(b'AAAABBBBCCCC')

    records = list(framer(stream))

    assert [_.raw for _ in records] == [b'AAAA', b'BBBB', b'CCCC']
    assert [_.offset for _ in records] == [0, 4, 8]
    assert [_.index for _ in records] == [1, 2, 3]


def test_fixed_byte_framer_short_read():
    framer = FixedByteFramer(4)
    stream = Stream(b'AAAABB')

    assert framer.read_next(stream).raw == b'AAAA'

    with pytest.raises(FramingError) as e:
        framer.read_next(stream)

    assert e.value.index == 2
    assert e.value.offset == 4


class Trickle(io.RawIOBase):
    '''Returns at most one byte for each read, like a slow pipe'''

    def __init__(self, data):
        self.data = io.BytesIO(data)

    def readable(self):
        return True

    def read(self, size=-1):
        return self.data.read(min(size, 1) if size > 0 else size)


def test_fixed_byte_framer_short_chunks():
    framer = FixedByteFramer(3)
    stream = Stream(Trickle(b'abcdef'))

    assert [_.raw for _ in framer(stream)] == [b'abc', b'def']


def test_fixed_char_framer():
    """The length is in characters, whatever their width."""
    data = 'A亜é😀'.encode('utf-8') + 'BCDE'.encode('utf-8')
    framer = FixedCharFramer(4)
    stream = Stream(data)

    records = list(framer(stream))

    assert [_.raw.decode('utf-8') for _ in records] == ['A亜é😀', 'BCDE']
    assert records[1].offset == 1 + 3 + 2 + 4


def test_fixed_char_framer_incomplete():
    framer = FixedCharFramer(4)

    with pytest.raises(FramingError) as e:
        framer.read_next(Stream('AB'.encode('utf-8')))

    assert e.value.index == 1

    # the last character is cut in half
    with pytest.raises(FramingError):
        FixedCharFramer(2).read_next(Stream(b'A\xe4\xba'))


def test_fixed_char_framer_invalid_lead():
    with pytest.raises(CharConversionError) as e:
        FixedCharFramer(3).read_next(Stream(b'A\x80B'))

    assert e.value.offset == 0


def test_variable_block_framer():
    data = frame_block(b'AB') + frame_block(b'') + frame_block(b'CDE')
    framer = VariableBlockFramer()

    blocks = list(framer(Stream(data)))

    assert [_.payload for _ in blocks] == [b'AB', b'', b'CDE']
    assert [_.offset for _ in blocks] == [0, 10, 10 + BLOCK_HEADER_SIZE]
    assert isinstance(blocks[0], Block)


def test_variable_block_framer_empty():
    assert VariableBlockFramer().read_next(Stream(b'')) is None


@pytest.mark.parametrize('data', [
    b'\x00\x00',                              # short block length
    b'\x00\x00\x00\x06\x00\x00',              # block shorter than its header
    b'\x00\x00\x00\x0a\x00\x00\x00\x06A',     # short body
])
def test_variable_block_framer_broken(data):
    framer = VariableBlockFramer()
    stream = Stream(frame_block(b'OK') + data)

    assert framer.read_next(stream).payload == b'OK'

    with pytest.raises(FramingError) as e:
        framer.read_next(stream)

    assert e.value.index == 2
    assert e.value.offset == 10


def test_framer_for():
    assert framer_for(Layout.FILE_A, charsets.UTF_8) is None
    assert isinstance(framer_for(Layout.FILE_E, charsets.JIS_X0201), VariableBlockFramer)

    framer = framer_for(Layout.FILE_C, charsets.UTF_8)
    assert isinstance(framer, FixedCharFramer)
    assert framer.record_length == 380

    assert isinstance(framer_for(Layout.FILE_D, charsets.CP930), FixedByteFramer)


class Recording(io.RawIOBase):
    '''Keeps track of the sizes asked to it'''

    def __init__(self, data):
        self.data = io.BytesIO(data)
        self.sizes = []

    def readable(self):
        return True

    def read(self, size=-1):
        self.sizes.append(size)
        return self.data.read(size)


def test_huge_block_length():
    """A block length near 4 GiB doesn't turn into a single huge read."""
    recording = Recording(b'\xff\xff\xff\xf0\x00\x00\x00\x04tail')

    with pytest.raises(FramingError) as e:
        VariableBlockFramer().read_next(Stream(recording))

    assert e.value.offset == 0
    assert max(recording.sizes) <= CHUNK_SIZE

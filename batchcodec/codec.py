'''
Conversion of a fragment of a record between two charsets.

Two flavours exist: single-width for fragments made of one unit wide characters,
double-width for the kanji fields. Both are pure functions of their arguments:
the decoding and the encoding are strict, any malformed or unmappable sequence
is reported as CharConversionError.
'''
import logging

from .exceptions import CharConversionError


logger = logging.getLogger(__name__)


# ISO-2022-JP designators
KANJI_IN  = b'\x1b\x24\x42'  # ESC $ B
KANJI_OUT = b'\x1b\x28\x42'  # ESC ( B

ESCAPE = 0x1b
ESCAPE_TAILS = (
    KANJI_IN[1:],
    KANJI_OUT[1:],
)

# the same control character seen from the two sides
CONTROL_BYTE_EBCDIC = 0xb4
CONTROL_BYTE_OTHER  = 0x74


def bracket(payload: bytes) -> bytes:
    '''Wrap a payload of kanji between the designators, so that an ISO-2022-JP decoder
    reads it as JIS X 0208'''
    return KANJI_IN + payload + KANJI_OUT


def strip_escapes(data: bytes) -> bytes:
    '''Remove all the "ESC $ B" and "ESC ( B" from the data'''
    result = bytearray()

    idx = 0
    while idx < len(data):
        if data[idx] == ESCAPE and data[idx + 1:idx + 3] in ESCAPE_TAILS:
            idx += 3
            continue

        result.append(data[idx])
        idx += 1

    return bytes(result)


def substitute_control_byte(data: bytes, source, target) -> bytes:
    '''When exactly one of the sides is EBCDIC the control character is remapped
    before decoding: this is a replacement of raw values, it doesn't know anything
    about the charsets.'''
    if source.is_ebcdic == target.is_ebcdic:
        return data

    if source.is_ebcdic:
        old, new = CONTROL_BYTE_EBCDIC, CONTROL_BYTE_OTHER
    else:
        old, new = CONTROL_BYTE_OTHER, CONTROL_BYTE_EBCDIC

    return data.replace(bytes([old]), bytes([new]))


def _decode(data, charset):
    try:
        return charset.decode(data)
    except UnicodeDecodeError as e:
        raise CharConversionError(
            f'cannot decode 0x{data[e.start:e.end].hex()} at position {e.start} as {charset.identifier}: {e.reason}') from e


def _encode(text, charset):
    try:
        return charset.encode(text)
    except UnicodeEncodeError as e:
        raise CharConversionError(
            f'cannot encode {text[e.start:e.end]!r} at position {e.start} as {charset.identifier}: {e.reason}') from e


def convert_single_width(data: bytes, source, target) -> bytes:
    if not data:
        return b''

    data = substitute_control_byte(data, source, target)

    return _encode(_decode(data, source), target)


def convert_double_width(data: bytes, source, target) -> bytes:
    '''The ISO-2022-JP fragments come and go without designators: we add them before decoding
    and we remove them after encoding.'''
    if not data:
        return b''

    if source.is_escaped_double:
        data = bracket(data)

    result = _encode(_decode(data, source), target)

    if target.is_escaped_double:
        result = strip_escapes(result)

    return result

"""
Transformation of a single record.

The way a record is converted depends only on the family of its layout:

 - whole-file: the single-width codec on everything
 - fixed-mixed: the first unit tells if it's a header or a data record, for the data
   records the second unit selects the field table; the fragments are converted
   one by one and joined back in the same order
 - variable-framed: the payload is converted with the single-width codec and the
   header is rebuilt with the new lengths
"""
import logging

from .codec import convert_single_width, convert_double_width
from .enum import LayoutFamily, RecordKind
from .exceptions import CharConversionError, InvalidRecordType
from .fields import BYTE_FIELD_TABLES, CHAR_FIELD_TABLES, get_field_table
from .framing import Block, frame_block


class RecordTransformer(object):

    def __init__(self, layout, source_single, source_double, target_single, target_double,
                 byte_tables=None, char_tables=None):
        self.logger = logging.getLogger(__name__)
        self.layout = layout
        self.source_single = source_single
        self.source_double = source_double
        self.target_single = target_single
        self.target_double = target_double
        self.byte_tables = byte_tables if byte_tables is not None else BYTE_FIELD_TABLES
        self.char_tables = char_tables if char_tables is not None else CHAR_FIELD_TABLES

        self._strategies = {
            LayoutFamily.WHOLE_FILE: self.transform_whole,
            LayoutFamily.FIXED_MIXED: self.transform_fixed,
            LayoutFamily.VARIABLE_FRAMED: self.transform_block,
        }

    def __repr__(self):
        return '<%s(%s, %s/%s -> %s/%s)>' % (
            self.__class__.__name__,
            self.layout.identifier,
            self.source_single.identifier,
            self.source_double.identifier,
            self.target_single.identifier,
            self.target_double.identifier,
        )

    def __call__(self, record) -> bytes:
        return self.transform(record)

    @property
    def is_char_based(self):
        '''With an UTF-8 source the fixed-mixed records are cut and walked by characters'''
        return self.source_single.is_utf8

    def transform(self, record) -> bytes:
        raw = getattr(record, 'raw', record)
        return self._strategies[self.layout.family](raw)

    def single(self, data: bytes) -> bytes:
        return convert_single_width(data, self.source_single, self.target_single)

    def double(self, data: bytes) -> bytes:
        return convert_double_width(data, self.source_double, self.target_double)

    def transform_whole(self, data: bytes) -> bytes:
        return self.single(data)

    def transform_block(self, raw: bytes) -> bytes:
        block = Block(raw)

        self.logger.debug('original - block length: %d, record length: %d' % (block.block_length, block.record_length))

        converted = self.single(block.payload)

        result = frame_block(converted)

        self.logger.debug('converted - block length: %d, data: %d bytes' % (len(result), len(converted)))

        return result

    def _unit(self, data, position):
        '''Return the unit at "position" as a one character string.

        Markers are compared on their raw value whatever the source charset
        (0x31 is '1' for EBCDIC too), a byte outside ASCII is never a marker.'''
        if position >= len(data):
            return None

        unit = data[position]

        if isinstance(data, str):
            return unit

        return chr(unit) if unit < 0x80 else None

    def classify(self, data):
        marker = self._unit(data, 0)

        try:
            return RecordKind(marker)
        except ValueError:
            shown = marker if marker is not None else f'0x{data[:1].hex()}'
            raise InvalidRecordType(f'invalid record type: {shown!r}')

    def transform_fixed(self, raw: bytes) -> bytes:
        data = raw
        if self.is_char_based:
            try:
                data = raw.decode('utf-8')
            except UnicodeDecodeError as e:
                raise CharConversionError(f'record is not valid UTF-8: {e.reason} at position {e.start}') from e

        if not data:
            raise InvalidRecordType('record is too short')

        kind = self.classify(data)

        if kind == RecordKind.HEADER:
            self.logger.debug('processing header record')
            return self.single(raw)

        return self.transform_data(data)

    def transform_data(self, data) -> bytes:
        subtype = self._unit(data, 1)
        tables = self.char_tables if self.is_char_based else self.byte_tables
        table = get_field_table(tables, self.layout, subtype)

        self.logger.debug('processing data record with subtype %r using %r' % (subtype, table))

        converted = []
        for is_double, fragment in table.fragments(data):
            if isinstance(fragment, str):
                fragment = fragment.encode('utf-8')

            converted.append(self.double(fragment) if is_double else self.single(fragment))

        return b''.join(converted)

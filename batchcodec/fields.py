"""
A FieldSpan identifies a portion of a fixed-mixed record that needs double-width
treatment, everything outside the spans is single-width.

Two kinds of span exist: byte based ones, used when the record is cut by bytes
(JIS and EBCDIC sources), and character based ones, used when the source is
UTF-8 and the record is cut by characters.
"""
import logging
from enum import Flag, auto

from .enum import Layout
from .exceptions import InvalidFieldSpan


logger = logging.getLogger(__name__)


class FieldSpan(object):
    """Base class to subclass from"""

    def __init__(self, start):
        if start < 0:
            raise InvalidFieldSpan(f'{self.__class__.__name__} cannot start at a negative position ({start})')
        self.start = start

    def __eq__(self, other):
        return type(self) is type(other) and self.__dict__ == other.__dict__

    def __hash__(self):
        return hash((self.__class__.__name__, tuple(sorted(self.__dict__.items()))))

    def _get_end(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_end() not implemented")

    end = property(
        fget=lambda self: self._get_end(),
    )

    def slice(self, record):
        raise NotImplementedError(f"method {self.__class__.__name__}.slice() not implemented")


class ByteSpan(FieldSpan):
    """Inclusive range of bytes [start, end]"""

    def __init__(self, start, end):
        super().__init__(start)
        if end < start:
            raise InvalidFieldSpan(f'invalid byte position: start={start}, end={end}')
        self.last = end

    def __repr__(self):
        return '<%s(%d-%d)>' % (self.__class__.__name__, self.start, self.last)

    def __len__(self):
        return self.last - self.start + 1

    def _get_end(self):
        '''exclusive end, like in slicing'''
        return self.last + 1

    def slice(self, record: bytes) -> bytes:
        if self.last >= len(record):
            raise InvalidFieldSpan(
                f'invalid byte position: start={self.start}, end={self.last}, record length={len(record)}')

        return record[self.start:self.end]


class CharSpan(FieldSpan):
    """A field of "count" characters starting at the character "start"."""

    def __init__(self, start, count):
        super().__init__(start)
        if count <= 0:
            raise InvalidFieldSpan(f'invalid char position: start={start}, length={count}')
        self.count = count

    def __repr__(self):
        return '<%s(pos=%d, len=%d)>' % (self.__class__.__name__, self.start, self.count)

    def __len__(self):
        return self.count

    def _get_end(self):
        return self.start + self.count

    def slice(self, record: str) -> str:
        '''a span going past the end of the record is clipped'''
        return record[self.start:self.end]


class FieldTable(object):
    '''Ordered list of non-overlapping spans of the same kind.

    It behaves like a tuple and it knows how to cut a record in fragments.'''

    def __init__(self, spans=()):
        self.spans = tuple(spans)

        kinds = {type(_) for _ in self.spans}
        if len(kinds) > 1:
            raise InvalidFieldSpan(f'cannot mix kinds of span in the same table: {self.spans!r}')

        for previous, current in zip(self.spans, self.spans[1:]):
            if current.start < previous.end:
                raise InvalidFieldSpan(f'{current!r} overlaps or precedes {previous!r}')

    def __repr__(self):
        return f'<{self.__class__.__name__}({list(self.spans)!r})>'

    def __iter__(self):
        return iter(self.spans)

    def __len__(self):
        return len(self.spans)

    def __getitem__(self, item):
        return self.spans[item]

    def __eq__(self, other):
        if not isinstance(other, FieldTable):
            return NotImplemented
        return self.spans == other.spans

    def fragments(self, record):
        '''Walk the record from left to right yielding couples (is_double, fragment):
        the gaps before, between and after the spans are single-width.

        The record is bytes for byte spans and str for char spans.'''
        position = 0
        for span in self.spans:
            field = span.slice(record)

            if position < span.start:
                yield False, record[position:span.start]

            yield True, field
            position = span.start + len(field)

        if position < len(record):
            yield False, record[position:]


EMPTY = FieldTable()


class Subtype(Flag):
    '''Key used for the tables not depending on the data subtype'''
    DEFAULT = auto()


# the subtype is the second unit of a data record
BYTE_FIELD_TABLES = {
    Layout.FILE_C: {
        Subtype.DEFAULT: FieldTable([ByteSpan(50, 99), ByteSpan(150, 199), ByteSpan(300, 349)]),
    },
    Layout.FILE_D: {
        '1': FieldTable([ByteSpan(100, 149), ByteSpan(200, 249)]),
        '2': FieldTable([ByteSpan(120, 169), ByteSpan(250, 299)]),
    },
}

# each field is 25 characters long, that is 50 bytes of kanji
CHAR_FIELD_TABLES = {
    Layout.FILE_C: {
        Subtype.DEFAULT: FieldTable([CharSpan(50, 25), CharSpan(150, 25), CharSpan(300, 25)]),
    },
    Layout.FILE_D: {
        '1': FieldTable([CharSpan(100, 25), CharSpan(200, 25)]),
        '2': FieldTable([CharSpan(120, 25), CharSpan(250, 25)]),
    },
}


def get_field_table(tables, layout, subtype):
    '''Return the FieldTable for the couple (layout, subtype): an unknown subtype
    returns an empty table, i.e., the whole record is single-width.'''
    mapping = tables.get(layout, {})

    if subtype in mapping:
        return mapping[subtype]

    if Subtype.DEFAULT in mapping:
        return mapping[Subtype.DEFAULT]

    logger.warning(f'no field table for {layout.identifier} with subtype {subtype!r}, converting as single-width')

    return EMPTY

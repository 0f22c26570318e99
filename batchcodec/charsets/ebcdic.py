'''
# EBCDIC CP930

Japanese mixed single/double byte EBCDIC: the stream starts in single byte mode
(katakana extended, CCSID 290) and the shift characters switch between the modes

 - SO (0x0E): what follows are double byte characters (CCSID 300)
 - SI (0x0F): back to single byte characters

Python doesn't ship this code page so the mapping is loaded from an ICU
conversion table (the ".ucm" files, see <https://unicode-org.github.io/icu/userguide/conversion/data.html>),
for example "ibm-930_P120-1999.ucm". The interesting part of that format is the
CHARMAP section, where each line is like

    <U4E00> \\x45\\x41 |0

i.e., a code point, the byte sequence and the precision indicator

 - |0 round trip mapping
 - |1 fallback used only from Unicode to EBCDIC
 - |2 substitution, ignored here
 - |3 reverse fallback used only from EBCDIC to Unicode
'''
import codecs
import logging
import os
import re

from ..exceptions import ConfigurationError


logger = logging.getLogger(__name__)


SO = 0x0e
SI = 0x0f

CODEC_NAME = 'cp930'
ALIASES = (
    'cp930',
    'ibm930',
    'ibm_930',
)

MAPPING_RE = re.compile(r'^<U([0-9a-fA-F]{4,6})>\s+((?:\\x[0-9a-fA-F]{2})+)\s*(?:\|([0-3]))?')


class MappingTable(object):
    '''The four dictionaries needed to go back and forth between Unicode and EBCDIC,
    separately for the single and the double byte modes.'''

    def __init__(self, name=None):
        self.name = name
        self.sbcs_to_unicode = {}
        self.unicode_to_sbcs = {}
        self.dbcs_to_unicode = {}
        self.unicode_to_dbcs = {}

    def __repr__(self):
        return '<%s(%s, sbcs=%d, dbcs=%d)>' % (
            self.__class__.__name__,
            self.name,
            len(self.sbcs_to_unicode),
            len(self.dbcs_to_unicode),
        )

    def add(self, code_point, raw, precision=0):
        if len(raw) == 1:
            to_unicode, from_unicode, key = self.sbcs_to_unicode, self.unicode_to_sbcs, raw[0]
        elif len(raw) == 2:
            to_unicode, from_unicode, key = self.dbcs_to_unicode, self.unicode_to_dbcs, (raw[0] << 8) | raw[1]
        else:
            raise ValueError(f'byte sequence {raw.hex()} is too long for a mixed single/double byte code page')

        char = chr(code_point)

        if precision in (0, 3):
            to_unicode[key] = char
        if precision in (0, 1):
            from_unicode[char] = key

    @classmethod
    def from_ucm(cls, path):
        '''Read the CHARMAP section of the .ucm file'''
        table = cls(name=os.path.splitext(os.path.basename(path))[0])
        inside = False
        with open(path, encoding='ascii') as f:
            for line in f:
                if line.startswith('#'):
                    continue
                if line.startswith('END CHARMAP'):
                    break
                if line.startswith('CHARMAP'):
                    inside = True
                    continue
                if not inside:
                    continue
                if m := MAPPING_RE.match(line):
                    precision = int(m.group(3)) if m.group(3) else 0
                    if precision == 2:
                        continue
                    raw = bytes.fromhex(m.group(2).replace('\\x', ''))
                    table.add(int(m.group(1), 16), raw, precision)

        logger.debug('loaded %r from \'%s\'' % (table, path))

        if not table.sbcs_to_unicode:
            raise ValueError(f'no single byte mapping found in \'{path}\'')

        return table


class Codec(codecs.Codec):
    '''Stateless conversion of whole buffers: the shift state lives only
    for the duration of a single call.'''

    def __init__(self, table):
        self.table = table

    def decode(self, input, errors='strict'):
        data = bytes(input)
        handler = codecs.lookup_error(errors)
        output = []
        double = False
        position = 0
        length = len(data)

        while position < length:
            byte = data[position]

            if byte == SO:
                double = True
                position += 1
                continue
            if byte == SI:
                double = False
                position += 1
                continue

            if double:
                if position + 1 >= length:
                    exc = UnicodeDecodeError(CODEC_NAME, data, position, length, 'truncated double byte character')
                    replacement, position = handler(exc)
                    output.append(replacement)
                    continue

                key = (byte << 8) | data[position + 1]
                char = self.table.dbcs_to_unicode.get(key)
                end = position + 2
            else:
                char = self.table.sbcs_to_unicode.get(byte)
                end = position + 1

            if char is None:
                exc = UnicodeDecodeError(CODEC_NAME, data, position, end, 'character maps to <undefined>')
                replacement, position = handler(exc)
                output.append(replacement)
                continue

            output.append(char)
            position = end

        return ''.join(output), length

    def encode(self, input, errors='strict'):
        handler = codecs.lookup_error(errors)
        output = bytearray()
        double = False
        position = 0

        while position < len(input):
            char = input[position]

            if char in self.table.unicode_to_sbcs:
                if double:
                    output.append(SI)
                    double = False
                output.append(self.table.unicode_to_sbcs[char])
            elif char in self.table.unicode_to_dbcs:
                if not double:
                    output.append(SO)
                    double = True
                output.extend(self.table.unicode_to_dbcs[char].to_bytes(2, 'big'))
            else:
                exc = UnicodeEncodeError(CODEC_NAME, input, position, position + 1, 'character maps to <undefined>')
                replacement, position = handler(exc)
                # the replacement is made of characters to encode again
                if isinstance(replacement, str):
                    input = input[:exc.start] + replacement + input[exc.end:]
                    position = exc.start
                else:
                    if double:
                        output.append(SI)
                        double = False
                    output.extend(replacement)
                continue

            position += 1

        if double:
            output.append(SI)

        return bytes(output), len(input)


_table = None


def _encode(input, errors='strict'):
    return Codec(_get_table()).encode(input, errors)


def _decode(input, errors='strict'):
    return Codec(_get_table()).decode(input, errors)


def _get_table():
    if _table is None:
        raise ConfigurationError(f'no mapping table installed for {CODEC_NAME}, see the "ebcdic.mapping.file" parameter')

    return _table


def getregentry():
    return codecs.CodecInfo(
        name=CODEC_NAME,
        encode=_encode,
        decode=_decode,
    )


def search(name):
    if name.replace('-', '_') in ALIASES:
        return getregentry()

    return None


def is_installed():
    return _table is not None


def install(path):
    '''Load the .ucm file at "path" and make it the table used by the "cp930" codec.

    The codec registry caches the lookups, so the registered functions always refer
    to the last table installed.'''
    global _table

    table = MappingTable.from_ucm(path)

    if _table is None:
        codecs.register(search)

    _table = table

    logger.info('installed EBCDIC mapping %r' % table)

    return table

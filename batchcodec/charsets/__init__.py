'''
The closed set of charsets a batch can be converted from and to.

Each identifier accepted in the parameters resolves to a Charset, that knows
its classification (driving escape bracketing and control-byte substitution)
and the name of the Python codec doing the actual work.
'''
import codecs
import logging

from ..enum import EncodingClass
from ..exceptions import ConfigurationError
from . import jis, ebcdic


logger = logging.getLogger(__name__)


class Charset(object):

    def __init__(self, identifier, codec_name, encoding_class):
        self.identifier = identifier
        self.codec_name = codec_name
        self.encoding_class = encoding_class

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.identifier})>'

    def __eq__(self, other):
        if not isinstance(other, Charset):
            return NotImplemented

        return self.identifier == other.identifier

    def __hash__(self):
        return hash(self.identifier)

    @property
    def is_ebcdic(self):
        return self.encoding_class == EncodingClass.EBCDIC

    @property
    def is_escaped_double(self):
        return self.encoding_class == EncodingClass.JIS_ESCAPED_DOUBLE

    @property
    def is_utf8(self):
        return self.encoding_class == EncodingClass.UTF8

    def codec(self):
        try:
            return codecs.lookup(self.codec_name)
        except LookupError as e:
            raise ConfigurationError(f'codec \'{self.codec_name}\' for charset {self.identifier} is not available: {e}') from e

    def decode(self, data):
        return self.codec().decode(data, 'strict')[0]

    def encode(self, text):
        return self.codec().encode(text, 'strict')[0]


UTF_8       = Charset('UTF-8', 'utf-8', EncodingClass.UTF8)
JIS_X0201   = Charset('JIS_X0201', jis.CODEC_NAME, EncodingClass.JIS_SINGLE)
ISO_2022_JP = Charset('ISO-2022-JP', 'iso2022_jp', EncodingClass.JIS_ESCAPED_DOUBLE)
CP930       = Charset('CP930', ebcdic.CODEC_NAME, EncodingClass.EBCDIC)

CHARSETS = {_.identifier: _ for _ in (UTF_8, JIS_X0201, ISO_2022_JP, CP930)}

ALIASES = {
    'UTF8': 'UTF-8',
    'JIS': 'JIS_X0201',
    'JIS_X_0201': 'JIS_X0201',
    'ISO2022JP': 'ISO-2022-JP',
    'ISO_2022_JP': 'ISO-2022-JP',
    'IBM930': 'CP930',
    'IBM-930': 'CP930',
    'EBCDIC': 'CP930',
    'EBCDIC_SBCS': 'CP930',
    'EBCDIC_DBCS': 'CP930',
}


def normalize(name):
    normalized = name.strip().upper()

    return ALIASES.get(normalized, normalized)


def lookup(name):
    '''Resolve an identifier (or one of its aliases) to a Charset'''
    if name is None or not name.strip():
        raise ConfigurationError('charset name cannot be empty')

    identifier = normalize(name)

    try:
        charset = CHARSETS[identifier]
    except KeyError:
        raise ConfigurationError(
            f'charset \'{name}\' is not supported, supported charsets: {", ".join(CHARSETS)}')

    logger.debug(f'charset \'{name}\' resolved as {charset!r}')

    return charset

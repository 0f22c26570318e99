'''
Parameters of a batch run.

The parameter file is a Java-like properties file

    input.file.path=/data/in.dat
    output.file.path=/data/out.dat
    file.id=FILE_C
    source.charset.single=CP930
    source.charset.double=CP930
    target.charset.single=JIS_X0201
    target.charset.double=ISO-2022-JP
    ebcdic.mapping.file=/usr/share/icu/ibm-930_P120-1999.ucm

optionally with a "[batch]" section header, since it is read with configparser.
'''
import configparser
import logging

from . import charsets
from .charsets import ebcdic
from .enum import Layout
from .exceptions import ConfigurationError


logger = logging.getLogger(__name__)


SECTION = 'batch'

KEY_INPUT_FILE            = 'input.file.path'
KEY_OUTPUT_FILE           = 'output.file.path'
KEY_FILE_ID               = 'file.id'
KEY_SOURCE_CHARSET_SINGLE = 'source.charset.single'
KEY_SOURCE_CHARSET_DOUBLE = 'source.charset.double'
KEY_TARGET_CHARSET_SINGLE = 'target.charset.single'
KEY_TARGET_CHARSET_DOUBLE = 'target.charset.double'
KEY_EBCDIC_MAPPING        = 'ebcdic.mapping.file'

REQUIRED_KEYS = (
    KEY_INPUT_FILE,
    KEY_OUTPUT_FILE,
    KEY_SOURCE_CHARSET_SINGLE,
    KEY_SOURCE_CHARSET_DOUBLE,
    KEY_TARGET_CHARSET_SINGLE,
    KEY_TARGET_CHARSET_DOUBLE,
    KEY_FILE_ID,
)


class BatchParameters(object):

    def __init__(self, values=None):
        self.values = dict(values or {})
        self.layout = None
        self.source_single = None
        self.source_double = None
        self.target_single = None
        self.target_double = None

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.values!r})>'

    @classmethod
    def load(cls, path):
        '''Read the parameters from the file at "path" and validate them'''
        try:
            with open(path, encoding='utf-8') as f:
                text = f.read()
        except OSError as e:
            raise ConfigurationError(f'cannot read parameter file \'{path}\': {e}') from e

        return cls.loads(text)

    @classmethod
    def loads(cls, text):
        parser = configparser.ConfigParser(interpolation=None, delimiters=('=', ':'))

        # a plain properties file doesn't have sections
        if not text.lstrip().startswith('['):
            text = f'[{SECTION}]\n' + text

        try:
            parser.read_string(text)
        except configparser.Error as e:
            raise ConfigurationError(f'malformed parameter file: {e}') from e

        if not parser.has_section(SECTION):
            raise ConfigurationError(f'section \'{SECTION}\' not found in parameter file')

        parameters = cls(parser[SECTION])
        parameters.validate()

        return parameters

    def get(self, key):
        value = self.values.get(key)

        if value is None or not value.strip():
            raise ConfigurationError(f'parameter \'{key}\' is required')

        return value.strip()

    @property
    def input_path(self):
        return self.get(KEY_INPUT_FILE)

    @property
    def output_path(self):
        return self.get(KEY_OUTPUT_FILE)

    @property
    def charsets(self):
        return (self.source_single, self.source_double, self.target_single, self.target_double)

    def validate(self):
        for key in REQUIRED_KEYS:
            self.get(key)

        self.layout = Layout.from_string(self.get(KEY_FILE_ID))

        self.source_single = charsets.lookup(self.get(KEY_SOURCE_CHARSET_SINGLE))
        self.source_double = charsets.lookup(self.get(KEY_SOURCE_CHARSET_DOUBLE))
        self.target_single = charsets.lookup(self.get(KEY_TARGET_CHARSET_SINGLE))
        self.target_double = charsets.lookup(self.get(KEY_TARGET_CHARSET_DOUBLE))

        if any(_.is_ebcdic for _ in self.charsets):
            self._install_ebcdic()

        for key in REQUIRED_KEYS:
            logger.debug('  %s: %s' % (key, self.get(key)))

        return self

    def _install_ebcdic(self):
        path = self.values.get(KEY_EBCDIC_MAPPING)

        if not path or not path.strip():
            if ebcdic.is_installed():
                return
            raise ConfigurationError(f'parameter \'{KEY_EBCDIC_MAPPING}\' is required when using EBCDIC')

        try:
            ebcdic.install(path.strip())
        except (OSError, ValueError) as e:
            raise ConfigurationError(f'cannot load EBCDIC mapping from \'{path}\': {e}') from e

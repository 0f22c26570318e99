from enum import Enum, auto


class LayoutFamily(Enum):
    '''The family decides the framing and which fields need double-width treatment'''
    WHOLE_FILE      = auto()
    FIXED_MIXED     = auto()
    VARIABLE_FRAMED = auto()


class Layout(Enum):
    '''The six file layouts: each one carries its family and the record length
    (zero where it doesn't apply).'''
    FILE_A = ('FILE_A', LayoutFamily.WHOLE_FILE, 0)
    FILE_B = ('FILE_B', LayoutFamily.WHOLE_FILE, 0)
    FILE_C = ('FILE_C', LayoutFamily.FIXED_MIXED, 380)
    FILE_D = ('FILE_D', LayoutFamily.FIXED_MIXED, 380)
    FILE_E = ('FILE_E', LayoutFamily.VARIABLE_FRAMED, 0)
    FILE_F = ('FILE_F', LayoutFamily.VARIABLE_FRAMED, 0)

    def __init__(self, identifier, family, record_length):
        self.identifier = identifier
        self.family = family
        self.record_length = record_length

    @property
    def has_double_width_fields(self):
        return self.family == LayoutFamily.FIXED_MIXED

    @property
    def is_variable_length(self):
        return self.family == LayoutFamily.VARIABLE_FRAMED

    @classmethod
    def from_string(cls, file_id):
        from .exceptions import ConfigurationError

        if file_id is None or not file_id.strip():
            raise ConfigurationError('file id cannot be empty')

        try:
            return cls[file_id.strip().upper()]
        except KeyError:
            raise ConfigurationError(
                f'invalid file id \'{file_id}\', must be one of: {", ".join(_.identifier for _ in cls)}')


class EncodingClass(Enum):
    '''The classification drives escape bracketing and control-byte substitution'''
    UTF8               = auto()
    JIS_SINGLE         = auto()
    JIS_ESCAPED_DOUBLE = auto()
    EBCDIC             = auto()


class RecordKind(Enum):
    '''Marker found in the first unit of a fixed-mixed record'''
    HEADER = '1'
    DATA   = '2'


class PipelinePhase(Enum):
    '''Enum to state the actual phase of a run'''
    INIT      = 0
    STREAMING = auto()
    COMPLETED = auto()
    ABORTED   = auto()

"""
Core module: the read/transform/write loop.

"""
import logging
from contextlib import ExitStack

from .enum import LayoutFamily, PipelinePhase
from .exceptions import BatchCodecException
from .framing import framer_for
from .records import RecordTransformer
from .streams import Stream


PROGRESS_EVERY = 1000


class RunResult(object):
    '''Outcome of a successful run'''

    def __init__(self, record_count=0, error_count=0, bytes_read=0, bytes_written=0):
        self.record_count = record_count
        self.error_count = error_count
        self.bytes_read = bytes_read
        self.bytes_written = bytes_written

    def __repr__(self):
        return '<%s(records=%d, errors=%d, read=%d, written=%d)>' % (
            self.__class__.__name__,
            self.record_count,
            self.error_count,
            self.bytes_read,
            self.bytes_written,
        )


class Pipeline(object):
    '''Sequential conversion of a stream: one record at a time, the first error aborts
    the run and is propagated to the caller.

    The output already written when an error happens is not rolled back.'''

    def __init__(self, layout, source_single, source_double, target_single, target_double,
                 byte_tables=None, char_tables=None):
        self.logger = logging.getLogger(__name__)
        self.layout = layout
        self.source_single = source_single
        self.source_double = source_double
        self.target_single = target_single
        self.target_double = target_double
        self.transformer = RecordTransformer(
            layout,
            source_single,
            source_double,
            target_single,
            target_double,
            byte_tables=byte_tables,
            char_tables=char_tables,
        )
        self._phase = PipelinePhase.INIT
        self.record_count = 0
        self.error_count = 0

    @classmethod
    def from_parameters(cls, parameters):
        return cls(
            parameters.layout,
            parameters.source_single,
            parameters.source_double,
            parameters.target_single,
            parameters.target_double,
        )

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.transformer!r}, phase={self._phase.name})>'

    @property
    def phase(self):
        return self._phase

    def _abort(self, error, index=None, offset=None):
        self.error_count += 1
        self._phase = PipelinePhase.ABORTED

        if error.index is None:
            error.index = index
        if error.offset is None:
            error.offset = offset

        self.logger.error('conversion aborted: %s' % error)

    def run(self, source, sink) -> RunResult:
        '''Convert everything from "source" writing to "sink": they can be Stream instances
        or anything a Stream can wrap.

        The streams created here are closed before returning, also when the run aborts,
        so that the output written up to the failing record is on disk.'''
        if self._phase != PipelinePhase.INIT:
            raise RuntimeError(f'a pipeline can run only once, this one is {self._phase.name}')

        with ExitStack() as stack:
            if not isinstance(source, Stream):
                source = stack.enter_context(Stream(source))
            if not isinstance(sink, Stream):
                sink = stack.enter_context(Stream(sink, flags='w'))

            # flushed whatever the outcome, the caller may own the sink
            stack.callback(sink.flush)

            return self._run(source, sink)

    def _run(self, source, sink):
        self._phase = PipelinePhase.STREAMING

        self.logger.info('file type: %s' % self.layout.identifier)
        self.logger.info('source charset: single=%s, double=%s' % (
            self.source_single.identifier, self.source_double.identifier))
        self.logger.info('target charset: single=%s, double=%s' % (
            self.target_single.identifier, self.target_double.identifier))

        if self.layout.family == LayoutFamily.WHOLE_FILE:
            self._run_whole(source, sink)
        else:
            self._run_records(source, sink)

        self._phase = PipelinePhase.COMPLETED

        result = RunResult(
            record_count=self.record_count,
            error_count=self.error_count,
            bytes_read=source.tell(),
            bytes_written=sink.tell(),
        )

        self.logger.info('processing completed: %d records processed, %d errors' % (
            self.record_count, self.error_count))

        return result

    def _run_whole(self, source, sink):
        '''No record here: the whole file is a single unit'''
        data = source.read_all()
        self.logger.info('read input: %d bytes' % len(data))

        try:
            converted = self.transformer(data)
        except BatchCodecException as e:
            self._abort(e, offset=0)
            raise

        sink.write(converted)
        self.logger.info('converted: %d bytes -> %d bytes' % (len(data), len(converted)))

        if data:
            self.record_count += 1

    def _run_records(self, source, sink):
        framer = framer_for(self.layout, self.source_single)
        self.logger.debug(f'using {framer!r}')

        while True:
            offset = source.tell()
            try:
                record = framer.read_next(source)
                if record is None:
                    break

                converted = self.transformer(record)
            except BatchCodecException as e:
                self._abort(e, index=self.record_count + 1, offset=offset)
                raise

            sink.write(converted)
            self.record_count += 1

            if self.record_count % PROGRESS_EVERY == 0:
                self.logger.debug('processed %d records' % self.record_count)


def process_file(parameters) -> RunResult:
    '''Convert the input file into the output file described by the parameters'''
    logger = logging.getLogger(__name__)
    logger.info('processing file: %s -> %s' % (parameters.input_path, parameters.output_path))

    pipeline = Pipeline.from_parameters(parameters)

    with Stream(parameters.input_path) as source, Stream(parameters.output_path, flags='w') as sink:
        return pipeline.run(source, sink)

import io
import logging
import os


logger = logging.getLogger(__name__)


# upper bound of a single read from the underlying object
CHUNK_SIZE = 0x10000


class Stream(object):
    '''This is a simple wrapper around bytes/path/file objects to
    uniform their properties: the pipeline only needs to read N bytes,
    read everything that is left and append bytes, keeping track of the
    offset for error reporting.

    A path is opened (and closed with close()) by the Stream itself, any other
    file-like object stays under the control of the caller.'''
    def __init__(self, obj, flags='r'):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self.flags = flags
        self.obj = obj
        self.owned = False
        self.offset = 0

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, self.init_file)

        init_method()

    def __getattr__(self, name):
        return getattr(self.obj, name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return '<%s(%s, offset=%d)>' % (self.__class__.__name__, self._type.__name__, self.offset)

    def init_str(self):
        '''We think this is a path'''
        mode = 'wb' if 'w' in self.flags else 'rb'
        logger.debug('opening path \'%s\' (%s)' % (self.obj, mode))
        self.obj = open(self.obj, mode)
        self.owned = True

    def init_PosixPath(self):
        self.obj = os.fspath(self.obj)
        self.init_str()

    init_WindowsPath = init_PosixPath

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def init_file(self):
        if not (hasattr(self.obj, 'read') or hasattr(self.obj, 'write')):
            raise ValueError('\'%s\' is the wrong kind of object to use as stream' % self._type.__name__)

    def tell(self):
        return self.offset

    def read(self, size):
        '''Return up to "size" bytes: fewer only if the end of the stream is reached.

        Some file-like objects (pipes, sockets) are allowed to return less data
        than requested, here we loop until we have all of it; each read is bounded
        so that a bogus length doesn't allocate more than what the stream holds.'''
        chunks = []
        missing = size
        while missing > 0:
            chunk = self.obj.read(min(missing, CHUNK_SIZE))
            if not chunk:
                break
            chunks.append(chunk)
            missing -= len(chunk)

        data = b''.join(chunks)
        self.offset += len(data)

        return data

    def read_all(self):
        data = self.obj.read()
        self.offset += len(data)

        return data

    def write(self, data):
        written = self.obj.write(data)
        self.offset += len(data)

        return written

    def close(self):
        if not self.owned:
            return

        logger.debug('closing %r' % self)
        self.obj.close()

    def flush(self):
        flush = getattr(self.obj, 'flush', None)
        if flush:
            flush()

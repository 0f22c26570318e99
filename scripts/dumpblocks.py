#!/usr/bin/env python3
'''
List the variable blocks of a file of the variable-framed family (FILE_E, FILE_F).

 $ dumpblocks.py data.dat
'''
import os
import sys
import logging

from batchcodec.framing import VariableBlockFramer
from batchcodec.streams import Stream
from batchcodec.exceptions import FramingError


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)
logger = logging.getLogger(__name__)


def usage(progname):
    print(f'usage: {progname} <variable block file>')
    sys.exit(1)


def dump_blocks(stream):
    print(f''' Index  Offset      BlockLen  RecordLen  Payload''')
    framer = VariableBlockFramer()
    for block in framer(stream):
        warning = '' if block.record_length == block.block_length - 4 else '  (record length mismatch)'
        print(f'''{block.index:>6d}  0x{block.offset:08x}  {block.block_length:>8d}  {block.record_length:>9d}  {len(block.payload):>7d}{warning}''')


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    with Stream(sys.argv[1]) as stream:
        try:
            dump_blocks(stream)
        except FramingError as e:
            logger.error(f'{e}')
            sys.exit(3)

#!/usr/bin/env python3
'''
Convert a batch file following the indications of a parameter file.

Exit codes:

 0  success
 1  wrong usage
 2  parameter error
 3  conversion error (framing, record type or charset)
 99 unexpected error
'''
import os
import sys
import logging

from batchcodec.config import BatchParameters
from batchcodec.core import process_file
from batchcodec.exceptions import BatchCodecException, ConfigurationError


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)
logger = logging.getLogger(__name__)


EXIT_SUCCESS = 0
EXIT_USAGE = 1
EXIT_PARAMETERS = 2
EXIT_CONVERSION = 3
EXIT_UNEXPECTED = 99


def usage(progname):
    print(f'usage: {progname} <parameter file>')
    sys.exit(EXIT_USAGE)


def main(path):
    logger.info('=== encoding batch started ===')
    logger.info(f'parameter file: {path}')

    try:
        parameters = BatchParameters.load(path)
        logger.info('parameters loaded successfully')

        result = process_file(parameters)
    except ConfigurationError as e:
        logger.error(f'parameter validation error: {e}')
        return EXIT_PARAMETERS
    except BatchCodecException as e:
        logger.error(f'conversion error: {e}')
        return EXIT_CONVERSION
    except Exception:
        logger.error('unexpected error occurred', exc_info=True)
        return EXIT_UNEXPECTED

    logger.info(f'{result.record_count} records, {result.bytes_read} bytes read, {result.bytes_written} bytes written')
    logger.info('=== encoding batch completed successfully ===')

    return EXIT_SUCCESS


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    sys.exit(main(sys.argv[1]))

from pathlib import Path

import pytest

from batchcodec.charsets import ebcdic


@pytest.fixture
def test_root_dir():
    return Path(__file__).parent


@pytest.fixture
def sample_ucm(test_root_dir):
    return test_root_dir / 'data' / 'sample-930.ucm'


@pytest.fixture
def cp930(sample_ucm):
    '''Install the sample EBCDIC table for the "cp930" codec'''
    return ebcdic.install(str(sample_ucm))

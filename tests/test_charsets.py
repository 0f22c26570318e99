import codecs

import pytest

from batchcodec import charsets
from batchcodec.charsets import ebcdic, jis
from batchcodec.charsets.ebcdic import MappingTable, SO, SI
from batchcodec.enum import EncodingClass
from batchcodec.exceptions import ConfigurationError


@pytest.mark.parametrize('name,identifier,encoding_class', [
    ('UTF-8', 'UTF-8', EncodingClass.UTF8),
    ('utf8', 'UTF-8', EncodingClass.UTF8),
    ('JIS', 'JIS_X0201', EncodingClass.JIS_SINGLE),
    ('jis_x_0201', 'JIS_X0201', EncodingClass.JIS_SINGLE),
    ('ISO-2022-JP', 'ISO-2022-JP', EncodingClass.JIS_ESCAPED_DOUBLE),
    ('cp930', 'CP930', EncodingClass.EBCDIC),
    ('IBM930', 'CP930', EncodingClass.EBCDIC),
    ('EBCDIC_SBCS', 'CP930', EncodingClass.EBCDIC),
])
def test_lookup(name, identifier, encoding_class):
    charset = charsets.lookup(name)

    assert charset.identifier == identifier
    assert charset.encoding_class == encoding_class


@pytest.mark.parametrize('name', ['latin-1', 'SHIFT_JIS', 'cp500', '', '   ', None])
def test_lookup_unsupported(name):
    with pytest.raises(ConfigurationError):
        charsets.lookup(name)


def test_jis_x0201_decode():
    assert b'AZ\x5c\x7e'.decode('jis_x0201') == 'AZ¥‾'
    assert b'\xa1\xdf'.decode('jis_x0201') == '｡ﾟ'


def test_jis_x0201_encode():
    assert 'ｱ¥'.encode('jis-x0201') == b'\xb1\x5c'

    with pytest.raises(UnicodeEncodeError):
        'あ'.encode('jis_x0201')


@pytest.mark.parametrize('byte', [0x80, 0xa0, 0xe0, 0xff])
def test_jis_x0201_undefined(byte):
    with pytest.raises(UnicodeDecodeError):
        bytes([byte]).decode(jis.CODEC_NAME)


def test_ucm_table(sample_ucm):
    table = MappingTable.from_ucm(str(sample_ucm))

    assert table.name == 'sample-930'
    assert table.sbcs_to_unicode[0xc1] == 'A'
    assert table.unicode_to_sbcs['A'] == 0xc1
    assert table.dbcs_to_unicode[0x4541] == '一'
    assert table.unicode_to_dbcs['\u3000'] == 0x4040

    # |2 is ignored
    assert 0x3f not in table.sbcs_to_unicode
    # |1 is only from unicode
    assert table.unicode_to_dbcs['\u2225'] == 0x447c
    assert table.dbcs_to_unicode[0x447c] == '\u2016'
    # |3 is only to unicode
    assert table.dbcs_to_unicode[0x426a] == '\u00a6'
    assert '\u00a6' not in table.unicode_to_dbcs


def test_ucm_without_charmap(tmp_path):
    path = tmp_path / 'empty.ucm'
    path.write_text('<code_set_name> "empty"\nCHARMAP\nEND CHARMAP\n')

    with pytest.raises(ValueError):
        MappingTable.from_ucm(str(path))


def test_cp930_decode(cp930):
    data = b'\xc1\x40' + bytes([SO]) + b'\x45\x41\x40\x40' + bytes([SI]) + b'\xf1'

    assert data.decode('cp930') == 'A 一\u30001'
    assert codecs.lookup('ibm-930').name == 'cp930'


def test_cp930_encode(cp930):
    """Runs of double byte characters are surrounded by SO/SI."""
    assert 'A一二1三'.encode('cp930') == \
        b'\xc1\x0e\x45\x41\x45\x42\x0f\xf1\x0e\x45\x43\x0f'
    assert ''.encode('cp930') == b''


def test_cp930_errors(cp930):
    with pytest.raises(UnicodeDecodeError):
        b'\xc1\x0e\x45'.decode('cp930')  # truncated double byte

    with pytest.raises(UnicodeDecodeError):
        b'\x99'.decode('cp930')

    with pytest.raises(UnicodeEncodeError):
        'a'.encode('cp930')

    assert b'\xc1\x99'.decode('cp930', 'replace') == 'A\ufffd'


def test_cp930_install_replaces_table(cp930, sample_ucm, tmp_path):
    path = tmp_path / 'tiny.ucm'
    path.write_text('CHARMAP\n<U0058> \\xC1 |0\nEND CHARMAP\n')

    ebcdic.install(str(path))
    try:
        assert b'\xc1'.decode('cp930') == 'X'
    finally:
        ebcdic.install(str(sample_ucm))

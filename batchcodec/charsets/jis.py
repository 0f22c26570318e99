'''
# JIS X 0201

The single byte half of the JIS pairing: the lower part is ASCII with two
exceptions (0x5C is the YEN SIGN and 0x7E is the OVERLINE), the upper part holds
the halfwidth katakana in the range 0xA1-0xDF. All the other bytes are undefined.

Python doesn't ship a codec for it so here we build a charmap codec, the same
way the standard library builds its single byte code pages.
'''
import codecs


CODEC_NAME = 'jis_x0201'
ALIASES = (
    'jis_x0201',
    'jis_x_0201',
    'jisx0201',
)

UNDEFINED = '\ufffe'


def _build_decoding_table():
    table = [UNDEFINED] * 0x100

    for byte in range(0x80):
        table[byte] = chr(byte)

    table[0x5c] = '\u00a5'  # YEN SIGN
    table[0x7e] = '\u203e'  # OVERLINE

    for byte in range(0xa1, 0xe0):
        table[byte] = chr(0xff61 + byte - 0xa1)  # HALFWIDTH KATAKANA

    return ''.join(table)


decoding_table = _build_decoding_table()
encoding_table = codecs.charmap_build(decoding_table)


class Codec(codecs.Codec):

    def encode(self, input, errors='strict'):
        return codecs.charmap_encode(input, errors, encoding_table)

    def decode(self, input, errors='strict'):
        return codecs.charmap_decode(input, errors, decoding_table)


class IncrementalEncoder(codecs.IncrementalEncoder):
    def encode(self, input, final=False):
        return codecs.charmap_encode(input, self.errors, encoding_table)[0]


class IncrementalDecoder(codecs.IncrementalDecoder):
    def decode(self, input, final=False):
        return codecs.charmap_decode(input, self.errors, decoding_table)[0]


def getregentry():
    return codecs.CodecInfo(
        name=CODEC_NAME,
        encode=Codec().encode,
        decode=Codec().decode,
        incrementalencoder=IncrementalEncoder,
        incrementaldecoder=IncrementalDecoder,
    )


def search(name):
    if name.replace('-', '_') in ALIASES:
        return getregentry()

    return None


codecs.register(search)

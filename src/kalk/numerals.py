'''
Number parsing, including non-ASCII digits and thousands separators.
'''

from functools import reduce
import operator

import regex

from .util import NotANumber


# Code point of the zero glyph of each supported decimal digit script. The
# other nine digits follow it contiguously.
DIGIT_ZEROS = (
    0x0660,  # Arabic-Indic
    0x06F0,  # Extended Arabic-Indic (Persian, Urdu)
    0x0966,  # Devanagari
    0x09E6,  # Bengali
    0xFF10,  # Fullwidth
)

SEPARATORS = {
    '\N{ARABIC DECIMAL SEPARATOR}': '.',
    '\N{ARABIC THOUSANDS SEPARATOR}': ',',
}

THOUSANDS_SEPARATOR = ','


def _translation():
    table = {zero + digit: ord('0') + digit
             for zero in DIGIT_ZEROS
             for digit in range(10)}
    table.update({ord(glyph): ascii_
                  for glyph, ascii_
                  in SEPARATORS.items()})
    return table


TRANSLATION = _translation()

# Decimal float literal. Deliberately narrower than float(), which would also
# take underscores, surrounding whitespace, and non-ASCII digits as-is.
FLOAT = r'''
         [+-]?
         (?:
             (?:
                 # 1, 1., 1.5
                 \d+
                 (?:
                     \.
                     \d*
                 )?
                 |
                 # .5
                 \.
                 \d+
             )
             (?:
                 [eE]
                 [+-]?
                 \d+
             )?
             |
             inf(?:inity)?
             |
             nan
         )
         '''
FLAGS = reduce(operator.__or__,
               {regex.ASCII,
                regex.IGNORECASE,
                regex.VERSION1,
                regex.VERBOSE},
               0)
FLOAT_RE = regex.compile(FLOAT, flags=FLAGS)


def normalize(token):
    '''
    Map foreign digits and separators to ASCII, then drop thousands
    separators.
    '''
    return token.translate(TRANSLATION).replace(THOUSANDS_SEPARATOR, '')


def parse_number(token):
    '''
    Parse token into a float.

    Raises NotANumber if it isn't a decimal float literal once normalized.
    '''
    cleaned = normalize(token)
    if FLOAT_RE.fullmatch(cleaned) is None:
        raise NotANumber('Not a number: {}'.format(token))
    return float(cleaned)

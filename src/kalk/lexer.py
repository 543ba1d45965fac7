from collections import namedtuple
from functools import reduce
import operator

import regex

from .util import UnknownToken


Token = namedtuple('Token', 'kind text')
WORD = 'word'
KEY = 'key'


class Lexer:
    '''
    Lexer for the calculator's *regular* grammar.

    Stateless: the grammar is in class attributes, and LEXEME, the one
    pattern lex() matches, is assembled from them.
    '''
    # Memory key, quoted. May hold spaces, not quotes.
    KEY = r'''
           "
           (?<__key__>
               [^"]+
           )
           "
           '''
    # Number, operator or command. Anything up to a space, quote or comment.
    WORD = r'[^\s"#]+'
    SPACE = r'\s+'
    # Runs to the end of the line, wherever it starts outside a key.
    COMMENT = r'\#.*'

    # All possible lexemes.
    LEXEME = r'(?<key>' + KEY + r')|' \
             r'(?<word>' + WORD + r')|' \
             r'(?<space>' + SPACE + r')|' \
             r'(?<comment>' + COMMENT + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.DOTALL,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def lex(self, line):
        '''
        Take a line and return all lexemes.

        Raises on the first thing that isn't one, e.g. an unclosed quote.
        '''
        while line:
            match = regex.match(type(self).LEXEME, line,
                                flags=type(self).FLAGS)
            if match is None:
                break
            yield match
            line = line[len(match.group(0)):]
        if line:
            raise UnknownToken("Couldn't lex {0}".format(line.strip()))

    def isfeedable(self, match):
        '''
        Return True if lexeme can be fed to machine.
        '''
        return bool(self.matchedgroups(match).keys() & {KEY, WORD})

    def matchedgroups(self, match):
        '''
        Return the named groups that took part in the match.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value}

    def tokens(self, line):
        '''
        Yield the Tokens of a line, quotes stripped from keys.
        '''
        for match in self.lex(line):
            if not self.isfeedable(match):
                continue
            groups = self.matchedgroups(match)
            if KEY in groups:
                yield Token(KEY, groups['__key__'])
            else:
                yield Token(WORD, groups[WORD])

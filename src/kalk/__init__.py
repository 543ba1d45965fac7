'''
RPN calculator.

Supports plain old arithmetic, the usual scientific functions, combinatorics,
named memory, and a couple of stack operators. Not intended to be
Turing-complete!

Numbers may be written with thousands separators (1,200) and in Arabic-Indic
or Persian digits (۱۲۳), which is what it was written for.

Each input line runs as a whole or not at all: if any token on it fails, the
stack, memory, and last answer are as they were before the line.
'''

from .cli import CLI
from .lexer import Lexer
from .machine import Machine, Session
from .numerals import parse_number
from .util import (KalkError, NotANumber, UnknownToken, StackUnderflow,
                   DivisionByZero, DomainError, UnknownKey,
                   UninitializedAnswer)


__all__ = ('Machine', 'Session', 'Lexer', 'CLI', 'parse_number',
           'KalkError', 'NotANumber', 'UnknownToken', 'StackUnderflow',
           'DivisionByZero', 'DomainError', 'UnknownKey',
           'UninitializedAnswer')

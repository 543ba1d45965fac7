'''
The command table: every name the machine understands, other than numbers.

Each Command carries its arity and a function over that many operands.
Operators return a single result or a tuple of results. Display commands
return the text to print; the machine pushes their operand back. Specials
name a Machine handler, for commands that touch more than the operands.
'''

from collections import namedtuple
import operator
import math

from .util import DivisionByZero, DomainError, wrap_user_errors


Command = namedtuple('Command', 'name group usage arity kind function')

OPERATOR = 'operator'
DISPLAY = 'display'
SPECIAL = 'special'

# Largest n for which n! fits in a double.
MAX_FACTORIAL = 170
_LOG_MAX_FLOAT = math.log(2.0) * 1024


def _nullary(value, usage):
    return Command(None, None, usage, 0, OPERATOR, lambda: value)


def _unary(f, usage, kind=OPERATOR):
    return Command(None, None, usage, 1, kind, f)


def _binary(f, usage):
    return Command(None, None, usage, 2, OPERATOR, f)


def _special(handler, arity, usage):
    return Command(None, None, usage, arity, SPECIAL, handler)


def _group(group, commands):
    '''
    Fill in names and group, and translate math errors for each command.
    '''
    result = {}
    for name, command in commands.items():
        function = command.function
        if command.kind != SPECIAL:
            function = wrap_user_errors(name)(function)
        result[name] = command._replace(name=name,
                                        group=group,
                                        function=function)
    return result


def divide(a, b):
    if b == 0:
        raise DivisionByZero('Division by zero')
    return a / b


def power(a, b):
    if a == 0 and b < 0:
        raise DivisionByZero('Zero raised to a negative power')
    return math.pow(a, b)


def remainder(a, b):
    '''
    Euclidean remainder: never negative, whatever the signs.
    '''
    if b == 0:
        raise DivisionByZero('Modulo by zero')
    r = math.fmod(a, b)
    if r < 0:
        r += abs(b)
    return r


def percent_change(a, b):
    '''
    Change from a to b, as a percentage of a.
    '''
    if a == 0:
        raise DivisionByZero('Percent change from zero')
    return (b - a) / a * 100


def logarithm(a, base):
    return math.log(a, base)


def sqrt(a):
    if a < 0:
        raise DomainError('Square root of negative number {}'.format(a))
    return math.sqrt(a)


def _rounding(f):
    # math.ceil/floor return ints, and choke on inf and nan.
    def wrapped(a):
        if not math.isfinite(a):
            return a
        return float(f(a))
    wrapped.__name__ = f.__name__
    wrapped.__doc__ = f.__doc__
    return wrapped


def _natural(n, what):
    if not n >= 0 or not float(n).is_integer():
        raise DomainError('{} requires a non-negative integer, not {}'
                          .format(what, n))
    return int(n)


def factorial(n):
    n = _natural(n, 'Factorial')
    if n > MAX_FACTORIAL:
        raise DomainError('Factorial too large; max supported value is {}'
                          .format(MAX_FACTORIAL))
    return float(math.factorial(n))


def _choice(n, k, what, log_result):
    n = _natural(n, what)
    k = _natural(k, what)
    if k > n:
        raise DomainError('{} requires k <= n, not n={} k={}'
                          .format(what, n, k))
    # Refuse before computing exactly; the integers get huge fast.
    if log_result(n, k) > _LOG_MAX_FLOAT:
        raise DomainError('Result of {} out of range'.format(what))
    return n, k


def permutations(n, k):
    n, k = _choice(n, k, 'P(n, k)',
                   lambda n, k: math.lgamma(n + 1) - math.lgamma(n - k + 1))
    return float(math.perm(n, k))


def combinations(n, k):
    n, k = _choice(n, k, 'C(n, k)',
                   lambda n, k: (math.lgamma(n + 1)
                                 - math.lgamma(k + 1)
                                 - math.lgamma(n - k + 1)))
    return float(math.comb(n, k))


def swap(a, b):
    return b, a


def _base(prefix, spec):
    '''
    Render the truncated integer in another base, sign before prefix.
    '''
    def render(a):
        n = int(a)
        sign = '-' if n < 0 else ''
        return sign + prefix + format(abs(n), spec)
    return render


ARITHMETIC = _group('Arithmetic', {
    '+': _binary(operator.__add__, 'a b + | Addition (a + b)'),
    '-': _binary(operator.__sub__, 'a b - | Subtraction (a - b)'),
    '*': _binary(operator.__mul__, 'a b * | Multiplication (a * b)'),
    '/': _binary(divide, 'a b / | Division (a / b)'),
    '**': _binary(power, 'a b ** | Power (a^b)'),
    '%': _binary(remainder, 'a b % | Euclidean Remainder (a mod b)'),
    '%%': _binary(percent_change,
                  'a b %% | Percent Change ((b - a) / a * 100)'),
})

CONSTANTS = _group('Constants', {
    'pi': _nullary(math.pi, 'pi | Push the value of pi'),
    'e': _nullary(math.e, "e | Push the value of Euler's number (e)"),
})

FUNCTIONS = _group('Functions', {
    'sqrt': _unary(sqrt, 'a sqrt | Square root'),
    'exp': _unary(math.exp, 'a exp | e raised to the power of a (e^a)'),
    'log': _binary(logarithm, 'a b log | Logarithm (log_b(a))'),
    'sin': _unary(math.sin, 'a sin | Sine (a in radians)'),
    'cos': _unary(math.cos, 'a cos | Cosine (a in radians)'),
    'tan': _unary(math.tan, 'a tan | Tangent (a in radians)'),
    'asin': _unary(math.asin, 'a asin | Arc sine (result in radians)'),
    'acos': _unary(math.acos, 'a acos | Arc cosine (result in radians)'),
    'atan': _unary(math.atan, 'a atan | Arc tangent (result in radians)'),
    'atan2': _binary(math.atan2,
                     'y x atan2 | Arc tangent of y/x (result in radians)'),
})

ROUNDING = _group('Rounding & Conversions', {
    'ceil': _unary(_rounding(math.ceil), 'a ceil | Ceiling (rounds up)'),
    'floor': _unary(_rounding(math.floor), 'a floor | Floor (rounds down)'),
    'deg': _unary(math.degrees,
                  'a deg | Convert angle from radians to degrees'),
    'rad': _unary(math.radians,
                  'a rad | Convert angle from degrees to radians'),
})

COMBINATORICS = _group('Combinatorics', {
    '!': _unary(factorial, 'n ! | Factorial (n!)'),
    'P': _binary(permutations, 'n k P | Permutations P(n, k)'),
    'C': _binary(combinations, 'n k C | Combinations C(n, k)'),
})

STACK = _group('Stack', {
    '<>': _binary(swap, 'a b <> | Swap the top two items'),
    'c': _special('clear', 0, 'c | Clear the stack'),
    'a': _special('answer', 0, 'a | Recall last successful answer'),
})

MEMORY = _group('Memory', {
    'sto': _special('store', 1, 'value "key" sto | Store value to key'),
    'rcl': _special('recall', 0, '"key" rcl | Recall value from key'),
})

DISPLAY_BASES = _group('Display', {
    'hex': _unary(_base('0x', 'X'),
                  'a hex | Display a in hexadecimal (truncated)', DISPLAY),
    'oct': _unary(_base('0o', 'o'),
                  'a oct | Display a in octal (truncated)', DISPLAY),
    'bin': _unary(_base('0b', 'b'),
                  'a bin | Display a in binary (truncated)', DISPLAY),
})

META = _group('Meta', {
    'help': _special('help', 0,
                     '"name" help | List all commands, or usage of name'),
})

# Help lists groups in this order.
GROUPS = (ARITHMETIC, CONSTANTS, FUNCTIONS, ROUNDING, COMBINATORICS,
          STACK, MEMORY, DISPLAY_BASES, META)

# Commands that take the quoted key right before them.
KEYED = frozenset({'sto', 'rcl', 'help'})

COMMANDS = dict()
for group in GROUPS:
    COMMANDS.update(group)

'''
Stack machine tests: one line at a time, all or nothing.
'''

import math

from kalk.machine import Machine, Session
from kalk.util import (UnknownToken, StackUnderflow, DivisionByZero,
                       DomainError, UnknownKey, UninitializedAnswer)

from pytest import raises, mark


@mark.parametrize('line, expected', [
    ('10 5 +', 15.0),
    ('10 5 -', 5.0),
    ('6 7 *', 42.0),
    ('10 4 /', 2.5),
    ('2 10 **', 1024.0),
    ('10 3 %', 1.0),
    ('-10 3 %', 2.0),
    ('10 -3 %', 1.0),
    ('25 50 %%', 100.0),
    ('100 75 %%', -25.0),
    ('1.1 ceil', 2.0),
    ('-1.1 floor', -2.0),
    ('9 sqrt', 3.0),
    ('5 !', 120.0),
    ('0 !', 1.0),
    ('5 3 P', 60.0),
    ('5 3 C', 10.0),
    ('5 0 C', 1.0),
])
def test_operators(run, line, expected):
    assert run(line) == [expected]


def test_operand_order(run):
    assert run('1 2 3 -') == [1.0, -1.0]


def test_constants(run):
    assert run('pi e') == [math.pi, math.e]


def test_functions(run):
    [value] = run('1 exp')
    assert math.isclose(value, math.e)
    [value] = run('c 1 1 atan2')
    assert math.isclose(value, math.pi / 4)
    [value] = run('c pi deg')
    assert math.isclose(value, 180.0)
    [value] = run('c 180 rad')
    assert math.isclose(value, math.pi)
    [value] = run('c pi cos')
    assert math.isclose(value, -1.0)
    [value] = run('c 1 asin')
    assert math.isclose(value, math.pi / 2)
    [value] = run('c 8 2 log')
    assert math.isclose(value, 3.0)
    [value] = run('c 100 10 log')
    assert math.isclose(value, 2.0)


def test_rollback_on_unknown_token(run, machine, session):
    run('1 2')
    with raises(UnknownToken):
        machine.evaluate_line(session, '3 badtoken')
    assert session.stack == [1.0, 2.0]


@mark.parametrize('line', ['5 0 /', '5 0 %', '0 5 %%', '0 -1 **', '8 1 log'])
def test_division_by_zero(machine, session, line):
    with raises(DivisionByZero):
        machine.evaluate_line(session, line)
    assert session.stack == []


@mark.parametrize('line', [
    '-4 sqrt',
    '-1 !',
    '4.5 !',
    '171 !',
    '3 5 P',
    '-5 3 P',
    '5 2.5 C',
    '3 5 C',
    '2 asin',
    '-1 10 log',
    '-8 0.5 **',
    '1000 exp',
    '2000 1000 P',
    'inf hex',
    'nan oct',
])
def test_domain_errors(machine, session, line):
    with raises(DomainError):
        machine.evaluate_line(session, line)
    assert session.stack == []


def test_failed_command_leaves_operands(run, machine, session):
    run('3 5')
    with raises(DomainError):
        machine.evaluate_line(session, 'P')
    assert session.stack == [3.0, 5.0]


@mark.parametrize('line', ['+', '1 +', 'sqrt', '1 <>', '!', 'hex', 'sto'])
def test_stack_underflow(machine, session, line):
    with raises(StackUnderflow):
        machine.evaluate_line(session, line)


def test_swap(run):
    run('1 2')
    assert run('<>') == [2.0, 1.0]
    assert run('3 <>') == [2.0, 3.0, 1.0]


def test_clear(run):
    assert run('1 2 3', 'c') == []
    assert run('c') == []
    assert run('c 4') == [4.0]


def test_memory_round_trip(run, session):
    run('45 "rate" sto')
    assert session.stack == []
    assert session.memory == {'rate': 45.0}
    assert run('"rate" rcl') == [45.0]


def test_memory_overwrite_and_spaces(run):
    assert run('1 "my key" sto 2 "my key" sto "my key" rcl') == [2.0]


def test_recall_unknown_key(machine, session):
    with raises(UnknownKey):
        machine.evaluate_line(session, '"nothing" rcl')


def test_memory_rolls_back(machine, session):
    with raises(UnknownToken):
        machine.evaluate_line(session, '1 "k" sto 2 bogus')
    assert session.memory == {}
    with raises(UnknownKey):
        machine.evaluate_line(session, '"k" rcl')


@mark.parametrize('line', [
    '"k"',
    '1 "k" +',
    '"k" 1',
    '"a" "b" rcl',
    '1 sto',
    'rcl',
])
def test_misplaced_keys(machine, session, line):
    with raises(UnknownToken):
        machine.evaluate_line(session, line)
    assert session.stack == []


def test_last_answer(run):
    run('3 4 +')
    assert run('a') == [7.0, 7.0]
    assert run('c a 2 *') == [14.0]


def test_last_answer_unset(machine, session):
    with raises(UninitializedAnswer):
        machine.evaluate_line(session, 'a')


def test_last_answer_only_on_success(run, machine, session):
    run('5')
    with raises(UnknownToken):
        machine.evaluate_line(session, '6 nope')
    assert session.answer == 5.0
    run('c')
    assert session.answer == 5.0
    assert run('a') == [5.0]


def test_display_bases(run, output):
    assert run('255.99 hex') == [255.99]
    assert run('-42.1 hex') == [255.99, -42.1]
    run('c 10 bin 8 oct')
    assert output.getvalue().splitlines() == [
        'hex: 0xFF',
        'hex: -0x2A',
        'bin: 0b1010',
        'oct: 0o10',
    ]


def test_help_lists_everything(machine, session, output):
    assert machine.evaluate_line(session, 'help') == []
    text = output.getvalue()
    for name in machine.commands:
        assert '- {:<5} |'.format(name) in text
    assert 'Combinatorics:' in text


def test_help_for_one_command(run, output):
    run('1 "sqrt" help')
    assert output.getvalue().splitlines() == [
        "--- Help for 'sqrt' ---",
        '  Type: Functions',
        '  Usage: a sqrt | Square root',
    ]


def test_help_for_unknown_command(machine, session):
    with raises(UnknownToken, match='Function not found'):
        machine.evaluate_line(session, '"frobnicate" help')


def test_numbers_in_other_scripts(run):
    assert run('۱۲۳ 1,200 +') == [1323.0]


def test_sessions_are_independent(machine):
    one, two = Session(), Session()
    machine.evaluate_line(one, '1 "x" sto')
    machine.evaluate_line(two, '2')
    assert one.memory == {'x': 1.0}
    assert two.memory == {}
    assert two.answer == 2.0
    assert one.answer is None
    with raises(UnknownKey):
        machine.evaluate_line(two, '"x" rcl')


def test_result_is_a_copy(machine, session):
    stack = machine.evaluate_line(session, '1')
    stack.append(2.0)
    assert session.stack == [1.0]


def test_custom_command_table(session):
    from kalk.commands import ARITHMETIC
    machine = Machine(commands=ARITHMETIC)
    assert machine.evaluate_line(session, '1 2 +') == [3.0]
    with raises(UnknownToken):
        machine.evaluate_line(session, 'pi')

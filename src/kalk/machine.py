from collections import ChainMap

from .commands import COMMANDS, KEYED, DISPLAY, SPECIAL
from .lexer import Lexer, KEY
from .numerals import parse_number
from .util import (NotANumber, UnknownToken, StackUnderflow, UnknownKey,
                   UninitializedAnswer)


class Session:
    '''
    Everything a calculator remembers between lines.

    Only Machine.evaluate_line should change it, a whole line at a time.
    '''

    def __init__(self):
        self.stack = []
        self.memory = dict()
        # Top of the stack after the last successful line, if any.
        self.answer = None

    def __repr__(self):
        return '{}(stack={!r}, memory={!r}, answer={!r})'.format(
            type(self).__name__, self.stack, self.memory, self.answer)


class _Transaction:
    '''
    Scratch copy of a session for one line. Thrown away on error.
    '''

    def __init__(self, session):
        self.session = session
        self.stack = list(session.stack)
        # Writes land in the first map; reads fall through to the session.
        self.memory = ChainMap(dict(), session.memory)

    def commit(self):
        self.session.stack[:] = self.stack
        self.session.memory.update(self.memory.maps[0])
        if self.stack:
            self.session.answer = self.stack[-1]


class Machine:
    '''
    Arithmetic stack machine (RPN calculator).

    Takes lines and runs them against a Session. Stateless itself, so one
    machine can serve any number of sessions.
    '''

    def __init__(self, commands=None, output=None):
        '''
        :param commands: Command table, name to Command.
        :param output: Where display and help commands print. Defaults to
                       whatever sys.stdout is at the time.
        '''
        self.commands = COMMANDS if commands is None else commands
        self.output = output
        self.lexer = Lexer()

    def evaluate_line(self, session, line):
        '''
        Run every token of line, all or nothing, and return the stack.

        On any KalkError, session is left exactly as it was.
        '''
        txn = _Transaction(session)
        key = None
        for kind, text in self.lexer.tokens(line):
            if kind == KEY:
                if key is not None:
                    raise self._dangling(key)
                key = text
                continue
            command = self.commands.get(text)
            if key is not None and text not in KEYED:
                raise self._dangling(key)
            if command is None:
                txn.stack.append(self.parse(text))
                continue
            self._apply(txn, command, key)
            key = None
        if key is not None:
            raise self._dangling(key)
        txn.commit()
        return list(session.stack)

    def parse(self, text):
        '''
        Parse a token that isn't a command as a number.
        '''
        try:
            return parse_number(text)
        except NotANumber as e:
            raise UnknownToken('Unrecognized token or operator: {}'
                               .format(text)) from e

    def _dangling(self, key):
        return UnknownToken('Key "{}" must be followed by one of: {}'
                            .format(key, ', '.join(sorted(KEYED))))

    def _operands(self, stack, n):
        '''
        Return the top n items of stack, bottom first, without popping them.
        '''
        if len(stack) < n:
            raise StackUnderflow('Less than {} element(s) on stack'.format(n))
        return stack[len(stack) - n:]

    def _apply(self, txn, command, key):
        '''
        Run one command. The stack only changes once it has succeeded.
        '''
        operands = self._operands(txn.stack, command.arity)
        if command.kind == SPECIAL:
            handler = getattr(self, '_' + command.function)
            results = handler(txn, key, *operands)
        elif command.kind == DISPLAY:
            print('{}: {}'.format(command.name, command.function(*operands)),
                  file=self.output)
            results = operands
        else:
            results = command.function(*operands)
            if not isinstance(results, tuple):
                results = (results,)
        del txn.stack[len(txn.stack) - command.arity:]
        txn.stack.extend(results)

    def _clear(self, txn, key):
        txn.stack.clear()
        return ()

    def _answer(self, txn, key):
        if txn.session.answer is None:
            raise UninitializedAnswer("No previous answer available ('a' is "
                                      "empty)")
        return (txn.session.answer,)

    def _store(self, txn, key, value):
        if key is None:
            raise UnknownToken('sto requires a quoted key before it, e.g. '
                               '45 "rate" sto')
        txn.memory[key] = value
        return ()

    def _recall(self, txn, key):
        if key is None:
            raise UnknownToken('rcl requires a quoted key before it, e.g. '
                               '"rate" rcl')
        try:
            return (txn.memory[key],)
        except KeyError:
            raise UnknownKey('Storage key not found: {}'.format(key)) from None

    def _help(self, txn, key):
        if key is None:
            self.printhelp()
        else:
            self.help(key)
        return ()

    def printhelp(self):
        '''
        Print all commands, grouped.
        '''
        groups = dict()
        for command in self.commands.values():
            groups.setdefault(command.group, []).append(command)
        print('--- Available Functions ---', file=self.output)
        for group, commands in groups.items():
            print(file=self.output)
            print('  {}:'.format(group), file=self.output)
            for command in commands:
                print('    - {:<5} | {}'.format(command.name, command.usage),
                      file=self.output)

    def help(self, name):
        '''
        Show usage of the command with name.
        '''
        command = self.commands.get(name)
        if command is None:
            raise UnknownToken("Function not found: {}. Type 'help' for a "
                               "full list.".format(name))
        print("--- Help for '{}' ---".format(name), file=self.output)
        print('  Type: {}'.format(command.group), file=self.output)
        print('  Usage: {}'.format(command.usage), file=self.output)

from argparse import ArgumentParser, REMAINDER, OPTIONAL
import traceback
import math
import sys

from prompt_toolkit import PromptSession

from .util import KalkError
from .machine import Machine, Session


BANNER = '''\
Welcome to kalk (RPN Calculator). Type 'exit' to quit.
Type 'help' for a list of all functions or '"func" help' for specific usage.'''


def format_number(value):
    '''
    Render a stack value with thousands separators, and no trailing .0.
    '''
    if math.isfinite(value) and value.is_integer():
        return format(int(value), ',')
    return format(value, ',.15g')


def format_stack(stack):
    return '[' + ', '.join(map(format_number, stack)) + ']'


class InteractiveInput:
    def __init__(self, prompt):
        self.prompt = prompt

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    enable_suspend=True,
                                    # No persistence across runs.
                                    history=None,
                                    prompt_continuation=' ' * len(self.prompt),
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the calculator.
    '''

    DEFAULT_PROMPT = '> '
    EXIT = 'exit'

    def executor(self):
        '''
        Run machine (RPN calculator), one line at a time.
        '''
        machine = Machine()
        session = Session()
        if self._interactive():
            print(BANNER)
        for line in self.args.expressions:
            if line.split('#', 1)[0].strip().lower() == self.EXIT:
                break
            try:
                machine.evaluate_line(session, line)
            # Whole line is rolled back; carry on with the next
            except KalkError as e:
                print('Error:', e, file=sys.stderr)
                if self.args.verbose and e.__cause__ is not None:
                    traceback.print_exception(type(e.__cause__),
                                              e.__cause__,
                                              e.__cause__.__traceback__,
                                              file=sys.stderr)
            print('Stack:', format_stack(session.stack), flush=True)

    def dumper(self):
        '''
        Dump all lexemes of each line, and the command each resolves to.
        '''
        machine = Machine()
        print('[groups]\t<repr(lexeme)>\t<arity>')
        for line in self.args.expressions:
            try:
                for match in machine.lexer.lex(line):
                    groups = machine.lexer.matchedgroups(match)
                    command = machine.commands.get(match.group(0))
                    print(*groups.keys(),
                          repr(match.group(0)),
                          None if command is None else command.arity,
                          sep='\t')
            except KalkError as e:
                print('Error:', e, file=sys.stderr)

    def _prompting_input(self):
        '''
        Return prompting input if either:

        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           sys.stdin.isatty() and sys.stdout.isatty():
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT)
        else:
            return sys.stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(description='RPN calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true',
                                          help='show the cause of errors')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions',
                                       help='evaluate these lines and exit')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        self.argument_parser.add_argument('-D', '--dump',
                                          action='store_const',
                                          const=self.dumper,
                                          dest='action',
                                          help='dump lexemes instead of '
                                               'running them')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=None)

    def _interactive(self):
        return isinstance(self.args.expressions, InteractiveInput)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        if self.args.expressions is None:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except KeyboardInterrupt:
            sys.exit(1)


def main():
    CLI().run()

from io import StringIO

from pytest import Item, fixture

from kalk.machine import Machine, Session


@fixture
def output():
    '''
    What display and help commands printed.
    '''
    return StringIO()


@fixture
def machine(output):
    return Machine(output=output)


@fixture
def session():
    return Session()


@fixture
def run(machine, session):
    '''
    Evaluate lines in order against one session, returning the last stack.
    '''
    def run(*lines):
        stack = None
        for line in lines:
            stack = machine.evaluate_line(session, line)
        return stack
    return run


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Enabled in setup.cfg; use with pytest -rP to see the log.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))
    print('actual', item.name + ':' + str(lineno),
          '\n'.join(str(expl).splitlines()[:-2]))

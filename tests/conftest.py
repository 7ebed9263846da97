from pytest import Item, fixture

from keycalc.lexer import Lexer
from keycalc.machine import Machine


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Excessive in most cases.

    Use with pytest -rP.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))  # no repr()!)
    print('actual', item.name + ':' + str(lineno),
          # Get rid of full-diff, -vv for full diff, etc.
          '\n'.join(str(expl).splitlines()[:-2]))


@fixture
def machine():
    return Machine()


@fixture
def press(machine):
    '''
    Type keys on the machine, as at the CLI. Return the display.
    '''
    lexer = Lexer()

    def press(keys):
        for match in lexer.lex(keys):
            if lexer.isfeedable(match):
                machine.feed(*lexer.event(match))
        return machine.display_value()
    return press

'''
Error helper tests
'''

from decimal import Decimal, Overflow, localcontext

from keycalc.util import (CalcError, ErrorKind, Operator, Paren,
                          wrap_math_errors)

from pytest import raises


@wrap_math_errors('Cannot square {0}')
def square(n):
    with localcontext() as context:
        context.Emax = 10
        context.traps[Overflow] = True
        return n * n


def test_decimal_errors_converted():
    with raises(CalcError, match='Cannot square 1E\\+6') as e:
        square(Decimal('1E+6'))
    assert e.value.kind is ErrorKind.MATH_ERROR
    assert isinstance(e.value.__cause__, Overflow)


def test_passes_through():
    assert square(Decimal(3)) == 9


def test_calc_errors_pass_through():
    @wrap_math_errors('unused', ErrorKind.INVALID_NUMBER)
    def halt():
        raise CalcError('halted', ErrorKind.SYNTAX_ERROR)
    with raises(CalcError, match='halted') as e:
        halt()
    assert e.value.kind is ErrorKind.SYNTAX_ERROR


def test_operator_is_its_key():
    assert Operator('×') is Operator.MUL
    assert Operator.DIV == '÷'


def test_symbols_format_as_keys():
    assert str(Operator.MUL) == '×'
    assert '{} {}'.format(Operator.DIV, Paren.OPEN) == '÷ ('

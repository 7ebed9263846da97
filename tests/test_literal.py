'''
Number builder tests
'''

from decimal import Decimal

from keycalc.literal import Literal


def typed(keys, max_digits=None):
    literal = Literal(max_digits)
    for key in keys:
        if key == '.':
            literal.decimal_point()
        else:
            literal.digit(key)
    return literal


def test_zero():
    literal = Literal()
    assert str(literal) == '0'
    assert literal.value == Decimal(0)
    assert not literal.pending_decimal


def test_leading_zero_replaced():
    assert str(typed('05')) == '5'
    assert str(typed('00')) == '0'
    assert str(typed('0.05')) == '0.05'


def test_pending_decimal():
    literal = typed('5.')
    assert str(literal) == '5.'
    assert literal.pending_decimal
    assert literal.value == Decimal(5)
    literal.digit('2')
    assert not literal.pending_decimal
    assert literal.value == Decimal('5.2')


def test_trailing_zeros_kept_while_typed():
    literal = typed('1.50')
    assert str(literal) == '1.50'
    assert literal.value == Decimal('1.5')


def test_second_point_ignored():
    literal = typed('1.2')
    assert not literal.decimal_point()
    assert str(literal) == '1.2'


def test_max_digits():
    literal = typed('1234', max_digits=3)
    assert str(literal) == '123'
    assert not literal.digit('9')
    assert not literal.decimal_point()
    assert str(literal) == '123'


def test_max_digits_count_fraction():
    assert str(typed('1.2345', max_digits=4)) == '1.234'


def test_default_max_digits():
    assert str(typed('1' * 20)) == '1' * 16


def test_backspace():
    literal = typed('12.3')
    shown = []
    for _ in range(4):
        literal.backspace()
        shown.append(str(literal))
    assert shown == ['12.', '12', '1', '0']


def test_backspace_zero():
    literal = Literal()
    literal.backspace()
    assert str(literal) == '0'


def test_reset():
    literal = typed('9.5')
    literal.reset()
    assert str(literal) == '0'
    assert not literal.point

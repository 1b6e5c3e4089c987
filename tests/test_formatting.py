'''
Display formatting tests
'''

from decimal import Decimal
import locale

from infixcalc.formatting import NumberFormat
from infixcalc.util import ResultOverflowError

from pytest import mark, raises


@mark.parametrize('number, expected', [
    ('1', '1'),
    ('123', '123'),
    ('1234', '1,234'),
    ('1,2345', '12,345'),
    ('1234567.891', '1,234,567.891'),
    ('-1234', '-1,234'),
    ('0.', '0.'),
])
def test_format_for_display(number, expected):
    assert NumberFormat().format_for_display(number) == expected


def test_group_every_number():
    assert NumberFormat().group('1234+56789×2.5') == '1,234+56,789×2.5'


def test_normalize():
    assert NumberFormat().normalize('1,234.5×2') == '1234.5×2'
    f = NumberFormat(',', '.')
    assert f.normalize('1.234,5×2') == '1234.5×2'


def test_trailing_number():
    f = NumberFormat()
    assert f.trailing_number('12+3,456.7').group(0) == '3,456.7'
    assert f.trailing_number('12+') is None
    assert f.trailing_number('(3)') is None


@mark.parametrize('value, expected', [
    ('11', '11'),
    ('1024.000', '1,024'),
    ('0.5', '0.5'),
    ('-0', '0'),
    ('0E-10', '0'),
    ('-2.50', '-2.5'),
    ('0.3333333333333333333333333333333333', '0.333333333333333'),
    ('0.49999999999999994', '0.5'),
    ('1E+20', '100,000,000,000,000,000,000'),
    ('123456789012345678', '123,456,789,012,346,000'),
])
def test_format_result(value, expected):
    assert NumberFormat().format_result(Decimal(value)) == expected


def test_format_result_refuses_endless_digits():
    f = NumberFormat()
    for value in ('1E+100000000000', '-1E+20000', '1E-20000'):
        with raises(ResultOverflowError):
            f.format_result(Decimal(value))


def test_format_result_long_but_bounded():
    text = NumberFormat().format_result(Decimal('1E+16325'))
    assert text.startswith('100,000,')
    assert len(text.replace(',', '')) == 16326


def test_format_result_localized():
    assert NumberFormat(',', '.').format_result(Decimal('1234.5')) == \
        '1.234,5'


def test_same_separators_rejected():
    with raises(ValueError):
        NumberFormat('.', '.')


def test_from_locale(monkeypatch):
    monkeypatch.setattr(locale, 'localeconv',
                        lambda: {'decimal_point': ',', 'thousands_sep': ''})
    f = NumberFormat.from_locale()
    assert f.decimal_separator == ','
    assert f.grouping_separator == '.'

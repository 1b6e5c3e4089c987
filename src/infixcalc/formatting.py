'''
Display formatting: decimal point, digit grouping and result rounding.

The engine only ever sees canonical formulas ("." point, no grouping);
everything the user sees goes through a NumberFormat.
'''

import decimal
import locale

import regex

from .util import ResultOverflowError


class NumberFormat:
    '''
    Locale dependent number formatting for the display.
    '''

    DEFAULT_DECIMAL_SEPARATOR = '.'
    DEFAULT_GROUPING_SEPARATOR = ','
    # Significant digits of a displayed result
    MAX_RESULT_LENGTH = 15
    # Positional digits either side of the point; 5000! has 16326.
    MAX_DISPLAY_DIGITS = 20000

    def __init__(self, decimal_separator=None, grouping_separator=None,
                 max_length=None):
        cls = type(self)
        self.decimal_separator = decimal_separator or \
            cls.DEFAULT_DECIMAL_SEPARATOR
        self.grouping_separator = grouping_separator or \
            cls.DEFAULT_GROUPING_SEPARATOR
        if self.decimal_separator == self.grouping_separator:
            raise ValueError('Decimal and grouping separators must differ')
        self.max_length = max_length or cls.MAX_RESULT_LENGTH
        self.context = decimal.Context(prec=self.max_length,
                                       rounding=decimal.ROUND_HALF_UP,
                                       Emax=decimal.MAX_EMAX,
                                       Emin=decimal.MIN_EMIN)
        # A number as displayed: grouped digits, maybe a fraction.
        self.number = regex.compile(
            r'[0-9' + regex.escape(self.grouping_separator) + r']+'
            r'(?:' + regex.escape(self.decimal_separator) + r'[0-9]*)?')
        self.trailing = regex.compile(r'(?:' + self.number.pattern + r')\Z')

    @classmethod
    def from_locale(cls):
        '''
        Create format from the process' current numeric locale.
        '''
        conventions = locale.localeconv()
        decimal_separator = conventions['decimal_point']
        grouping_separator = conventions['thousands_sep']
        if not grouping_separator or grouping_separator == decimal_separator:
            grouping_separator = '.' if decimal_separator == ',' else ','
        return cls(decimal_separator, grouping_separator)

    def trailing_number(self, formula):
        '''
        Return the match of the number ending formula, or None.
        '''
        return self.trailing.search(formula)

    def remove_grouping(self, text):
        return text.replace(self.grouping_separator, '')

    def normalize(self, formula):
        '''
        Return formula as the lexer wants it: no grouping, "." point.
        '''
        return self.remove_grouping(formula).replace(self.decimal_separator,
                                                     '.')

    def localize(self, canonical):
        '''
        Inverse of normalize, for a single ungrouped canonical number.
        '''
        return canonical.replace('.', self.decimal_separator)

    def format_for_display(self, number):
        '''
        Regroup the integral digits of one displayed number.
        '''
        sign = '-' if number.startswith('-') else ''
        number = self.remove_grouping(number[len(sign):])
        integer, point, fraction = number.partition(self.decimal_separator)
        if len(integer) > 3:
            head = len(integer) % 3 or 3
            integer = self.grouping_separator.join(
                [integer[:head]] +
                [integer[i:i + 3] for i in range(head, len(integer), 3)])
        return sign + integer + point + fraction

    def group(self, formula):
        '''
        Regroup every number in a displayed formula.
        '''
        return self.number.sub(lambda m: self.format_for_display(m.group(0)),
                               formula)

    def format_result(self, value):
        '''
        Format a Decimal result for display, and as the next formula.

        Rounds to max_length significant digits, never uses an exponent.
        Raises ResultOverflowError for values too long to write out.
        '''
        if value.is_zero():
            return '0'
        value = self.context.plus(value).normalize(self.context)
        if value.is_zero():
            return '0'
        if abs(value.adjusted()) >= type(self).MAX_DISPLAY_DIGITS:
            raise ResultOverflowError(value)
        return self.format_for_display(self.localize('{:f}'.format(value)))

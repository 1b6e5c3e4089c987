from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional
import logging
import time

from .formatting import NumberFormat
from .lexer import Lexer
from .pipeline import EvaluationResult, evaluate
from .tokens import TokenKind
from .util import CalcError, ErrorKind, UnknownTokenError


logger = logging.getLogger(__name__)


class LastKey(Enum):
    NONE = ''
    DIGIT = 'digit'
    OPERATOR = 'operator'
    DECIMAL = 'decimal'
    EQUALS = 'equals'
    CLEAR = 'clear'


class Operation(Enum):
    PLUS = 'plus'
    MINUS = 'minus'
    MULTIPLY = 'multiply'
    DIVIDE = 'divide'
    POWER = 'power'
    ROOT = 'root'
    LOG = 'log'
    LN = 'ln'
    OPEN_BRACKET = 'open_bracket'
    CLOSE_BRACKET = 'close_bracket'
    SIN = 'sin'
    COS = 'cos'
    TAN = 'tan'
    ARCSIN = 'arcsin'
    ARCCOS = 'arccos'
    ARCTAN = 'arctan'
    FACTORIAL = 'factorial'
    PI = 'pi'
    E = 'e'


# What each operation key appends to the displayed formula.
SIGNS = {
    Operation.PLUS: '+',
    Operation.MINUS: '-',
    Operation.MULTIPLY: '×',
    Operation.DIVIDE: '÷',
    Operation.POWER: '^',
    Operation.ROOT: '√',
    Operation.LOG: 'log(',
    Operation.LN: 'ln(',
    Operation.OPEN_BRACKET: '(',
    Operation.CLOSE_BRACKET: ')',
    Operation.SIN: 'sin(',
    Operation.COS: 'cos(',
    Operation.TAN: 'tan(',
    Operation.ARCSIN: 'sin⁻¹(',
    Operation.ARCCOS: 'cos⁻¹(',
    Operation.ARCTAN: 'tan⁻¹(',
    Operation.FACTORIAL: '!',
    Operation.PI: 'π',
    Operation.E: 'e',
}

# last_operation after a digit follows equals
EQUALS = 'equals'


@dataclass
class EditorState:
    '''
    Everything a calculator session knows about the formula being typed.

    formula is what the user sees, grouping and all, and is the only truth
    about what was typed. error is the kind of the last failed evaluation,
    until the next edit; it isn't persisted.
    '''

    formula: str = ''
    result: str = '0'
    previous_formula: str = ''
    last_key: LastKey = LastKey.NONE
    last_operation: str = ''
    base_value: Decimal = Decimal(0)
    # Reserved; persisted, never read.
    second_value: Decimal = Decimal(0)
    degrees: bool = False
    error: Optional[ErrorKind] = field(default=None, compare=False)


class FormulaEditor:
    '''
    Key press driven formula editor.

    Appends and removes text on the displayed formula, and evaluates it on
    equals. Reports through optional callbacks:

    - on_result(text): live result display
    - on_formula(text): previous formula echo
    - on_error(message, severity): failures, severity being a logging level
    - on_history(formula, result, timestamp_millis): successful equals
    '''

    def __init__(self, state=None, number_format=None, on_result=None,
                 on_formula=None, on_error=None, on_history=None,
                 clock=time.time):
        self.state = state if state is not None else EditorState()
        self.format = number_format or NumberFormat()
        self.on_result = on_result
        self.on_formula = on_formula
        self.on_error = on_error
        self.on_history = on_history
        self.clock = clock
        self._lexer = Lexer()
        self._show_result(self.state.result)
        self._show_formula(self.state.previous_formula)

    @property
    def degrees(self):
        return self.state.degrees

    @degrees.setter
    def degrees(self, degrees):
        self.state.degrees = bool(degrees)

    def _show_result(self, text):
        self.state.result = text
        if self.on_result is not None:
            self.on_result(text)

    def _show_formula(self, text):
        self.state.previous_formula = text
        if self.on_formula is not None:
            self.on_formula(text)

    def _notify(self, message, severity=logging.ERROR):
        if self.on_error is not None:
            self.on_error(message, severity)
        else:
            logger.log(severity, message)

    def _segment(self):
        '''
        Return the number being typed at the end of the formula, if any.
        '''
        match = self.format.trailing_number(self.state.formula)
        return '' if match is None else match.group(0)

    def _edited(self, formula):
        self.state.formula = self.format.group(formula)
        self.state.error = None
        self._show_result(self.state.formula)

    def digit(self, digit):
        '''
        Type a digit, 0 to 9.
        '''
        digit = str(digit)
        if len(digit) != 1 or not '0' <= digit <= '9':
            raise ValueError('Not a digit: {!r}'.format(digit))
        state = self.state
        if state.formula == 'NaN':
            state.formula = ''
        if state.last_key is LastKey.EQUALS:
            state.last_operation = EQUALS
        state.last_key = LastKey.DIGIT

        formula = state.formula
        segment = self._segment()
        if segment == '0':
            # Never 00; 05 is just 5.
            if digit != '0':
                formula = formula[:-1] + digit
        else:
            formula += digit
        self._edited(formula)

    def decimal_point(self):
        '''
        Type the decimal point, at most once per number.
        '''
        state = self.state
        segment = self._segment()
        formula = state.formula
        if self.format.decimal_separator not in segment:
            if not segment:
                formula += '0'
            formula += self.format.decimal_separator
        state.last_key = LastKey.DECIMAL
        self._edited(formula)

    def operation(self, operation):
        '''
        Type an operator, function, bracket or constant.
        '''
        state = self.state
        formula = state.formula
        if formula == '0':
            formula = ''
        state.last_key = LastKey.OPERATOR
        state.last_operation = operation.value
        self._edited(formula + SIGNS[operation])

    def equals(self):
        '''
        Evaluate the formula, and continue from its result if it has one.

        Returns the EvaluationResult. On failure the formula stays as it was.
        '''
        state = self.state
        result = evaluate(self.format.normalize(state.formula),
                          degrees=state.degrees)
        if result.ok:
            try:
                text = self.format.format_result(result.value)
            except CalcError as e:
                result = EvaluationResult(None, e)
        if not result.ok:
            logger.debug('%r: %s', state.formula, result.error)
            state.error = result.kind
            self._notify(result.error.message)
            return result

        formula = state.formula
        state.error = None
        state.base_value = result.value
        self._show_result(text)
        if self.on_history is not None:
            self.on_history(formula, text, int(self.clock() * 1000))
        self._show_formula(formula)
        state.formula = text
        state.last_key = LastKey.EQUALS
        return result

    def clear(self):
        '''
        Backspace: one digit of a number, or the whole last lexeme.
        '''
        state = self.state
        formula = state.formula
        try:
            raw = self._lexer.raw(self.format.normalize(formula))
        except UnknownTokenError:
            raw = None
        if not raw or raw[-1].kind is TokenKind.NUMBER:
            formula = formula[:-1]
        else:
            formula = formula[:-len(raw[-1].text)]
        if formula in ('', '0'):
            formula = '0'
            state.last_key = LastKey.CLEAR
        self._edited(formula)

    def reset(self):
        '''
        Forget everything but the angle mode.
        '''
        self.state = EditorState(degrees=self.state.degrees)
        self._show_result('0')
        self._show_formula('')

    def add_number(self, number):
        '''
        Start over from a displayed number, e.g. one from history.
        '''
        self.reset()
        self._edited(number)

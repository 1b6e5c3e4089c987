'''
Editor state to and from a flat record, for surviving restarts.
'''

from decimal import Decimal
import json
import logging

from .editor import EditorState, LastKey
from .util import StateError


logger = logging.getLogger(__name__)

RES = 'res'
PREVIOUS_CALCULATION = 'previous_calculation'
LAST_KEY = 'last_key'
LAST_OPERATION = 'last_operation'
BASE_VALUE = 'base_value'
SECOND_VALUE = 'second_value'
INPUT_DISPLAYED_FORMULA = 'input_displayed_formula'
USE_DEG = 'use_deg'


def to_record(state):
    '''
    Return state as a flat dict of strings (and the angle mode flag).
    '''
    return {
        RES: state.result,
        PREVIOUS_CALCULATION: state.previous_formula,
        LAST_KEY: state.last_key.value,
        LAST_OPERATION: state.last_operation,
        BASE_VALUE: str(state.base_value),
        SECOND_VALUE: str(state.second_value),
        INPUT_DISPLAYED_FORMULA: state.formula,
        USE_DEG: state.degrees,
    }


def _decimal(record, key):
    try:
        value = Decimal(str(record[key]))
    except (KeyError, ArithmeticError, ValueError):
        logger.warning('Bad %s in saved state, using 0', key)
        return Decimal(0)
    return value if value.is_finite() else Decimal(0)


def _string(record, key, default):
    value = record.get(key, default)
    return value if isinstance(value, str) else default


def _last_key(record):
    try:
        return LastKey(record.get(LAST_KEY, ''))
    except (TypeError, ValueError):
        logger.warning('Unknown last key %r in saved state',
                       record.get(LAST_KEY))
        return LastKey.NONE


def from_record(record):
    '''
    Return the EditorState a record describes.

    Missing or malformed fields fall back to their zero value; this never
    raises on a dict.
    '''
    zero = EditorState()
    return EditorState(
        formula=_string(record, INPUT_DISPLAYED_FORMULA, zero.formula),
        result=_string(record, RES, zero.result),
        previous_formula=_string(record, PREVIOUS_CALCULATION,
                                 zero.previous_formula),
        last_key=_last_key(record),
        last_operation=_string(record, LAST_OPERATION, zero.last_operation),
        base_value=_decimal(record, BASE_VALUE),
        second_value=_decimal(record, SECOND_VALUE),
        degrees=record.get(USE_DEG) is True,
    )


def dumps(state):
    return json.dumps(to_record(state), ensure_ascii=False)


def loads(text):
    '''
    Parse JSON state text. Raises StateError unless it is a JSON object.
    '''
    try:
        record = json.loads(text)
    except ValueError as e:
        raise StateError(e) from e
    if not isinstance(record, dict):
        raise StateError(type(record).__name__)
    return from_record(record)

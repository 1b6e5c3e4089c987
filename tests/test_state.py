'''
Editor state serialization tests
'''

from decimal import Decimal

from infixcalc import state
from infixcalc.editor import EditorState, LastKey, Operation
from infixcalc.util import StateError

from pytest import mark, raises


def sample():
    return EditorState(formula='1,234+5',
                       result='1,234+5',
                       previous_formula='2×3',
                       last_key=LastKey.DIGIT,
                       last_operation='plus',
                       base_value=Decimal('6'),
                       degrees=True)


def test_record_fields():
    record = state.to_record(sample())
    assert record == {
        'res': '1,234+5',
        'previous_calculation': '2×3',
        'last_key': 'digit',
        'last_operation': 'plus',
        'base_value': '6',
        'second_value': '0',
        'input_displayed_formula': '1,234+5',
        'use_deg': True,
    }


def test_round_trip():
    assert state.from_record(state.to_record(sample())) == sample()
    assert state.loads(state.dumps(sample())) == sample()


def test_zero_value_round_trip():
    assert state.loads(state.dumps(EditorState())) == EditorState()


@mark.parametrize('bad', ['', 'twelve', None, [], '1.2.3'])
def test_malformed_numbers_become_zero(bad):
    record = state.to_record(sample())
    record['base_value'] = bad
    record['second_value'] = bad
    restored = state.from_record(record)
    assert restored.base_value == 0
    assert restored.second_value == 0
    assert restored.formula == '1,234+5'


def test_non_finite_numbers_become_zero():
    record = state.to_record(sample())
    record['base_value'] = 'NaN'
    assert state.from_record(record).base_value == 0


def test_missing_fields():
    assert state.from_record({}) == EditorState()
    assert state.from_record({'res': 42}).result == '0'


def test_unknown_last_key():
    record = state.to_record(sample())
    record['last_key'] = 'hyperspace'
    assert state.from_record(record).last_key is LastKey.NONE


@mark.parametrize('text', ['', '{', '[1, 2]', '"res"'])
def test_unreadable_text(text):
    with raises(StateError):
        state.loads(text)


def test_resume_editing(recorder):
    saved = state.dumps(sample())
    editor = recorder.editor(state=state.loads(saved))
    assert recorder.results == ['1,234+5']
    assert recorder.formulas == ['2×3']
    editor.operation(Operation.MULTIPLY)
    editor.operation(Operation.SIN)
    editor.digit(9)
    editor.digit(0)
    editor.operation(Operation.CLOSE_BRACKET)
    editor.equals()
    assert editor.state.result == '1,239'

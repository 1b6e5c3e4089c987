from pytest import Item, fixture

from infixcalc.editor import FormulaEditor


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
          '\n'.join(str(expl).splitlines()[:-2]))


class Recorder:
    '''
    Collects everything an editor reports.
    '''

    NOW = 1700000000.5

    def __init__(self):
        self.results = []
        self.formulas = []
        self.errors = []
        self.history = []

    def editor(self, **kwargs):
        return FormulaEditor(on_result=self.results.append,
                             on_formula=self.formulas.append,
                             on_error=lambda *error: self.errors.append(error),
                             on_history=lambda *entry:
                                 self.history.append(entry),
                             clock=lambda: self.NOW,
                             **kwargs)


@fixture
def recorder():
    return Recorder()

'''
Command line interface tests
'''

from infixcalc.cli import CLI


def run(capsys, *args):
    CLI().run(args=list(args))
    return capsys.readouterr()


def test_expression(capsys):
    out, err = run(capsys, '-e', '3+4*2=')
    assert out == '11\n'
    assert err == ''


def test_keys_with_spaces_and_names(capsys):
    out, _ = run(capsys, '-e', '2 x ( 3 + 4 ) =', 'reset sqrt 16 =')
    assert out.splitlines() == ['14', '4']


def test_live_formula_printed(capsys):
    out, _ = run(capsys, '-e', '1234.5/')
    assert out == '1,234.5÷\n'


def test_degrees(capsys):
    out, _ = run(capsys, '-d', '-e', 'sin90)=')
    assert out == '1\n'
    out, _ = run(capsys, '-e', 'deg sin 90 ) =', 'reset rad sin 90 ) =')
    assert out.splitlines() == ['1', '0.893996663600558']


def test_error_to_stderr(capsys):
    out, err = run(capsys, '-e', '1/0=')
    assert out == '1÷0\n'
    assert err.startswith('Division by zero')


def test_unknown_key(capsys):
    out, err = run(capsys, '-e', '3%')
    assert out == '3\n'
    assert 'Unknown token [%]' in err


def test_backspace_and_reset(capsys):
    out, _ = run(capsys, '-e', '12+<', '5 reset', '7')
    assert out.splitlines() == ['12', '0', '7']


def test_history(capsys):
    out, _ = run(capsys, '-e', '1+1=', 'history')
    lines = out.splitlines()
    assert lines[0] == '2'
    assert lines[1].endswith('1+1\t=\t2')
    assert lines[2] == '2'


def test_state_file(capsys, tmp_path):
    saved = tmp_path / 'state.json'
    run(capsys, '-s', str(saved), '-e', '12+')
    assert saved.exists()
    out, _ = run(capsys, '-s', str(saved), '-e', '3=')
    assert out == '15\n'


def test_corrupt_state_file(capsys, tmp_path):
    saved = tmp_path / 'state.json'
    saved.write_text('not json', encoding='utf-8')
    out, _ = run(capsys, '-s', str(saved), '-e', '2=')
    assert out == '2\n'


def test_undecodable_state_file(capsys, tmp_path):
    saved = tmp_path / 'state.json'
    saved.write_bytes(b'\xff\xfe\x00garbage')
    out, _ = run(capsys, '-s', str(saved), '-e', '2=')
    assert out == '2\n'


def test_dump(capsys):
    out, _ = run(capsys, '-D', '-e', '2(3+4)', '(1')
    lines = out.splitlines()
    assert lines[1] == '2 × ( 3 + 4 )\t2 3 4 + ×'
    assert len(lines) == 2


def test_raw_grammar(capsys):
    out, _ = run(capsys, '-G', '-e')
    assert '(?<number>' in out

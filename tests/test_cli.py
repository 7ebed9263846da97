'''
Command line tests
'''

from keycalc.cli import CLI, InteractiveInput
from keycalc.machine import Machine

from pytest import raises


def run(*args):
    cli = CLI()
    cli.run(args=list(args))
    return cli


def test_expressions(capsys):
    run('-e', '2+3×4=', '(1/3)')
    out, err = capsys.readouterr()
    assert out.splitlines() == ['14', '0.33333333']


def test_lines_share_machine(capsys):
    run('-e', '2+', '3=')
    out, _ = capsys.readouterr()
    assert out.splitlines() == ['2', '5']


def test_error_display(capsys):
    run('-e', '5/0=', '+', '7')
    out, _ = capsys.readouterr()
    assert out.splitlines() == ['Error', 'Error', '7']


def test_bad_key_abandons_line(capsys):
    run('-e', '2+q3', '4=')
    out, err = capsys.readouterr()
    assert out.splitlines() == ['2', '6']
    assert "Couldn't lex q3" in err


def test_scale(capsys):
    run('--scale', '2', '-e', '1/8=')
    out, _ = capsys.readouterr()
    assert out.splitlines() == ['0.13']


def test_max_digits(capsys):
    run('--max-digits', '3', '-e', '12345')
    out, _ = capsys.readouterr()
    assert out.splitlines() == ['123']


def test_bad_scale(capsys):
    with raises(SystemExit):
        run('--scale', '-1', '-e', '1')
    _, err = capsys.readouterr()
    assert 'Bad scale -1' in err


def test_dump(capsys):
    run('-D', '-e', '1 +')
    out, _ = capsys.readouterr()
    lines = out.splitlines()
    assert lines[1:] == ["digit\t'1'\t('digit', '1')",
                         "space\t' '\tNone",
                         "operator\t'+'\t('operator', '+')"]


def test_raw_grammar(capsys):
    run('-G', '-e')
    out, _ = capsys.readouterr()
    assert '(?<digit>' in out


def test_interactive_input_shows_machine():
    machine = Machine()
    machine.input_digit('2')
    machine.input_operator('+')
    machine.input_digit('3')
    interactive = InteractiveInput(prompt='> ', machine=machine)
    assert interactive._display() == '3'
    assert interactive._preview() == '2 + 3'
    assert InteractiveInput(prompt='> ')._display() == ''

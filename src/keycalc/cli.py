from os import isatty
from sys import stdin, stdout, stderr, exit
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import logging

from prompt_toolkit import PromptSession

from .util import CalcError
from .machine import Machine
from .lexer import Lexer


class InteractiveInput:
    '''
    Prompting line input, showing the machine's display on the right and the
    pending expression in the bottom toolbar.
    '''
    def __init__(self, prompt, machine=None):
        self.prompt = prompt
        self.machine = machine

    def _display(self):
        return self.machine.display_value() if self.machine else ''

    def _preview(self):
        return self.machine.expression_preview() if self.machine else ''

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    enable_suspend=True,
                                    history=None,
                                    rprompt=self._display,
                                    bottom_toolbar=self._preview,
                                    prompt_continuation=' ' * len(self.prompt),
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the calculator.
    '''

    DEFAULT_PROMPT = '> '
    LOG_FORMAT = '%(name)s: %(message)s'

    def dumper(self):
        '''
        Dump all keys and the events they feed.
        '''
        lexer = Lexer()
        print('<group>\t<repr(key)>\t<event>')
        for line in self.args.expressions:
            for match in lexer.lex(line):
                groups = lexer.matchedgroups(match)
                print(*groups.keys(),
                      repr(match.group(0)),
                      lexer.event(match) if lexer.isfeedable(match) else None,
                      sep='\t')

    def executor(self):
        '''
        Run machine (calculator), printing its display after every line.
        '''
        machine = Machine(max_digits=self.args.max_digits,
                          scale=self.args.scale)
        lexer = Lexer()
        if self._interactive():
            self.args.expressions.machine = machine
        for line in self.args.expressions:
            try:
                for match in lexer.lex(line):
                    if lexer.isfeedable(match):
                        machine.feed(*lexer.event(match))
            # Abort entire rest of line, makes sense anyway
            except CalcError as e:
                print(e.args[0], file=stderr)
            print(machine.display_value())

    def raw_grammar(self):
        '''
        Print current internally defined key grammar.
        '''
        lexer = Lexer()
        print(lexer.LEXEME)

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT)
        else:
            return stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(
            description='Infix calculator, fed one key at a time')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true',
                                          help='log every machine step')
        self.argument_parser.add_argument('--max-digits', type=int,
                                          default=Machine.DEFAULT_MAX_DIGITS)
        self.argument_parser.add_argument('--scale', type=int,
                                          default=Machine.DEFAULT_SCALE)
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)

    def _interactive(self):
        return isinstance(self.args.expressions, InteractiveInput)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(level=logging.DEBUG if self.args.verbose
                            else logging.WARNING,
                            format=self.LOG_FORMAT,
                            stream=stderr)
        if self.args.expressions is stdin:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except ValueError as e:
            self.argument_parser.error(str(e))
        except KeyboardInterrupt:
            exit(1)

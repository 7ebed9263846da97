from functools import reduce
import operator

import regex

from .util import CalcError, Operator


class Lexer:
    '''
    Lexer for keypad keys typed at a terminal.

    Every key is a lexeme of its own, and an event for the machine: there is
    no expression grammar here, "12+3" is five key presses. For consistency
    with Machine, needs to be instantiated, despite holding no internal state.
    '''
    DIGIT = r'[0-9]'
    # Comma for keyboards whose keypad has one
    POINT = r'[.,]'
    OPERATOR = r'(?:' + r'|'.join(map(regex.escape,
                                      [op.value for op in Operator] +
                                      ['*', '/', 'x'])) + r')'
    PAREN = r'[()]'
    PERCENT = r'%'
    EQUALS = r'='
    BACKSPACE = r'[<b]'
    CLEAR = r'[cC]'
    SPACE = r'\s+'

    # All possible lexemes, named by the event they feed.
    LEXEME = r'(?<digit>' + DIGIT + r')|' \
             r'(?<point>' + POINT + r')|' \
             r'(?<operator>' + OPERATOR + r')|' \
             r'(?<paren>' + PAREN + r')|' \
             r'(?<percent>' + PERCENT + r')|' \
             r'(?<equals>' + EQUALS + r')|' \
             r'(?<backspace>' + BACKSPACE + r')|' \
             r'(?<clear>' + CLEAR + r')|' \
             r'(?<space>' + SPACE + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.VERSION1,
                    regex.DOTALL},
                   0)

    # Events whose key is also their argument.
    WITH_ARGUMENT = {'digit', 'operator', 'paren'}

    def lex(self, line):
        '''
        Take a line and return all lexemes.

        Yields the lexemes up to the first bad key, then raises.
        '''
        while line:
            match = regex.match(type(self).LEXEME, line,
                                flags=type(self).FLAGS)
            if match is None:
                break
            yield match
            line = line[len(match.group(0)):]
        if line:
            raise CalcError("Couldn't lex {0}".format(line.strip()))

    def isfeedable(self, match):
        '''
        Return True if lexeme can be fed to machine.
        '''
        return 'space' not in self.matchedgroups(match).keys()

    def matchedgroups(self, match):
        '''
        Return the lexeme's group name and key, as a dict.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value}

    def event(self, match):
        '''
        Return (event, *args) for Machine.feed.
        '''
        (name, key), = self.matchedgroups(match).items()
        if name in type(self).WITH_ARGUMENT:
            return name, key
        return name,

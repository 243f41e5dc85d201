# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'''
A packrat parsing expression grammar (PEG) library.

A grammar is built from ordinary Python objects: a dict of named rules, each a graph of symbols.
Rules refer to one another by name, so they can be mutually recursive.
Parsing is recursive descent with ordered choice; the result of every named rule application is memoized by
(rule, offset), which bounds the total work to linear in the input length for a fixed grammar.
Failures are values rather than exceptions; when every alternative fails, the failure that got farthest is reported.

Symbol types:
* Lit: an exact string.
* Pattern: a regular expression, producing a zero-copy Span.
* Ident: an identifier, using the grammar's identifier pattern and keyword set.
* Seq: a sequence of elements; elements wrapped in Bind are passed by name to the sequence action.
* OrderedChoice: the first alternative that matches.
* ZeroOrMore: a repeated element; never fails.
* Opt: an optional element; never fails.
* Map: apply a function to the value of a symbol.
* Ref: a memoized reference to a named rule. Rule name strings used as sub-symbols become Refs.

Example:

  grammar = Grammar(dict(
    Hi=Lit('Hi', val=1),
    Ho=Lit('Ho', val=2),
    HiOrHo=OrderedChoice('Hi', 'Ho'),
    Rep=ZeroOrMore('HiOrHo')))

  grammar.parse('Rep', 'Hi Ho Ho') == [1, 2, 2]

Left recursion is not supported.
'''

from .__about__ import __version__
from .diagnostics import DefinitionError, Diagnostics, ExcessInput, farthest, LeftRecursionError, ParseError
from .grammar import Grammar, ParseCtx
from .memo import MemoCache, MemoStats
from .result import Failure, Result, Success
from .skeleton import skeleton
from .source import Cursor, Source, Span
from .symbols import Bind, Ident, Kind, Lit, Map, Opt, OrderedChoice, Pattern, Ref, Seq, Symbol, ZeroOrMore


__all__ = [
  'Bind',
  'Cursor',
  'DefinitionError',
  'Diagnostics',
  'ExcessInput',
  'Failure',
  'Grammar',
  'Ident',
  'Kind',
  'LeftRecursionError',
  'Lit',
  'Map',
  'MemoCache',
  'MemoStats',
  'Opt',
  'OrderedChoice',
  'ParseCtx',
  'ParseError',
  'Pattern',
  'Ref',
  'Result',
  'Seq',
  'Source',
  'Span',
  'Success',
  'Symbol',
  'ZeroOrMore',
  '__version__',
  'farthest',
  'skeleton',
]

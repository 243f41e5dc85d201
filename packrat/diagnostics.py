# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'''
Failure descriptions and the exceptions raised at the boundary of the engine.

Inside the engine a failed match is a value, not an exception: every symbol returns a `Failure` holding a `Diagnostics`.
Exceptions are only raised to callers that ask for a value (`Grammar.parse`, `Failure.unwrap`),
for malformed grammars, and for detected left recursion.
'''

from dataclasses import dataclass
from typing import Any, NoReturn

from .source import Source


@dataclass(frozen=True)
class Diagnostics:
  '''
  Parsing failed at `offset` because `expected` was expected there.
  `offset` is a UTF-8 byte offset into the source text; see `Source.byte_offset`.
  '''
  expected:str
  offset:int

  def __str__(self) -> str:
    return f'expected `{self.expected}` at byte offset {self.offset}'


def farthest(a:Diagnostics|None, b:Diagnostics|None) -> Diagnostics|None:
  '''
  Merge the diagnostics of two failed alternatives: the failure at the larger offset wins,
  because that branch consumed more input before failing.
  On a tie `b`, the more recently produced failure, wins. `None` is the identity.
  '''
  if a is None: return b
  if b is None: return a
  return a if a.offset > b.offset else b


class ParseError(Exception):
  error_prefix = 'parse'

  def __init__(self, diag:Diagnostics, source:Source|None=None):
    self.diag = diag
    self.source = source
    super().__init__(str(diag))

  @property
  def offset(self) -> int: return self.diag.offset

  def diagnostic(self) -> str:
    'Render the error with its source line, or as a single line if the source is unknown.'
    msg = f'{self.error_prefix} error: {self.diag}'
    if self.source is None: return msg + '\n'
    return self.source.diagnostic(self.source.pos_for_byte_offset(self.diag.offset), msg)

  def fail(self) -> NoReturn:
    exit(self.diagnostic())


class ExcessInput(ParseError):
  'Raised by Grammar when the top rule succeeds but does not consume the whole text.'
  error_prefix = 'excess input'


class DefinitionError(Exception):
  'Raised when a grammar is malformed: unknown rule references, invalid names, or invalid symbols.'

  def __init__(self, *msgs:Any):
    super().__init__(''.join(str(msg) for msg in msgs))


class LeftRecursionError(Exception):
  '''
  Raised when a memoizing grammar re-enters a rule at the offset where that rule is already being parsed.
  Left recursion is not supported; without memoization it ends in RecursionError instead.
  '''

  def __init__(self, rule:str, offset:int):
    self.rule = rule
    self.offset = offset
    super().__init__(f'left recursion in rule {rule!r} at offset {offset}')

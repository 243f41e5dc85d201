# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'''
Grammar symbols: the primitives and combinators that a grammar is built from.

Every symbol implements `parse(ctx, cursor) -> Result`.
A successful result's cursor is never before the input cursor.
Symbols do not raise on a failed match; they return a `Failure`, which enclosing choices, optionals and repetitions
are free to absorb.

Sub-symbols can be given either as Symbol objects or as rule name strings.
Name strings are linked to `Ref` symbols when a `Grammar` is constructed, which is how rules refer to each other
(and to themselves) without the whole graph existing up front.
'''

import re
from enum import Enum
from typing import Any, Callable, Iterable, TYPE_CHECKING, Union

from .diagnostics import DefinitionError, Diagnostics, farthest, LeftRecursionError
from .memo import IN_PROGRESS
from .result import Failure, Result, Success
from .source import Cursor, Source, Span

if TYPE_CHECKING:
  from .grammar import ParseCtx


RuleName = str
SymbolRef = Union['Symbol',RuleName]

Action = Callable[..., Any]

valid_name_re = re.compile(r'[A-Za-z_][A-Za-z_0-9]*')


class Kind(Enum):
  'Classification of a symbol, for introspection only.'
  text = 'text' # Literal text and other primitives that match raw text.
  option = 'option'
  repeat = 'repeat'
  elem = 'elem' # A bound element of a sequence.
  group = 'group' # Sequences, choices and action mappings.
  symbol = 'symbol' # A reference to a named rule.


_absent:Any = object()


class Symbol:
  '''
  A grammar node. A complete grammar is a graph of symbols, which may be cyclic through named references.
  Symbols hash and compare by identity; the memo cache relies on this.
  '''

  kind:Kind
  type_desc:str # Type description for diagnostic messages.
  name:RuleName = '' # Set by Grammar for symbols that are named rules.
  sub_refs:tuple[SymbolRef,...] = () # The symbols or rule names as constructed.
  subs:tuple['Symbol',...] = () # Sub-symbols; rule names are replaced by linked `Ref` symbols.


  def __init__(self, *args:Any, **kwargs:Any): raise Exception(f'abstract base class: {type(self).__name__}')


  def __str__(self) -> str:
    if self.name: return f'{self.name!r} {self.type_desc}'
    return self.pretty()


  def __repr__(self) -> str:
    name = f'name={self.name!r}, ' if self.name else ''
    return f'{type(self).__name__}({name}{self.pretty()})'


  def _set_sub_refs(self, refs:Iterable[SymbolRef]) -> None:
    self.sub_refs = tuple(refs)
    for ref in self.sub_refs:
      if not isinstance(ref, (Symbol, str)):
        raise DefinitionError(f'{type(self).__name__} sub-symbol must be a Symbol or a rule name: {ref!r}')
      if isinstance(ref, Bind) and not isinstance(self, Seq):
        raise DefinitionError(f'{type(self).__name__} cannot contain a binding; Bind must be an element of a Seq: {ref!r}')
    if all(isinstance(ref, Symbol) for ref in self.sub_refs):
      self.subs = self.sub_refs # type: ignore[assignment]
    #^ Otherwise the subs are filled in when a Grammar links the rule names.


  def parse(self, ctx:'ParseCtx', cursor:Cursor) -> Result:
    'Match this symbol at `cursor`. Implemented by subclasses.'
    raise NotImplementedError(self)


  def parse_prefix(self, ctx:'ParseCtx', text:str|Source, name:str='') -> Result:
    'Start a new session in `ctx` for `text` and parse this symbol from offset zero.'
    return self.parse(ctx, ctx.begin(text, name=name))


  def pretty(self) -> str:
    'A human readable description of the structure of this symbol.'
    raise NotImplementedError(self)



def ref_desc(ref:SymbolRef) -> str:
  'Describe a sub-symbol: named rules by name, anonymous symbols by structure.'
  if isinstance(ref, str): return ref
  return ref.name or ref.pretty()


def _quote(text:str) -> str:
  return '"' + text.replace('\\', '\\\\').replace('"', '\\"') + '"'


def _fn_desc(fn:Callable) -> str:
  return getattr(fn, '__qualname__', None) or repr(fn)


def validate_name(name:Any) -> str:
  if not isinstance(name, str):
    raise DefinitionError(f'name is not a string: {name!r}')
  if not valid_name_re.fullmatch(name):
    raise DefinitionError(f'invalid name: {name!r}')
  return name



class Lit(Symbol):
  '''
  Match an exact string, after skipping the grammar's insignificant leading text (whitespace by default).
  The result value is `val` if provided, otherwise the literal text.
  The resulting cursor is just past the literal; trailing whitespace is left for the next match.
  '''
  kind = Kind.text
  type_desc = 'literal'

  def __init__(self, text:str, val:Any=_absent):
    if not isinstance(text, str): raise ValueError(f'Lit text must be a str: {text!r}')
    if not text: raise ValueError('Lit text must not be empty')
    self.text = text
    self.val = text if val is _absent else val

  def parse(self, ctx:'ParseCtx', cursor:Cursor) -> Result:
    pos = ctx.skip(cursor)
    if cursor.text.startswith(self.text, pos):
      return Success(cursor.at(pos + len(self.text)), self.val)
    return ctx.failure(self.text, pos)

  def pretty(self) -> str: return _quote(self.text)



class Pattern(Symbol):
  '''
  Match a regular expression after skipping insignificant text.
  The result is a `Span` of the match, or `val(span)` if `val` is provided.
  On failure, `expected` (defaulting to the pattern source) describes what was expected.
  '''
  kind = Kind.text
  type_desc = 'pattern'

  def __init__(self, pattern:str|re.Pattern[str], expected:str='', val:Callable[[Span],Any]|None=None):
    self.regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    self.expected = expected or self.regex.pattern
    self.val = val

  def parse(self, ctx:'ParseCtx', cursor:Cursor) -> Result:
    pos = ctx.skip(cursor)
    m = self.regex.match(cursor.text, pos)
    if m is None: return ctx.failure(self.expected, pos)
    end = m.end()
    span = Span(cursor.text, slice(pos, end))
    return Success(cursor.at(end), span if self.val is None else self.val(span))

  def pretty(self) -> str: return f'/{self.regex.pattern}/'



class Ident(Symbol):
  '''
  Match an identifier using the grammar's identifier pattern, rejecting the grammar's keywords.
  The result is a `Span`, or `val(span)` if `val` is provided.
  '''
  kind = Kind.text
  type_desc = 'identifier'

  def __init__(self, val:Callable[[Span],Any]|None=None):
    self.val = val

  def parse(self, ctx:'ParseCtx', cursor:Cursor) -> Result:
    grammar = ctx.grammar
    pos = ctx.skip(cursor)
    m = grammar.ident_re.match(cursor.text, pos)
    if m is not None and m.end() > pos:
      span = Span(cursor.text, slice(pos, m.end()))
      if str(span) not in grammar.keywords:
        return Success(cursor.at(span.end), span if self.val is None else self.val(span))
    return ctx.failure('identifier', pos)

  def pretty(self) -> str: return 'ID'



class Bind(Symbol):
  'Mark an element of a `Seq` whose value is passed to the sequence action as the keyword argument `bind_name`.'
  kind = Kind.elem
  type_desc = 'binding'

  def __init__(self, bind_name:str, body:SymbolRef):
    if not bind_name.isidentifier(): raise DefinitionError(f'invalid binding name: {bind_name!r}')
    self.bind_name = bind_name
    self._set_sub_refs((body,))

  def parse(self, ctx:'ParseCtx', cursor:Cursor) -> Result:
    return self.subs[0].parse(ctx, cursor)

  def pretty(self) -> str: return f'<{self.bind_name}:{ref_desc(self.sub_refs[0])}>'



class Seq(Symbol):
  '''
  Match elements in order, threading the cursor through them.
  The first failing element fails the whole sequence with that element's diagnostics.
  On success, `action` is called with the bound element values as keyword arguments.
  Without an action the value is: `()` if nothing is bound, the value itself if one element is bound,
  or else a tuple of the bound values in order.
  '''
  kind = Kind.group
  type_desc = 'sequence'

  def __init__(self, *elems:SymbolRef, action:Action|None=None):
    if not elems: raise ValueError('Seq requires at least one element')
    self._set_sub_refs(elems)
    bind_names = [e.bind_name for e in elems if isinstance(e, Bind)]
    if len(set(bind_names)) != len(bind_names):
      raise DefinitionError(f'Seq contains duplicate binding names: {bind_names}')
    self.bind_names = tuple(bind_names)
    self.action = action

  def parse(self, ctx:'ParseCtx', cursor:Cursor) -> Result:
    bound:dict[str,Any] = {}
    for sub in self.subs:
      res = sub.parse(ctx, cursor)
      if isinstance(res, Failure): return res
      cursor = res.cursor
      if isinstance(sub, Bind): bound[sub.bind_name] = res.val
    if self.action is not None: return Success(cursor, self.action(**bound))
    if not bound: return Success(cursor, ())
    if len(bound) == 1: return Success(cursor, next(iter(bound.values())))
    return Success(cursor, tuple(bound.values()))

  def pretty(self) -> str:
    return '(' + ', '.join(ref_desc(r) for r in self.sub_refs) + ')'



class OrderedChoice(Symbol):
  '''
  Try each alternative from the same cursor; the first to succeed wins and later alternatives are not tried.
  If every alternative fails, the failure that got farthest into the input is reported;
  among equally far failures, the last one attempted is reported.
  '''
  kind = Kind.group
  type_desc = 'ordered choice'

  def __init__(self, *alts:SymbolRef, action:Callable[[Any],Any]|None=None):
    if not alts: raise ValueError('OrderedChoice requires at least one alternative')
    self._set_sub_refs(alts)
    self.action = action

  def parse(self, ctx:'ParseCtx', cursor:Cursor) -> Result:
    diag:Diagnostics|None = None
    for sub in self.subs:
      res = sub.parse(ctx, cursor) # Every alternative starts from the same cursor.
      if isinstance(res, Success):
        if self.action is None: return res
        return Success(res.cursor, self.action(res.val))
      diag = farthest(diag, res.diag)
    assert diag is not None
    return Failure(diag)

  def pretty(self) -> str:
    return '(' + ' / '.join(ref_desc(r) for r in self.sub_refs) + ')'



class ZeroOrMore(Symbol):
  '''
  Match `body` as many times as possible, producing a list of the values (mapped by `action` if provided).
  The failure that ends the loop is discarded, so this symbol never fails.
  A match that does not advance the cursor ends the loop.
  '''
  kind = Kind.repeat
  type_desc = 'repetition'

  def __init__(self, body:SymbolRef, action:Callable[[list[Any]],Any]|None=None):
    self._set_sub_refs((body,))
    self.action = action

  @property
  def body(self) -> Symbol: return self.subs[0]

  def parse(self, ctx:'ParseCtx', cursor:Cursor) -> Result:
    body = self.subs[0]
    els:list[Any] = []
    while True:
      res = body.parse(ctx, cursor)
      if isinstance(res, Failure): break
      els.append(res.val)
      if res.cursor.offset == cursor.offset: break # Zero-width match; another attempt would match the same.
      cursor = res.cursor
    return Success(cursor, els if self.action is None else self.action(els))

  def pretty(self) -> str: return '{' + ref_desc(self.sub_refs[0]) + '}'



class Opt(Symbol):
  '''
  Match `body` once if possible.
  On failure the result is `dflt` at the original cursor, and the failure is discarded.
  '''
  kind = Kind.option
  type_desc = 'optional'

  def __init__(self, body:SymbolRef, dflt:Any=None):
    self._set_sub_refs((body,))
    self.dflt = dflt

  @property
  def body(self) -> Symbol: return self.subs[0]

  def parse(self, ctx:'ParseCtx', cursor:Cursor) -> Result:
    res = self.subs[0].parse(ctx, cursor)
    if isinstance(res, Success): return res
    return Success(cursor, self.dflt)

  def pretty(self) -> str: return '[' + ref_desc(self.sub_refs[0]) + ']'



class Map(Symbol):
  'Apply `fn` to the value of `body` on success; failures pass through unchanged.'
  kind = Kind.group
  type_desc = 'action'

  def __init__(self, body:SymbolRef, fn:Callable[[Any],Any]):
    self._set_sub_refs((body,))
    self.fn = fn

  def parse(self, ctx:'ParseCtx', cursor:Cursor) -> Result:
    res = self.subs[0].parse(ctx, cursor)
    if isinstance(res, Failure): return res
    return Success(res.cursor, self.fn(res.val))

  def pretty(self) -> str: return f'{ref_desc(self.sub_refs[0])} => {_fn_desc(self.fn)}'



class Ref(Symbol):
  '''
  A reference to a named rule, linked by the Grammar.
  This is the memoized dispatch point: the result of applying a rule at an offset is computed once per session,
  keyed by the rule symbol and the offset, and every later application at that offset reuses it.
  '''
  kind = Kind.symbol
  type_desc = 'reference'

  def __init__(self, rule_name:RuleName):
    self.rule_name = validate_name(rule_name)

  @property
  def target(self) -> Symbol:
    try: return self.subs[0]
    except IndexError: raise DefinitionError(f'reference to rule {self.rule_name!r} is not linked') from None

  def parse(self, ctx:'ParseCtx', cursor:Cursor) -> Result:
    rule = self.target
    offset = cursor.offset
    cache = ctx.cache
    if ctx.memoize:
      entry = cache.lookup(rule, offset)
      if entry is IN_PROGRESS: raise LeftRecursionError(self.rule_name, offset)
      if isinstance(entry, (Success, Failure)):
        if ctx.dbg: ctx.trace(f'{self.rule_name} @{offset}: cached', entry)
        return entry
      cache.begin(rule, offset)
    if ctx.dbg: ctx.trace(f'{self.rule_name} @{offset}')
    ctx.depth += 1
    try: res = rule.parse(ctx, cursor)
    except BaseException:
      if ctx.memoize: cache.abandon(rule, offset) # Leave no in-progress marker behind.
      raise
    finally: ctx.depth -= 1
    assert isinstance(res, Failure) or res.cursor.offset >= offset, (self, offset, res)
    if ctx.dbg: ctx.trace(f'{self.rule_name} @{offset}:', res)
    if ctx.memoize: cache.store(rule, offset, res)
    return res

  def pretty(self) -> str: return self.rule_name

# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'''
Grammar: a closed set of named rules plus the grammar-wide data that primitive matchers share,
and ParseCtx: the mutable state of a single parse session.

A Grammar is immutable once constructed and can be shared freely, including across threads.
Each parse session needs its own ParseCtx, which owns the memo cache.
'''

import re
from copy import deepcopy
from typing import Any, Callable, Iterable, TypeVar

from .diagnostics import DefinitionError, Diagnostics, ExcessInput, ParseError
from .io import errL, errSL
from .memo import MemoCache
from .result import Failure, Result
from .source import Cursor, Source
from .symbols import Bind, Ref, RuleName, Symbol, SymbolRef, validate_name


_H = TypeVar('_H')

def visit_nodes(start_nodes:Iterable[_H], visitor:Callable[[_H], Iterable[_H]]) -> set[_H]:
  '''
  Starting with `start_nodes`, call `visitor` with each node.
  `visitor` should return discovered nodes to be visited.
  Each node is visited exactly once.
  The set of all visited nodes is returned.
  '''
  remaining = set(start_nodes)
  visited:set[_H] = set()
  while remaining:
    node = remaining.pop()
    visited.add(node)
    remaining.update(n for n in visitor(node) if n not in visited)
  return visited



class ParseCtx:
  '''
  The mutable state of one parse session: the current source, the memo cache, and the trace depth.
  `begin` starts a new session, discarding any cached results from the previous text.
  '''

  def __init__(self, grammar:'Grammar'):
    self.grammar = grammar
    self.memoize = grammar.memoize
    self.dbg = grammar.dbg
    self.cache = MemoCache()
    self.source:Source|None = None
    self.depth = 0
    self._skip_match = None if grammar.skip_re is None else grammar.skip_re.match


  def __repr__(self) -> str:
    return f'{type(self).__name__}(source={self.source!r}, cache={self.cache!r})'


  def begin(self, text:str|Source, name:str='') -> Cursor:
    'Start a session for `text`, clearing the cache. Returns the cursor at offset zero.'
    self.source = text if isinstance(text, Source) else Source(name, text)
    self.cache.clear()
    self.depth = 0
    return Cursor(self.source, 0)


  def skip(self, cursor:Cursor) -> int:
    'Return the offset after any insignificant text (as defined by the grammar `skip` pattern) at `cursor`.'
    if self._skip_match is None: return cursor.offset
    m = self._skip_match(cursor.text, cursor.offset)
    return cursor.offset if m is None else m.end()


  def failure(self, expected:str, pos:int) -> Failure:
    'Return a Failure expecting `expected` at the code point offset `pos`; the diagnostics hold the byte offset.'
    assert self.source is not None, 'failure outside of a session'
    return Failure(Diagnostics(expected, self.source.byte_offset(pos)))


  def trace(self, label:str, res:Result|None=None) -> None:
    'Print a trace line for a rule application, indented by depth.'
    indent = '  ' * self.depth
    if res is None: errL(indent, label)
    elif isinstance(res, Failure): errL(indent, label, ' failed: ', res.diag)
    else: errL(indent, label, ' ok -> ', res.cursor.offset)



class Grammar:
  '''
  A set of named rules and the shared data used by the primitive matchers.

  rules: a dict of rule names to symbols. Rule name strings appearing as sub-symbols refer to these rules.
  The dict is deep copied, so that several grammars can be built from the same rules without sharing linked state.

  skip: a regex for insignificant text skipped before each literal, pattern and identifier; None disables skipping.

  ident: the regex used by `Ident`.

  keywords: strings that `Ident` must not match.

  data: arbitrary grammar-wide data for custom primitives, available as `ctx.grammar.data`.
  Symbols must not mutate it.

  memoize: if False, the memo cache is bypassed. The results are identical, but shared sub-grammars may be reparsed.

  dbg: if True, trace every rule application to stderr.

  Left-recursive rules are not supported.
  With memoization enabled they are detected and raise LeftRecursionError; otherwise they exhaust the stack.
  '''

  def __init__(self, rules:dict[RuleName,Symbol], *, skip:str|None=r'\s*', ident:str=r'[A-Za-z_][A-Za-z_0-9]*',
   keywords:Iterable[str]=(), data:Any=None, memoize:bool=True, dbg:bool=False):

    for name, rule in rules.items():
      validate_name(name)
      if not isinstance(rule, Symbol): raise DefinitionError(f'rule {name!r} is not a Symbol: {rule!r}')
      if isinstance(rule, Bind): raise DefinitionError(f'rule {name!r} is a binding; Bind must be an element of a Seq')

    self.skip_re = None if skip is None else re.compile(skip)
    self.ident_re = re.compile(ident)
    self.keywords = frozenset((keywords,) if isinstance(keywords, str) else keywords)
    self.data = data
    self.memoize = memoize
    self.dbg = dbg

    self.rules = deepcopy(rules)
    del rules # Forget the original dict. This protects from misuse in the code below.

    for name, rule in self.rules.items():
      if rule.name: raise DefinitionError(f'rule {name!r} is the same symbol as rule {rule.name!r}; use a string reference')
      rule.name = name

    # Link the symbol graph. Rule name strings become Ref symbols; cycles pass only through Refs.

    def link_sub_ref(ref:SymbolRef) -> Symbol:
      if isinstance(ref, Symbol): return ref
      return self.ref(ref)

    def link(sym:Symbol) -> Iterable[Symbol]:
      if isinstance(sym, Ref):
        sym.subs = (self.resolve(sym.rule_name),)
      elif sym.sub_refs:
        sym.subs = tuple(link_sub_ref(r) for r in sym.sub_refs)
      assert len(sym.subs) == len(sym.sub_refs) or isinstance(sym, Ref)
      return sym.subs

    self.nodes = visit_nodes(self.rules.values(), link) # All of the symbol nodes.


  def __repr__(self) -> str:
    return f'{type(self).__name__}(rules=[{", ".join(self.rules)}])'


  def __getitem__(self, name:RuleName) -> Symbol: return self.rules[name]


  def __contains__(self, name:RuleName) -> bool: return name in self.rules


  def resolve(self, name:RuleName) -> Symbol:
    try: return self.rules[name]
    except KeyError: raise DefinitionError(f'nonexistent rule: {name!r}') from None


  def ref(self, name:RuleName) -> Ref:
    'Create a linked reference to the named rule, suitable for `Symbol.parse_prefix`.'
    ref = Ref(name)
    ref.subs = (self.resolve(name),)
    return ref


  def new_ctx(self) -> ParseCtx: return ParseCtx(self)


  def parse_prefix(self, rule_name:RuleName, text:str, name:str='') -> Result:
    '''
    Parse the named rule from the start of `text` in a fresh session.
    Returns the Result; on success the residual cursor shows how much of the text was consumed.
    '''
    return self.ref(rule_name).parse_prefix(self.new_ctx(), text, name=name)


  def parse(self, rule_name:RuleName, text:str, name:str='', ignore_excess:bool=False) -> Any:
    '''
    Parse the named rule from the start of `text` and return its value.
    Raises ParseError on failure, and ExcessInput if text other than skipped text remains (unless `ignore_excess`).
    '''
    ctx = self.new_ctx()
    res = self.ref(rule_name).parse_prefix(ctx, text, name=name)
    if self.dbg: errSL('memo:', ctx.cache.stats)
    if isinstance(res, Failure): raise ParseError(res.diag, ctx.source)
    if not ignore_excess:
      end = ctx.skip(res.cursor)
      if end != len(res.cursor.text):
        raise ExcessInput(Diagnostics('end of text', res.cursor.source.byte_offset(end)), ctx.source)
    return res.val


  def parse_or_fail(self, rule_name:RuleName, text:str, name:str='', ignore_excess:bool=False) -> Any:
    'Like `parse`, but print a diagnostic and exit on a parse error.'
    try: return self.parse(rule_name, text, name=name, ignore_excess=ignore_excess)
    except ParseError as e: e.fail()


  def pretty(self) -> str:
    'Describe every rule, one per line, in definition order.'
    return ''.join(f'{name} = {rule.pretty()};\n' for name, rule in self.rules.items())

# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

from typing import Any

from packrat import (Bind, DefinitionError, Diagnostics, Failure, farthest, Grammar, Ident, Lit, Map, Opt, OrderedChoice,
  Pattern, Seq, skeleton, Success, Symbol, ZeroOrMore)
from utest import utest, utest_call, utest_exc, utest_val


def parse(sym:Symbol, text:str, **grammar_opts:Any) -> Any:
  'Parse `sym` as the single rule of a fresh grammar; return (skeleton value, end offset) or the Failure.'
  res = Grammar(dict(top=sym), **grammar_opts).parse_prefix('top', text)
  if isinstance(res, Failure): return res
  return (skeleton(res.val), res.cursor.offset)


# Literals.

utest(('Hi', 2), parse, Lit('Hi'), 'Hi')
utest((7, 5), parse, Lit('Hi', val=7), ' \n Hi Ho')
utest(Failure(Diagnostics('Hi', 2)), parse, Lit('Hi'), '  Ho') # The failure offset is after the skipped whitespace.
utest(Failure(Diagnostics('Hi', 0)), parse, Lit('Hi'), '  Hi', skip=None)
utest(Failure(Diagnostics('Hi', 0)), parse, Lit('Hi'), 'H')
utest_exc(ValueError, Lit, '')


# Patterns and identifiers.

number = Pattern(r'[0-9]+', 'number', val=lambda span: int(str(span)))
utest((42, 3), parse, number, ' 42x')
utest(Failure(Diagnostics('number', 1)), parse, number, ' x')
utest(Failure(Diagnostics('[0-9]+', 0)), parse, Pattern(r'[0-9]+'), 'x')

utest(('foo', 3), parse, Ident(), 'foo bar')
utest(('classy', 6), parse, Ident(), 'classy', keywords=('class',))
utest(Failure(Diagnostics('identifier', 0)), parse, Ident(), 'class', keywords=('class',))
utest(Failure(Diagnostics('identifier', 1)), parse, Ident(), ' 9x')
utest((['a-b'], 3), parse, ZeroOrMore(Ident()), 'a-b c', ident=r'[a-z]+(-[a-z]+)*', keywords='c')


# Sequences.

utest(((), 3), parse, Seq(Lit('a'), Lit('b'), Lit('c')), 'abc')
utest(Failure(Diagnostics('c', 2)), parse, Seq(Lit('a'), Lit('b'), Lit('c')), 'abx') # The first failure is reported.
utest(('b', 2), parse, Seq(Lit('a'), Bind('x', Lit('b'))), 'ab')
utest((('a', 'c'), 3), parse, Seq(Bind('x', Lit('a')), Lit('b'), Bind('y', Lit('c'))), 'abc')
utest(('ca', 3), parse, Seq(Bind('x', Lit('a')), Lit('b'), Bind('y', Lit('c')), action=lambda x, y: y + x), 'abc')
utest(('done', 2), parse, Seq(Lit('a'), Lit('b'), action=lambda: 'done'), 'ab')
utest_exc(DefinitionError, Seq, Bind('x', Lit('a')), Bind('x', Lit('b')))
utest_exc(DefinitionError, Bind, 'not a name', Lit('a'))
utest_exc(ValueError, Seq)


# Ordered choice.

utest(('A', 2), parse, OrderedChoice(Lit('ab', val='A'), Lit('a', val='B')), 'ab')
utest(('B', 1), parse, OrderedChoice(Lit('a', val='B'), Lit('ab', val='A')), 'ab') # First match wins, not longest.
utest(('b!', 1), parse, OrderedChoice(Lit('a'), Lit('b'), action=lambda v: v + '!'), 'b')
utest(Failure(Diagnostics('b', 0)), parse, OrderedChoice(Lit('a'), Lit('b')), 'c')
utest_exc(ValueError, OrderedChoice)

near = Seq(Lit('abc'), Lit('x')) # Fails at offset 3.
far = Seq(Lit('abcdefg'), Lit('y')) # Fails at offset 7.
utest(Failure(Diagnostics('y', 7)), parse, OrderedChoice(near, far), 'abcdefgz')
utest(Failure(Diagnostics('y', 7)), parse, OrderedChoice(far, near), 'abcdefgz')

utest(Diagnostics('b', 7), farthest, Diagnostics('a', 3), Diagnostics('b', 7))
utest(Diagnostics('b', 7), farthest, Diagnostics('b', 7), Diagnostics('a', 3))
utest(Diagnostics('b', 3), farthest, Diagnostics('a', 3), Diagnostics('b', 3))
utest(Diagnostics('a', 3), farthest, None, Diagnostics('a', 3))
utest(Diagnostics('a', 3), farthest, Diagnostics('a', 3), None)
utest(None, farthest, None, None)


# Repetition.

utest(([], 0), parse, ZeroOrMore(Lit('a')), 'zzz')
utest(([], 0), parse, ZeroOrMore(Lit('a')), '')
utest((['a', 'a'], 3), parse, ZeroOrMore(Lit('a')), 'a a b')
utest((2, 3), parse, ZeroOrMore(Lit('a'), action=len), 'a a b')
utest(([None], 0), parse, ZeroOrMore(Opt(Lit('q'))), 'abc') # A zero-width match ends the loop.
utest((['xx', ''], 2), parse, ZeroOrMore(Pattern(r'x*')), 'xxy')


# Optional.

utest(('a', 1), parse, Opt(Lit('a')), 'a')
utest((None, 0), parse, Opt(Lit('a')), 'b')
utest(('none', 0), parse, Opt(Lit('a'), dflt='none'), '  b') # The cursor does not move past the skipped whitespace.
utest(('b', 2), parse, Seq(Opt(Lit('a')), Bind('b', Lit('b'))), ' b')


# Action mapping.

utest(('A', 1), parse, Map(Lit('a'), str.upper), 'a')
utest(Failure(Diagnostics('a', 0)), parse, Map(Lit('a'), str.upper), 'b')


@utest_call
def test_cursor_monotonicity() -> None:
  g = Grammar(dict(
    item=OrderedChoice(Seq(Lit('('), ZeroOrMore('item'), Lit(')')), Ident(), Pattern(r'[0-9]*')),
    items=ZeroOrMore('item'),
    maybe=Opt('item')))
  text = '(a (b 1) ) 22 ( c'
  ctx = g.new_ctx()
  start = ctx.begin(text)
  for rule_name in ['item', 'items', 'maybe']:
    ref = g.ref(rule_name)
    for offset in range(len(text) + 1):
      res = ref.parse(ctx, start.at(offset))
      if isinstance(res, Success):
        utest_val(True, res.cursor.offset >= offset, f'{rule_name} @{offset}: {res.cursor.offset} >= {offset}')
      else:
        utest_val(True, res.diag.offset >= offset, f'{rule_name} @{offset}: failure offset')

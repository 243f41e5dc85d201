# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'A small class declaration language, using identifiers with a keyword set and mutually referencing rules.'

from dataclasses import dataclass
from typing import Any

from packrat import (Bind, Diagnostics, Failure, Grammar, Ident, Lit, Map, OrderedChoice, Seq, skeleton, Span, Success,
  ZeroOrMore)
from utest import utest, utest_call, utest_val


@dataclass(frozen=True)
class TypeRef:
  id:Span|str

@dataclass(frozen=True)
class FieldDefn:
  name:Span|str
  ty:TypeRef

@dataclass(frozen=True)
class MethodDefn:
  name:Span|str
  arg_tys:list[TypeRef]
  ret_ty:TypeRef

@dataclass(frozen=True)
class ClassDefn:
  name:Span|str
  members:list[FieldDefn|MethodDefn]


classy = Grammar(
  keywords=['class'],
  rules=dict(
    CLASS=Seq(Lit('class'), Bind('name', Ident()), Lit('{'), Bind('members', ZeroOrMore('MEMBER')), Lit('}'),
      action=ClassDefn),
    MEMBER=OrderedChoice('FIELD_DEFN', 'METHOD_DEFN'),
    FIELD_DEFN=Seq(Bind('name', Ident()), Lit(':'), Bind('ty', 'TYPE_REF'), Lit(';'), action=FieldDefn),
    TYPE_REF=Map(Ident(), TypeRef),
    METHOD_DEFN=Seq(Bind('name', Ident()), Lit('('), Bind('arg_tys', ZeroOrMore('TYPE_REF')), Lit(')'), Lit('->'),
      Bind('ret_ty', 'TYPE_REF'), Lit(';'), action=MethodDefn),
  ))


def parse_class(text:str) -> Any:
  return skeleton(classy.parse('CLASS', text))


utest(
  ClassDefn(name='x', members=[
    FieldDefn(name='f', ty=TypeRef('u32')),
    FieldDefn(name='g', ty=TypeRef('i32')),
    MethodDefn(name='h', arg_tys=[TypeRef('i32')], ret_ty=TypeRef('u32')),
  ]),
  parse_class, 'class x { f: u32; g: i32; h(i32) -> u32; }')

utest(ClassDefn(name='empty', members=[]), parse_class, 'class empty {}')

utest(
  ClassDefn(name='m', members=[MethodDefn(name='k', arg_tys=[TypeRef('a'), TypeRef('b')], ret_ty=TypeRef('c'))]),
  parse_class, 'class m {\n  k(a b) -> c;\n}\n')

utest(Failure(Diagnostics('identifier', 6)), classy.parse_prefix, 'CLASS', 'class class {}')
utest(Failure(Diagnostics('}', 10)), classy.parse_prefix, 'CLASS', 'class x { f: ; }')


@utest_call
def test_zero_copy_names() -> None:
  text = 'class point { x: f64; }'
  res = classy.parse_prefix('CLASS', text)
  assert isinstance(res, Success), res
  name = res.val.name
  utest_val(True, isinstance(name, Span), 'name is a Span')
  utest_val(True, name.text is res.cursor.text, 'span shares the source buffer')
  utest_val(slice(6, 11), name.slc, 'span slice')
  utest_val('point', str(name), 'span text')

# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'The result of applying a symbol: either `Success` or `Failure`.'

from dataclasses import dataclass
from typing import Any, NoReturn, Union

from .diagnostics import Diagnostics, ParseError
from .source import Cursor


@dataclass(frozen=True)
class Success:
  'The symbol matched; `cursor` is the position after the match and `val` is the produced value.'
  cursor:Cursor
  val:Any

  ok = True

  @property
  def offset(self) -> int: return self.cursor.offset

  def unwrap(self) -> Any: return self.val


@dataclass(frozen=True)
class Failure:
  'The symbol did not match; `diag` describes the most informative failure point.'
  diag:Diagnostics

  ok = False

  @property
  def offset(self) -> int: return self.diag.offset

  def unwrap(self) -> NoReturn:
    raise ParseError(self.diag)


Result = Union[Success, Failure]

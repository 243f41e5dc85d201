# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'Printing helpers for diagnostic output. The suffix letters name the separator and terminator.'

from sys import stderr
from typing import Any


def errL(*items:Any, sep='', flush=False) -> None:
  "Write `items` to stderr; sep='', end='\\n'."
  print(*items, sep=sep, end='\n', file=stderr, flush=flush)

def errSL(*items:Any, flush=False) -> None:
  "Write `items` to stderr; sep=' ', end='\\n'."
  print(*items, sep=' ', end='\n', file=stderr, flush=flush)

# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

from dataclasses import fields as dc_fields, is_dataclass, replace
from typing import Any

from .source import Span


def skeleton(node:Any) -> Any:
  '''
  Produce a simplified copy of a parse result by recursively replacing each `Span` with its source text.
  This is particularly useful for writing test expectations, where span positions create visual clutter.
  Lists, tuples (including named tuples), dicts and dataclass instances are rebuilt; other values are returned as is.
  '''
  match node:
    case Span(): return str(node)
    case list(): return [skeleton(el) for el in node]
    case tuple():
      if hasattr(node, '_fields'): return type(node)(*(skeleton(el) for el in node))
      return tuple(skeleton(el) for el in node)
    case dict(): return {k: skeleton(v) for k, v in node.items()}
    case _: pass
  if is_dataclass(node) and not isinstance(node, type):
    return replace(node, **{f.name: skeleton(getattr(node, f.name)) for f in dc_fields(node) if f.init})
  return node

# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'''
The packrat memo table.

PEG parsing is a pure function of (rule, offset), so the result of applying a named rule at an offset can be reused
by every later request for the same pair. Caching these results bounds the work of a parse session to
O(number of rules × input length), even though the grammar graph refers to the same rule from many places.
'''

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .result import Result

if TYPE_CHECKING:
  from .symbols import Symbol


class _InProgress:
  'Marker stored for a (rule, offset) pair while that rule is being parsed.'
  def __repr__(self) -> str: return 'IN_PROGRESS'

IN_PROGRESS = _InProgress()


@dataclass(frozen=True)
class MemoStats:
  hits:int
  misses:int
  entries:int


class MemoCache:
  '''
  A map from (symbol, start offset) to the shared result for that pair.
  The symbol object itself is the identity key; symbols hash by identity.
  A cache is valid for a single source text; `clear` it before parsing another.
  '''

  def __init__(self) -> None:
    self._entries:dict[tuple['Symbol',int],Result|_InProgress] = {}
    self.hits = 0
    self.misses = 0


  def __repr__(self) -> str:
    return f'{type(self).__name__}(entries={len(self._entries)}, hits={self.hits}, misses={self.misses})'


  def __len__(self) -> int: return len(self._entries)


  def __contains__(self, key:tuple['Symbol',int]) -> bool: return key in self._entries


  def lookup(self, symbol:'Symbol', offset:int) -> Result|_InProgress|None:
    'Return the cached entry for the pair, or None if the pair has not been visited.'
    try: entry = self._entries[(symbol, offset)]
    except KeyError:
      self.misses += 1
      return None
    if entry is not IN_PROGRESS: self.hits += 1
    return entry


  def begin(self, symbol:'Symbol', offset:int) -> None:
    'Mark the pair as being parsed.'
    self._entries[(symbol, offset)] = IN_PROGRESS


  def abandon(self, symbol:'Symbol', offset:int) -> None:
    'Remove the in-progress marker for the pair, after its evaluation raised an exception.'
    key = (symbol, offset)
    if self._entries.get(key) is IN_PROGRESS: del self._entries[key]


  def store(self, symbol:'Symbol', offset:int, result:Result) -> Result:
    'Record and return the result for the pair.'
    self._entries[(symbol, offset)] = result
    return result


  def clear(self) -> None:
    self._entries.clear()
    self.hits = 0
    self.misses = 0


  @property
  def stats(self) -> MemoStats:
    return MemoStats(hits=self.hits, misses=self.misses, entries=len(self._entries))


  def evaluated(self, symbol:'Symbol') -> list[int]:
    'The sorted offsets at which `symbol` has a completed result.'
    return sorted(o for (s, o), e in self._entries.items() if s is symbol and e is not IN_PROGRESS)

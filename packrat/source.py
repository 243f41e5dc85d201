# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'''
Source text, cursors into it, and zero-copy spans of it.

A Source wraps the immutable text buffer for a single parse session.
A Cursor is a position in that text; advancing a cursor produces a new one.
A Span is a view of a matched region; it holds a reference to the buffer rather than a copy of the substring.
Cursor offsets are indices into the Python string, so a cursor can never split a code point.
Failure offsets are reported as UTF-8 byte offsets; `Source.byte_offset` converts between the two.
'''

from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from itertools import accumulate
from typing import NoReturn


class Source:
  '''
  The text being parsed, plus a lazily built table of newline positions for rendering diagnostics.
  Two sources are equal if their names and texts are equal.
  '''

  def __init__(self, name:str, text:str):
    if not isinstance(text, str): raise TypeError(f'Source text must be a str; received {type(text).__name__}')
    self.name = name
    self.text = text
    self.newline_positions:list[int] = []
    self._scanned_to = 0
    self.is_ascii = text.isascii()
    self._byte_offsets:list[int]|None = None # Lazily built for non-ASCII text; indexed by code point offset.


  def __repr__(self) -> str:
    return f'{type(self).__name__}({self.name!r}, text=<str[{len(self.text)}]>)'


  def __eq__(self, other:object) -> bool:
    if not isinstance(other, Source): return NotImplemented
    return self.name == other.name and self.text == other.text


  def __hash__(self) -> int: return hash((self.name, self.text))


  def __len__(self) -> int: return len(self.text)


  def _scan_newlines(self, pos:int) -> None:
    'Extend `newline_positions` to cover every newline before `pos`.'
    text = self.text
    i = self._scanned_to
    while i < pos:
      i = text.find('\n', i, pos)
      if i == -1: break
      self.newline_positions.append(i)
      i += 1
    self._scanned_to = max(self._scanned_to, pos)


  def line_index(self, pos:int) -> int:
    'Return the zero-based line index of `pos`.'
    if not (0 <= pos <= len(self.text)): raise IndexError(pos)
    self._scan_newlines(pos)
    return bisect_right(self.newline_positions, pos - 1) if pos else 0


  def line_start(self, pos:int) -> int:
    'Return the offset of the start of the line containing `pos`.'
    return self.text.rfind('\n', 0, pos) + 1 # rfind returns -1 for no match.


  def line_end(self, pos:int) -> int:
    'Return the offset just past the newline ending the line containing `pos`, or the text length.'
    newline_pos = self.text.find('\n', pos)
    return len(self.text) if newline_pos == -1 else newline_pos + 1


  def line_col(self, pos:int) -> tuple[int,int]:
    'Return the one-based (line, column) pair for `pos`.'
    return (self.line_index(pos) + 1, pos - self.line_start(pos) + 1)


  def _byte_offset_table(self) -> list[int]:
    if self._byte_offsets is None:
      self._byte_offsets = list(accumulate((_utf8_len(c) for c in self.text), initial=0))
    return self._byte_offsets


  def byte_offset(self, pos:int) -> int:
    'Return the UTF-8 byte offset of the code point offset `pos`.'
    if not (0 <= pos <= len(self.text)): raise IndexError(pos)
    if self.is_ascii: return pos
    return self._byte_offset_table()[pos]


  def pos_for_byte_offset(self, byte_offset:int) -> int:
    'Return the code point offset of `byte_offset`, which must fall on a code point boundary.'
    if self.is_ascii:
      if not (0 <= byte_offset <= len(self.text)): raise IndexError(byte_offset)
      return byte_offset
    table = self._byte_offset_table()
    pos = bisect_left(table, byte_offset)
    if pos == len(table) or table[pos] != byte_offset:
      raise ValueError(f'byte offset is not at a code point boundary: {byte_offset}')
    return pos


  def diagnostic(self, pos:int, msg:str, *, end:int|None=None, prefix:str='') -> str:
    '''
    Render a message for the region `pos` to `end` as a `name:line:col: msg` header,
    the source line, and an underline: a caret for an empty region, tildes otherwise.
    Regions spanning multiple lines are clipped to the first line.
    '''
    if end is None: end = pos
    assert 0 <= pos <= end <= len(self.text), (pos, end)
    text = self.text
    line_ref = pos - 1 if (pos and pos == len(text) and text.endswith('\n')) else pos
    #^ The end of a newline-terminated text is shown on the last line, not on an empty line past it.
    line_pos = self.line_start(line_ref)
    line_end = self.line_end(line_ref)
    end = min(end, line_end)
    line_num = self.line_index(line_ref) + 1
    col = pos - line_pos + 1

    line = text[line_pos:line_end]
    if line.endswith('\n'):
      line = line[:-1]
      if pos >= line_end - 1: line += '\u23CE' # RETURN SYMBOL marks an error at the newline.
    elif pos == len(self.text):
      line += '\u23CE\u0353' # RETURN SYMBOL, COMBINING X BELOW marks an error at a missing final newline.

    indent = ''.join(('\t' if c == '\t' else ' ') for c in text[line_pos:pos])
    underline = indent + ('~' * (end - pos) if end > pos else '^')
    col_desc = f'{col}-{col + end - pos}' if end > pos else str(col)
    pre = f'{prefix}: ' if prefix else ''
    name_colon = f'{self.name}:' if self.name else ''
    bar = '| ' if line else '|'
    return f'{pre}{name_colon}{line_num}:{col_desc}: {msg}\n{bar}{line}\n  {underline}\n'


  def fail(self, pos:int, msg:str, *, end:int|None=None, prefix:str='') -> NoReturn:
    'Exit the process with a rendered diagnostic.'
    exit(self.diagnostic(pos, msg, end=end, prefix=prefix))



@dataclass(frozen=True)
class Cursor:
  '''
  An immutable position in a Source.
  Cursors are cheap to create; parsing never mutates one, it derives a new one.
  '''
  source:Source
  offset:int

  def __post_init__(self) -> None:
    if not (0 <= self.offset <= len(self.source.text)): raise IndexError(self.offset)

  def __repr__(self) -> str:
    return f'Cursor({self.source.name!r}, {self.offset})'

  @property
  def text(self) -> str: return self.source.text

  @property
  def rest(self) -> str:
    'The unconsumed text. Note: this copies; use it for messages and tests, not in matchers.'
    return self.source.text[self.offset:]

  @property
  def at_end(self) -> bool: return self.offset == len(self.source.text)

  def advanced(self, count:int) -> 'Cursor':
    return Cursor(self.source, self.offset + count)

  def at(self, offset:int) -> 'Cursor':
    return self if offset == self.offset else Cursor(self.source, offset)



@dataclass(frozen=True)
class Span:
  '''
  A zero-copy view of a region of source text.
  `text` is the shared source buffer; `str(span)` materializes the substring.
  '''
  text:str
  slc:slice

  def __repr__(self) -> str:
    return f'Span({self.slc.start}:{self.slc.stop}, {str(self)!r})'

  def __str__(self) -> str: return self.text[self.slc]

  def __len__(self) -> int: return self.slc.stop - self.slc.start

  def __eq__(self, other:object) -> bool:
    if not isinstance(other, Span): return NotImplemented
    return self.slc == other.slc and (self.text is other.text or self.text == other.text)

  def __hash__(self) -> int: return hash((self.slc.start, self.slc.stop))

  @property
  def pos(self) -> int: return int(self.slc.start)

  @property
  def end(self) -> int: return int(self.slc.stop)


def _utf8_len(c:str) -> int:
  o = ord(c)
  return 1 if o < 0x80 else 2 if o < 0x800 else 3 if o < 0x10000 else 4

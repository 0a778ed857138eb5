from __future__ import annotations

import re
from typing import Any, Iterator, List, Optional, Sequence, Tuple

__all__ = ['SQLBuilder']

# String literals and quoted identifiers; '$' inside them is plain text.
QUOTED_SPAN = r"""'(?:[^']|'')*'|"(?:[^"]|"")*"|\[(?:[^\]]|\]\])*\]"""

# A bare '$' marks a placeholder; '$1' style text is left alone.
_TOKENS = re.compile(QUOTED_SPAN + r"|(\$(?!\d))")


class SQLBuilder:
    """Incrementally assemble parameterized SQL text.

    Each fragment may contain bare ``$`` markers; they bind, in order, to the
    values passed with that fragment and are renumbered ``$1..$n`` by overall
    position when the statement is built::

        text, params = (
            SQLBuilder()
            .add('insert into "users"')
            .add('("name", "email")')
            .add('values ($, $)', ['Alice', 'a@x.com'])
            .build()
        )

    Quoted spans (``'...'``, ``"..."``, ``[...]``) are copied untouched; nothing else
    is parsed or validated, and quoting identifiers is the caller's job.
    """

    def __init__(self) -> None:
        self._fragments: List[str] = []
        self._values: List[Any] = []

    def add(self, text: str, values: Optional[Sequence[Any]] = None) -> 'SQLBuilder':
        vals = list(values or [])
        markers = sum(1 for m in _TOKENS.finditer(text) if m.group(1))
        if markers != len(vals):
            raise ValueError(
                f"SQL fragment has {markers} placeholder(s) but {len(vals)} value(s) were given: {text!r}"
            )
        counter = iter(range(len(self._values) + 1, len(self._values) + markers + 1))

        def number(m):
            return f"${next(counter)}" if m.group(1) else m.group(0)

        self._fragments.append(_TOKENS.sub(number, text))
        self._values.extend(vals)
        return self

    def build(self) -> Tuple[str, List[Any]]:
        return ' '.join(self._fragments), list(self._values)

    @property
    def text(self) -> str:
        return self.build()[0]

    @property
    def values(self) -> List[Any]:
        return list(self._values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.build())

    def __repr__(self) -> str:
        return f"<SQLBuilder {self.text!r} params={len(self._values)}>"

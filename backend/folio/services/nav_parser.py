"""NAV line parsing."""

import math
from collections.abc import Iterable

from folio.errors import MalformedNAVError, SymbolNotFoundError

# NAVAll.txt: code;ISIN growth;ISIN reinvest;scheme name;NAV;date
NAV_FIELD_INDEX = 4
NAV_FIELD_SEPARATOR = ";"


def parse_nav(lines: Iterable[str], symbol: str) -> float:
    """Return the NAV from the first line containing ``symbol``.

    Matching is a literal substring test on the whole line, so a symbol that
    prefixes another one matches whichever line comes first.
    """
    for line in lines:
        if symbol not in line:
            continue
        fields = line.split(NAV_FIELD_SEPARATOR)
        if len(fields) <= NAV_FIELD_INDEX:
            raise MalformedNAVError(f"nav line for {symbol} has {len(fields)} fields")
        raw = fields[NAV_FIELD_INDEX]
        try:
            nav = float(raw)
        except ValueError as e:
            raise MalformedNAVError(f"could not parse float: {raw!r}") from e
        if not math.isfinite(nav) or nav < 0:
            raise MalformedNAVError(f"nav out of range for {symbol}: {raw!r}")
        return nav

    raise SymbolNotFoundError(f"fund not found: {symbol}")

"""
General helper functions
"""
import unicodedata
from typing import Any, List, Optional, Sequence, Tuple


def strip_diacritics(value: str) -> str:
    """Remove combining marks ("München" -> "Munchen")"""
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_value(value: Optional[str]) -> str:
    """Case and diacritic insensitive comparison key"""
    if not value:
        return ""
    return strip_diacritics(value).strip().lower()


def collation_key(value: str) -> Tuple[str, str]:
    """Sort key approximating German locale collation"""
    folded = strip_diacritics(value).replace("ß", "ss").casefold()
    return folded, value


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Trim a cell value, mapping empty strings to None"""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def cell_to_str(value: Any) -> str:
    """Render an unformatted cell value the way it reads in the sheet"""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def pad_matrix(values: Sequence[Sequence[Any]]) -> List[List[str]]:
    """Stringify cells and pad every row to the widest row"""
    width = max((len(row) for row in values), default=0)
    return [[cell_to_str(cell) for cell in row] + [""] * (width - len(row)) for row in values]

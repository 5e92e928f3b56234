import re
from typing import Dict, Iterable, List, Mapping

_TRIM_CHARS = " \t\n\r"
_ABBREVIATION_SEPARATORS = re.compile(r"[/\\_\-.]")
_INTEGER_PATTERN = re.compile(r"\s*[+-]?\d+")
_RATIONAL_PATTERN = re.compile(r"-?(\d+|\.\d+)(\.\d+)?")


def trim(text: str) -> str:
    return text.strip(_TRIM_CHARS)


def split(text: str, delimiter: str) -> List[str]:
    """Split on every occurrence of ``delimiter``.

    The result always holds at least one element; an empty delimiter yields
    the whole string.
    """
    if not delimiter:
        return [text]
    return text.split(delimiter)


def split_once_from_right(text: str, delimiter: str) -> List[str]:
    if not delimiter or delimiter not in text:
        return [text]
    left, right = text.rsplit(delimiter, 1)
    return [left, right]


def join(elements: Iterable[str], separator: str) -> str:
    return separator.join(elements)


def pascal_to_snake_case(text: str) -> str:
    parts: List[str] = []
    current = ""
    for char in text:
        if char.isupper():
            if current:
                parts.append(current)
            current = char.lower()
        else:
            current += char
    if current:
        parts.append(current)
    return join(parts, "_")


def snake_to_pascal_case(text: str) -> str:
    parts = [part[:1].upper() + part[1:] for part in split(text, "_")]
    return join(parts, "")


def abbreviate_snake_case(text: str) -> str:
    return "".join(word[0] for word in split(text, "_") if word)


def generate_abbreviation(name: str) -> str:
    """First letter of every part of a path-, kebab-, dot- or snake-style name."""
    normalized = _ABBREVIATION_SEPARATORS.sub("_", name)
    return abbreviate_snake_case(normalized)


def generate_unique_abbreviation(abbreviation_map: Dict[str, str], word: str) -> str:
    """Abbreviate ``word`` without clashing with abbreviations already taken.

    ``abbreviation_map`` maps abbreviation -> word and is updated in place.
    A word that was abbreviated before gets the same abbreviation back; a
    clash with a different word is resolved with a numeric suffix.
    """
    base = generate_abbreviation(word)
    abbreviation = base
    suffix = 1
    while abbreviation in abbreviation_map and abbreviation_map[abbreviation] != word:
        abbreviation = f"{base}{suffix}"
        suffix += 1
    abbreviation_map[abbreviation] = word
    return abbreviation


def map_words_to_abbreviations(words: Iterable[str]) -> Dict[str, str]:
    taken: Dict[str, str] = {}
    return {word: generate_unique_abbreviation(taken, word) for word in words}


def remove_consecutive_duplicates(text: str, dedup_chars: str = "") -> str:
    """Collapse runs of a repeated character to a single one.

    Only characters in ``dedup_chars`` are collapsed unless it is empty, in
    which case every character is.
    """
    if not text:
        return ""
    result = [text[0]]
    for previous, current in zip(text, text[1:]):
        should_dedup = not dedup_chars or current in dedup_chars
        if should_dedup and current == previous:
            continue
        result.append(current)
    return "".join(result)


def is_integer(text: str) -> bool:
    return _INTEGER_PATTERN.fullmatch(text) is not None


def is_rational(text: str) -> bool:
    return _RATIONAL_PATTERN.fullmatch(text) is not None


def add_newlines_to_long_string(text: str, max_chars_per_line: int = 25) -> str:
    lines: List[str] = []
    current: List[str] = []
    current_length = 0
    for word in text.split():
        needed = current_length + len(word) + (1 if current else 0)
        if current and needed > max_chars_per_line:
            lines.append(" ".join(current))
            current = []
            current_length = 0
        current_length += len(word) + (1 if current else 0)
        current.append(word)
    if current:
        lines.append(" ".join(current))
    return "\n".join(lines)


def join_multiline(text: str, replace_newlines_with_space: bool = False) -> str:
    """Trim every line of ``text`` and glue the lines back together."""
    separator = " " if replace_newlines_with_space else ""
    pieces = [line.strip() for line in re.split(r"\r\n|\r|\n", text)]
    return separator.join(piece for piece in pieces if piece)


def replace_char(text: str, from_char: str, to_char: str) -> str:
    return text.replace(from_char, to_char)


def replace_chars(text: str, mapping: Mapping[str, str]) -> str:
    return "".join(mapping.get(char, char) for char in text)


def replace_substring(text: str, from_substr: str, to_substr: str) -> str:
    if not from_substr:
        return text
    return text.replace(from_substr, to_substr)


def starts_with(text: str, prefix: str) -> bool:
    return text.startswith(prefix)


def contains(text: str, substr: str) -> bool:
    return substr in text


def get_substring(text: str, start: int, end: int) -> str:
    if start >= end or start < 0 or end > len(text):
        return ""
    return text[start:end]


def remove_newlines(text: str) -> str:
    return text.replace("\r", "").replace("\n", "")


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text)


def replace_literal_newlines_with_real(text: str) -> str:
    return text.replace("\\n", "\n")


def indent(text: str, indent_level: int, spaces_per_indent: int = 2) -> str:
    prefix = " " * (indent_level * spaces_per_indent)
    return "".join(f"{prefix}{line}\n" for line in text.splitlines())


def surround(text: str, left: str, right: str = "") -> str:
    return f"{left}{text}{right or left}"

"""Naming convention transforms used by generators and template helpers."""

import re

# Runs of anything that is not a letter or digit separate words
_SEPARATOR_RE = re.compile(r"[^A-Za-z0-9]+")

# Every uppercase letter starts a new word inside a mixed-case chunk
_UPPER_BOUNDARY_RE = re.compile(r"(?=[A-Z])")


def split_words(value: str) -> list[str]:
    """Split an identifier into its words.

    Inside a chunk every uppercase letter opens a new word, so the words of a
    PascalCase rendering are the words of its input. All-caps chunks count as
    one word when the value is explicitly delimited (``HELLO_WORLD``).

    Examples:
        >>> split_words("HelloWorld")
        ['Hello', 'World']
        >>> split_words("hello_world-again")
        ['hello', 'world', 'again']
        >>> split_words("HELLO_WORLD")
        ['HELLO', 'WORLD']
    """
    delimited = _SEPARATOR_RE.search(value) is not None
    words: list[str] = []
    for chunk in _SEPARATOR_RE.split(value):
        if not chunk:
            continue
        if delimited and chunk.isupper():
            words.append(chunk)
            continue
        words.extend(part for part in _UPPER_BOUNDARY_RE.split(chunk) if part)
    return words


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def to_pascal_case(value: str) -> str:
    """Convert to PascalCase (``hello-world`` -> ``HelloWorld``)."""
    return "".join(_capitalize(word) for word in split_words(value))


def to_camel_case(value: str) -> str:
    """Convert to camelCase (``HelloWorld`` -> ``helloWorld``)."""
    pascal = to_pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


def to_kebab_case(value: str) -> str:
    """Convert to kebab-case (``HelloWorld`` -> ``hello-world``)."""
    return "-".join(word.lower() for word in split_words(value))


def to_snake_case(value: str) -> str:
    """Convert to snake_case (``HelloWorld`` -> ``hello_world``)."""
    return "_".join(word.lower() for word in split_words(value))


def to_constant_case(value: str) -> str:
    """Convert to CONSTANT_CASE (``hello-world`` -> ``HELLO_WORLD``)."""
    return "_".join(word.upper() for word in split_words(value))


def to_title_case(value: str) -> str:
    """Convert to Title Case (``user-profile`` -> ``User Profile``)."""
    return " ".join(_capitalize(word) for word in split_words(value))


def pluralize(value: str) -> str:
    """Return a naive English plural of ``value``.

    Only the trailing characters are inflected, so casing of the rest is
    preserved.
    """
    if not value:
        return value
    lower = value.lower()
    if lower.endswith("y") and len(value) > 1 and lower[-2] not in "aeiou":
        return value[:-1] + "ies"
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return value + "es"
    return value + "s"

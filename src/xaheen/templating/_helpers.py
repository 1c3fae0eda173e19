"""Default Handlebars helpers.

pybars calls a simple helper as ``helper(this, *args, **hash)`` and a block
helper as ``helper(this, options, *args, **hash)``. Helpers that produce text
return ``pybars.strlist`` so the output is inserted without HTML escaping.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sized
from datetime import UTC, date, datetime, time
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

from pybars import strlist

from xaheen.utils import (
    pluralize,
    to_camel_case,
    to_constant_case,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
    to_title_case,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from ._registry import HelperRegistry

DEFAULT_LOCALE = "nb"

# Localized UI strings used by generated components
TRANSLATIONS: dict[str, dict[str, str]] = {
    "nb": {
        "common.save": "Lagre",
        "common.cancel": "Avbryt",
        "common.delete": "Slett",
        "common.edit": "Rediger",
        "common.close": "Lukk",
        "common.submit": "Send inn",
        "common.search": "Søk",
        "common.loading": "Laster...",
        "common.error": "Noe gikk galt",
        "common.retry": "Prøv igjen",
        "common.noResults": "Ingen resultater",
        "common.welcome": "Velkommen",
        "common.back": "Tilbake",
        "common.next": "Neste",
    },
    "en": {
        "common.save": "Save",
        "common.cancel": "Cancel",
        "common.delete": "Delete",
        "common.edit": "Edit",
        "common.close": "Close",
        "common.submit": "Submit",
        "common.search": "Search",
        "common.loading": "Loading...",
        "common.error": "Something went wrong",
        "common.retry": "Try again",
        "common.noResults": "No results",
        "common.welcome": "Welcome",
        "common.back": "Back",
        "common.next": "Next",
    },
}

# Language aliases accepted for the ``locale`` argument of ``t``
_LANGUAGE_ALIASES: dict[str, str] = {"no": "nb", "nn": "nb"}

# Bokmål labels for ``norwegianText``; unknown keys fall back to the default
NORWEGIAN_TEXT: dict[str, str] = {
    "button.save": "Lagre",
    "button.cancel": "Avbryt",
    "button.delete": "Slett",
    "button.edit": "Rediger",
    "label.name": "Navn",
    "label.email": "E-post",
    "label.phone": "Telefon",
    "error.required": "Dette feltet er påkrevd",
    "error.invalid": "Ugyldig verdi",
}

# ``formatDate`` pattern tokens and their strftime directives
_DATE_TOKENS: dict[str, str] = {
    "YYYY": "%Y",
    "MM": "%m",
    "DD": "%d",
    "HH": "%H",
    "mm": "%M",
    "ss": "%S",
}
_DATE_TOKEN_RE = re.compile("|".join(_DATE_TOKENS))


def _raw(value: object) -> strlist:
    return strlist([value if isinstance(value, str) else str(value)])


def _text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, strlist):
        return str(value)
    return value if isinstance(value, str) else str(value)


def _case(transform: Callable[[str], str]) -> Callable[..., strlist]:
    def helper(_this: object, value: object = None, *_args: object) -> strlist:
        return _raw(transform(_text(value)))

    helper.__name__ = transform.__name__
    return helper


# -----------------------------------------------------------------------------
# Comparison and logic
# -----------------------------------------------------------------------------


def _eq(_this: object, left: object = None, right: object = None) -> bool:
    return left == right


def _ne(_this: object, left: object = None, right: object = None) -> bool:
    return left != right


def _compare(
    left: object, right: object, check: Callable[[Any, Any], bool]
) -> bool:
    try:
        return check(left, right)
    except TypeError:
        return False


def _lt(_this: object, left: object = None, right: object = None) -> bool:
    return _compare(left, right, lambda a, b: a < b)


def _gt(_this: object, left: object = None, right: object = None) -> bool:
    return _compare(left, right, lambda a, b: a > b)


def _gte(_this: object, left: object = None, right: object = None) -> bool:
    return _compare(left, right, lambda a, b: a >= b)


def _lte(_this: object, left: object = None, right: object = None) -> bool:
    return _compare(left, right, lambda a, b: a <= b)


def _and(_this: object, *values: object) -> bool:
    return all(values)


def _or(_this: object, *values: object) -> bool:
    return any(values)


def _not(_this: object, value: object = None) -> bool:
    return not value


def _includes(_this: object, collection: object = None, item: object = None) -> bool:
    if collection is None:
        return False
    try:
        return item in collection  # pyright: ignore[reportOperatorIssue]
    except TypeError:
        return False


# -----------------------------------------------------------------------------
# Arrays
# -----------------------------------------------------------------------------


def _join(_this: object, items: object = None, separator: object = ", ") -> strlist:
    if not items or isinstance(items, str | Mapping):
        return strlist()
    sep = _text(separator)
    return _raw(sep.join(_text(item) for item in items))  # pyright: ignore[reportGeneralTypeIssues]


def _length(_this: object, value: object = None) -> int:
    if isinstance(value, Sized):
        return len(value)
    return 0


def _first(_this: object, items: object = None) -> object:
    if isinstance(items, list | tuple) and items:
        return items[0]
    return None


def _last(_this: object, items: object = None) -> object:
    if isinstance(items, list | tuple) and items:
        return items[-1]
    return None


# -----------------------------------------------------------------------------
# Formatting
# -----------------------------------------------------------------------------


def _json(_this: object, value: object = None, indent: object = 2) -> strlist:
    spaces = int(indent) if indent else 0  # pyright: ignore[reportArgumentType]
    if spaces <= 0:
        return _raw(
            json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
        )
    return _raw(json.dumps(value, indent=spaces, ensure_ascii=False, default=str))


def _indent(_this: object, text: object = None, spaces: object = 2) -> strlist:
    prefix = " " * int(spaces)  # pyright: ignore[reportArgumentType]
    lines = _text(text).split("\n")
    return _raw("\n".join(prefix + line if line else line for line in lines))


def _comment(_this: object, text: object = None, style: object = "//") -> strlist:
    marker = _text(style)
    return _raw("\n".join(f"{marker} {line}" for line in _text(text).split("\n")))


def _upper(_this: object, value: object = None) -> strlist:
    return _raw(_text(value).upper())


def _lower(_this: object, value: object = None) -> strlist:
    return _raw(_text(value).lower())


# -----------------------------------------------------------------------------
# Paths
# -----------------------------------------------------------------------------


def _basename(_this: object, path: object = None) -> strlist:
    return _raw(PurePosixPath(_text(path)).name)


def _dirname(_this: object, path: object = None) -> strlist:
    return _raw(str(PurePosixPath(_text(path)).parent))


def _extname(_this: object, path: object = None) -> strlist:
    name = PurePosixPath(_text(path)).name
    dot = name.rfind(".")
    # Leading dots mark hidden files, not extensions
    return _raw(name[dot:] if dot > 0 else "")


# -----------------------------------------------------------------------------
# Dates
# -----------------------------------------------------------------------------


def _now(_this: object, *_args: object) -> strlist:
    return _raw(datetime.now(UTC).isoformat())


def _year(_this: object, *_args: object) -> strlist:
    return _raw(str(datetime.now(UTC).year))


def _iso_date(_this: object, value: object = None) -> strlist:
    if value is None or value == "":
        return _raw(date.today().isoformat())
    if isinstance(value, datetime):
        return _raw(value.date().isoformat())
    if isinstance(value, date):
        return _raw(value.isoformat())
    return _raw(_text(value)[:10])


def _to_datetime(value: object) -> datetime:
    if value is None or value == "":
        return datetime.now(UTC)
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    return datetime.fromisoformat(_text(value))


def _format_date(
    _this: object, value: object = None, pattern: object = "YYYY-MM-DD"
) -> strlist:
    moment = _to_datetime(value)
    return _raw(
        _DATE_TOKEN_RE.sub(
            lambda m: moment.strftime(_DATE_TOKENS[m.group()]), _text(pattern)
        )
    )


# -----------------------------------------------------------------------------
# Localization
# -----------------------------------------------------------------------------


def normalize_language(locale: str | None) -> str:
    """Map a locale such as ``nb-NO`` or ``en_US`` to a table language."""
    if not locale:
        return DEFAULT_LOCALE
    language = locale.replace("_", "-").split("-", 1)[0].lower()
    return _LANGUAGE_ALIASES.get(language, language)


def translate(key: str, default: str | None = None, locale: str | None = None) -> str:
    """Look up a UI string, falling back to ``default`` and then ``key``."""
    table = TRANSLATIONS.get(normalize_language(locale), {})
    if key in table:
        return table[key]
    return default if default is not None else key


def _t(
    this: object,
    key: object = None,
    default: object = None,
    locale: object = None,
) -> strlist:
    # ``this`` is a dict or a pybars Scope; both expose get()
    getter = getattr(this, "get", None)
    if locale is None and callable(getter):
        locale = getter("locale")
    return _raw(
        translate(
            _text(key),
            None if default is None else _text(default),
            None if locale is None else _text(locale),
        )
    )


def _norwegian_text(
    _this: object, key: object = None, fallback: object = None
) -> strlist:
    name = _text(key)
    return _raw(NORWEGIAN_TEXT.get(name) or _text(fallback) or name)


# -----------------------------------------------------------------------------
# Blocks
# -----------------------------------------------------------------------------


def _block(this: object, options: Mapping[str, Any], *_args: object) -> object:
    return options["fn"](this)


def _branch(this: object, options: Mapping[str, Any], matched: bool) -> object:
    if matched:
        return options["fn"](this)
    inverse = options.get("inverse")
    return inverse(this) if inverse is not None else strlist()


def _if_platform(
    this: object,
    options: Mapping[str, Any],
    platform: object = None,
    expected: object = None,
) -> object:
    return _branch(this, options, platform == expected)


def _if_framework(
    this: object,
    options: Mapping[str, Any],
    framework: object = None,
    expected: object = None,
) -> object:
    return _branch(this, options, framework == expected)


DEFAULT_HELPERS: dict[str, Callable[..., object]] = {
    "pascalCase": _case(to_pascal_case),
    "camelCase": _case(to_camel_case),
    "kebabCase": _case(to_kebab_case),
    "snakeCase": _case(to_snake_case),
    "constantCase": _case(to_constant_case),
    "titleCase": _case(to_title_case),
    "pluralize": _case(pluralize),
    "upperCase": _upper,
    "lowerCase": _lower,
    "eq": _eq,
    "ne": _ne,
    "lt": _lt,
    "gt": _gt,
    "gte": _gte,
    "lte": _lte,
    "and": _and,
    "or": _or,
    "not": _not,
    "includes": _includes,
    "join": _join,
    "length": _length,
    "first": _first,
    "last": _last,
    "json": _json,
    "indent": _indent,
    "comment": _comment,
    "basename": _basename,
    "dirname": _dirname,
    "extname": _extname,
    "now": _now,
    "year": _year,
    "isoDate": _iso_date,
    "formatDate": _format_date,
    "t": _t,
    "norwegianText": _norwegian_text,
    "block": _block,
    "ifPlatform": _if_platform,
    "ifFramework": _if_framework,
}


def register_default_helpers(registry: HelperRegistry) -> None:
    """Register every default helper on ``registry``."""
    for name, helper in DEFAULT_HELPERS.items():
        registry.register_helper(name, helper)

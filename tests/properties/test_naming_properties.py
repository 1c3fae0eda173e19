from hypothesis import given, settings, strategies as st

from xaheen.utils import (
    split_words,
    to_camel_case,
    to_constant_case,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
)

# Lowercase words joined by any separator the naming functions accept
words = st.lists(st.from_regex(r"[a-z]{1,8}", fullmatch=True), min_size=1, max_size=5)
separators = st.sampled_from(["-", "_", " ", "."])


@given(parts=words, sep=separators)
@settings(deadline=None)
def test_every_case_preserves_the_words(parts: list[str], sep: str) -> None:
    name = sep.join(parts)
    expected = "-".join(parts)

    for transform in (
        to_pascal_case,
        to_camel_case,
        to_snake_case,
        to_kebab_case,
    ):
        assert to_kebab_case(transform(name)) == expected


@given(parts=words, sep=separators)
@settings(deadline=None)
def test_kebab_case_is_idempotent(parts: list[str], sep: str) -> None:
    kebab = to_kebab_case(sep.join(parts))

    assert to_kebab_case(kebab) == kebab


@given(parts=words)
@settings(deadline=None)
def test_pascal_case_words_are_capitalised(parts: list[str]) -> None:
    pascal = to_pascal_case("_".join(parts))

    assert [w.lower() for w in split_words(pascal)] == parts
    assert all(w[0].isupper() for w in split_words(pascal))


@given(value=st.text(max_size=30))
@settings(deadline=None)
def test_transforms_never_raise(value: str) -> None:
    for transform in (to_pascal_case, to_kebab_case, to_snake_case):
        result = transform(value)
        assert isinstance(result, str)


@given(parts=st.lists(st.from_regex(r"[a-z]{1,8}", fullmatch=True), min_size=2))
@settings(deadline=None)
def test_constant_case_round_trips_through_kebab(parts: list[str]) -> None:
    constant = to_constant_case("-".join(parts))

    assert constant == "_".join(p.upper() for p in parts)
    assert to_kebab_case(constant) == "-".join(parts)

from hypothesis import given, settings, strategies as st

from xaheen.templating import (
    Block,
    InheritanceResolver,
    Template,
    strip_blocks,
    wrap_block,
)

# Text that cannot form Handlebars block tags
plain = st.text(alphabet=st.characters(exclude_characters="{}"), max_size=20)
names = st.from_regex(r"[a-z][a-z0-9_-]{0,8}", fullmatch=True)


@given(content=plain)
@settings(deadline=None)
def test_parentless_resolution_is_identity(content: str) -> None:
    template = Template(id="solo", content=content)
    resolver = InheritanceResolver(lambda _id: template)

    assert resolver.resolve(template) == content


@given(name=names, content=plain)
@settings(deadline=None)
def test_strip_undoes_wrap(name: str, content: str) -> None:
    assert strip_blocks(wrap_block(name, content)) == content


@given(prefix=plain, default=plain, override=plain, suffix=plain, name=names)
@settings(deadline=None)
def test_override_replaces_only_the_block(
    prefix: str, default: str, override: str, suffix: str, name: str
) -> None:
    parent = Template(id="base", content=prefix + wrap_block(name, default) + suffix)
    child = Template(id="child", parent="base", blocks=[Block(name, override)])
    resolver = InheritanceResolver({"base": parent, "child": child}.__getitem__)

    assert resolver.resolve(child) == prefix + override + suffix

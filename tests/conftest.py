"""Shared fixtures: a small rustdoc docset written to a temporary directory."""

from __future__ import annotations

from pathlib import Path

import pytest

from rustdex.index.indexer import Indexer
from rustdex.index.storage import SQLiteIndexStore


def rustdoc_page(title: str, main: str) -> str:
    return (
        '<!DOCTYPE html><html lang="en"><head><meta charset="utf-8">'
        f"<title>{title}</title></head>\n"
        '<body class="rustdoc"><main>'
        f'<section id="main-content" class="content">{main}</section>'
        "</main></body></html>\n"
    )


REDIRECT_PAGE = (
    '<!DOCTYPE html>\n<html lang="en">\n<head>\n'
    '<meta http-equiv="refresh" content="0;URL=../struct.Bar.html">\n'
    "<title>Redirection</title>\n</head>\n"
    '<body><p>Redirecting to <a href="../struct.Bar.html">../struct.Bar.html</a>...</p></body>\n'
    "</html>\n"
)

STRUCT_BAR = rustdoc_page(
    "Bar in foo - Rust",
    '<div class="main-heading"><h1>Struct <span class="struct">Bar</span></h1>'
    '<span class="sub-heading"><a class="src" href="../src/foo/lib.rs.html#10-20">Source</a></span></div>'
    '<pre class="rust item-decl"><code>pub struct Bar { /* private fields */ }</code></pre>'
    '<details class="toggle top-doc" open><summary class="hideme"><span>Expand description</span></summary>'
    '<div class="docblock"><p>A bar.</p></div></details>'
    '<h2 id="implementations" class="section-header">Implementations</h2>'
    '<div id="implementations-list"><details class="toggle implementors-toggle" open>'
    '<summary><section id="impl-Bar" class="impl"><h3 class="code-header">impl Bar</h3></section></summary>'
    '<div class="impl-items">'
    '<details class="toggle method-toggle" open><summary><section id="method.new" class="method">'
    '<a class="src rightside" href="../src/foo/lib.rs.html#12">Source</a>'
    '<h4 class="code-header">pub fn new() -&gt; Bar</h4></section></summary>'
    '<div class="docblock"><p>Creates a new bar.</p></div></details>'
    '<details class="toggle method-toggle" open><summary><section id="method.baz" class="method">'
    '<h4 class="code-header">pub fn baz(&amp;self)</h4></section></summary>'
    '<div class="docblock"><p>Does baz.</p></div></details>'
    "</div></details></div>"
    '<h2 id="trait-implementations" class="section-header">Trait Implementations</h2>'
    '<div id="trait-implementations-list"><details class="toggle implementors-toggle" open>'
    '<summary><section id="impl-Clone-for-Bar" class="impl">'
    '<h3 class="code-header">impl Clone for Bar</h3></section></summary>'
    '<div class="impl-items"><details class="toggle method-toggle" open><summary>'
    '<section id="method.clone" class="method trait-impl">'
    '<h4 class="code-header">fn clone(&amp;self) -&gt; Bar</h4></section></summary>'
    '<div class="docblock"><p>Returns a copy of the value. CLONE_DOC</p></div></details>'
    "</div></details></div>",
)

ENUM_VALUE = rustdoc_page(
    "Value in foo - Rust",
    '<div class="main-heading"><h1>Enum <span class="enum">Value</span></h1>'
    '<span class="sub-heading"><a class="src" href="../src/foo/missing.rs.html#1">Source</a></span></div>'
    '<pre class="rust item-decl"><code>pub enum Value { Null, Array(Vec&lt;Value&gt;) }</code></pre>'
    '<details class="toggle top-doc" open><summary class="hideme"><span>Expand description</span></summary>'
    '<div class="docblock"><p>Any value.</p></div></details>'
    '<h2 id="variants" class="variants section-header">Variants</h2>'
    '<div class="variants">'
    '<section id="variant.Null" class="variant"><a href="#variant.Null" class="anchor">§</a>'
    '<h3 class="code-header">Null</h3></section>'
    '<div class="docblock"><p>Represents null.</p></div>'
    '<section id="variant.Array" class="variant"><a href="#variant.Array" class="anchor">§</a>'
    '<h3 class="code-header">Array(Vec&lt;Value&gt;)</h3></section>'
    '<div class="docblock"><p>Represents an array.</p></div>'
    "</div>"
    '<h2 id="implementations" class="section-header">Implementations</h2>'
    '<div id="implementations-list"><details class="toggle implementors-toggle" open>'
    '<summary><section id="impl-Value" class="impl"><h3 class="code-header">impl Value</h3></section></summary>'
    '<div class="impl-items"><details class="toggle method-toggle" open><summary>'
    '<section id="method.is_null" class="method">'
    '<h4 class="code-header">pub fn is_null(&amp;self) -&gt; bool</h4></section></summary>'
    '<div class="docblock"><p>Checks for null.</p></div></details>'
    "</div></details></div>",
)

TYPE_ALIAS = rustdoc_page(
    "Alias in foo - Rust",
    '<div class="main-heading"><h1>Type Alias <span class="type">Alias</span></h1></div>'
    '<pre class="rust item-decl"><code>pub type Alias = Bar;</code></pre>',
)

TYPE_EITHER = rustdoc_page(
    "Either in foo - Rust",
    '<div class="main-heading"><h1>Type Alias <span class="type">Either</span></h1></div>'
    '<pre class="rust item-decl"><code>pub type Either = Choice&lt;Bar, Value&gt;;</code></pre>'
    '<h2 id="variants" class="variants section-header">Variants</h2>'
    '<div class="variants">'
    '<section id="variant.Left" class="variant"><h3 class="code-header">Left(Bar)</h3></section>'
    '<section id="variant.Right" class="variant"><h3 class="code-header">Right(Value)</h3></section>'
    "</div>",
)

SOURCE_PAGE = (
    '<!DOCTYPE html><html lang="en"><head><title>lib.rs - source</title></head>'
    '<body class="src"><main><div class="example-wrap"><pre class="rust"><code>'
    '<a href="#1" id="1" data-nosnippet>1</a><span class="kw">pub struct </span>Bar;\n'
    '<a href="#2" id="2" data-nosnippet>2</a><span class="kw">impl </span>Bar {}\n'
    "</code></pre></div></main></body></html>\n"
)


def _simple(title: str, heading: str, declaration: str) -> str:
    return rustdoc_page(
        title,
        f'<div class="main-heading"><h1>{heading}</h1></div>'
        f'<pre class="rust item-decl"><code>{declaration}</code></pre>'
        '<details class="toggle top-doc" open><div class="docblock"><p>Docs.</p></div></details>',
    )


DOCSET_FILES = {
    "crates.js": "window.ALL_CRATES = [\"foo\"];",
    "foo/index.html": _simple("foo - Rust", "Crate foo", "crate foo"),
    "foo/all.html": _simple("List of all items", "List of all items", ""),
    "foo/struct.Bar.html": STRUCT_BAR,
    "foo/enum.Value.html": ENUM_VALUE,
    "foo/type.Alias.html": TYPE_ALIAS,
    "foo/type.Either.html": TYPE_EITHER,
    "foo/fn.helper.html": _simple("helper in foo", "Function helper", "pub fn helper()"),
    "foo/macro.json.html": _simple("json in foo", "Macro json", "macro_rules! json"),
    "foo/attr.route.html": _simple("route in foo", "Attribute Macro route", "#[route]"),
    "foo/constant.MAX.html": _simple("MAX in foo", "Constant MAX", "pub const MAX: u32"),
    "foo/trait.Visit.html": _simple("Visit in foo", "Trait Visit", "pub trait Visit"),
    "foo/sidebar-items.js": "window.SIDEBAR_ITEMS = {};",
    "foo/inner/index.html": _simple("foo::inner - Rust", "Module inner", "mod inner"),
    "foo/inner/struct.Deep.html": _simple("Deep in foo::inner", "Struct Deep", "pub struct Deep"),
    "foo/inner/struct.Bar.html": REDIRECT_PAGE,
    # Never traversed: these names would not classify.
    "src/foo/lib.rs.html": SOURCE_PAGE,
    "src/foo/unknown.Thing.html": "<html></html>",
    "implementors/foo/bogus.Visit.html": "<html></html>",
}

EXPECTED_ENTRIES = {
    ("foo", "Module", "foo/index.html"),
    ("foo::inner", "Module", "foo/inner/index.html"),
    ("Bar", "Struct", "foo/struct.Bar.html"),
    ("Bar::new", "Method", "foo/struct.Bar.html#method.new"),
    ("Bar::baz", "Method", "foo/struct.Bar.html#method.baz"),
    ("Bar::clone", "Method", "foo/struct.Bar.html#method.clone"),
    ("Value", "Enum", "foo/enum.Value.html"),
    ("Value::Null", "Variant", "foo/enum.Value.html#variant.Null"),
    ("Value::Array", "Variant", "foo/enum.Value.html#variant.Array"),
    ("Value::is_null", "Method", "foo/enum.Value.html#method.is_null"),
    ("Alias", "Type", "foo/type.Alias.html"),
    ("Either", "Type", "foo/type.Either.html"),
    ("Either::Left", "Variant", "foo/type.Either.html#variant.Left"),
    ("Either::Right", "Variant", "foo/type.Either.html#variant.Right"),
    ("helper", "Function", "foo/fn.helper.html"),
    ("json", "Macro", "foo/macro.json.html"),
    ("route", "Attribute", "foo/attr.route.html"),
    ("MAX", "Constant", "foo/constant.MAX.html"),
    ("Visit", "Trait", "foo/trait.Visit.html"),
    ("inner::Deep", "Struct", "foo/inner/struct.Deep.html"),
}


def write_docset(root: Path, files: dict[str, str]) -> Path:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def docset(tmp_path: Path) -> Path:
    """A docset root laid out the way docs.rs archives unpack."""
    return write_docset(tmp_path / "docs", DOCSET_FILES)


@pytest.fixture
def store(tmp_path: Path):
    store = SQLiteIndexStore(tmp_path / "index.sqlite")
    yield store
    store.close()


@pytest.fixture
def indexed_store(docset: Path, store: SQLiteIndexStore) -> SQLiteIndexStore:
    Indexer(store).index(docset)
    return store

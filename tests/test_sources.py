from __future__ import annotations

import io

from starlette.datastructures import FormData, Headers, QueryParams, UploadFile

from simpleforms.sources import (
    MappingSource,
    StarletteSource,
    merge_file_metadata,
    parse_bracketed_items,
)


def test_mapping_source_selects_bucket_by_method() -> None:
    source = MappingSource(post={"f": {"a": "post"}}, get={"f": {"a": "get"}, "bad": "scalar"})

    assert source.values("f", "POST") == {"a": "post"}
    assert source.values("f", "GET") == {"a": "get"}
    assert source.values("bad", "GET") is None
    assert source.values("missing", "POST") is None
    assert source.files("f") is None


def test_parse_bracketed_items_nests_names() -> None:
    items = [
        ("f[name]", "Ada"),
        ("f[colors][]", "red"),
        ("f[colors][]", "blue"),
        ("f[address][city]", "Oslo"),
        ("plain", "x"),
    ]

    assert parse_bracketed_items(items) == {
        "f": {"name": "Ada", "colors": ["red", "blue"], "address": {"city": "Oslo"}},
        "plain": "x",
    }


def test_starlette_source_reads_form_and_query() -> None:
    form = FormData([("signup[name]", "Ada"), ("signup[colors][]", "red"), ("signup[colors][]", "blue")])
    query = QueryParams("search[q]=duck&search[page]=2")

    source = StarletteSource.from_multidicts(form=form, query=query)

    assert source.values("signup", "POST") == {"name": "Ada", "colors": ["red", "blue"]}
    assert source.values("search", "GET") == {"q": "duck", "page": "2"}
    assert source.values("signup", "GET") is None


def test_starlette_source_collects_uploads_as_metadata() -> None:
    upload = UploadFile(
        file=io.BytesIO(b"abc"),
        size=3,
        filename="a.png",
        headers=Headers({"content-type": "image/png"}),
    )
    form = FormData([("up[avatar]", upload), ("up[note]", "hi")])

    source = StarletteSource.from_multidicts(form=form)

    assert source.values("up", "POST") == {"note": "hi"}
    metadata = source.files("up")["avatar"]
    assert metadata["name"] == "a.png"
    assert metadata["type"] == "image/png"
    assert metadata["size"] == 3
    assert metadata["file"] is upload


def test_merge_grouped_file_metadata() -> None:
    files = {"name": {"avatar": "a.png"}, "type": {"avatar": "image/png"}, "error": {"avatar": 0}}

    merged = merge_file_metadata({"avatar": "ignored", "name": "Ada"}, files)

    assert merged == {"avatar": {"name": "a.png", "type": "image/png", "error": 0}, "name": "Ada"}


def test_merge_per_field_metadata_and_lists() -> None:
    files = {"avatar": {"name": "a.png"}, "docs": [{"name": "1.pdf"}, {"name": "2.pdf"}]}

    merged = merge_file_metadata({"avatar": {"caption": "me"}}, files)

    assert merged["avatar"] == {"caption": "me", "name": "a.png"}
    assert merged["docs"] == [{"name": "1.pdf"}, {"name": "2.pdf"}]


def test_merge_without_files_copies_values() -> None:
    values = {"name": "Ada"}

    merged = merge_file_metadata(values, None)

    assert merged == values
    assert merged is not values

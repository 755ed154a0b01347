"""Inbound submission data sources.

A source hands the form the nested mapping submitted under its form id and,
separately, the uploaded-file metadata keyed the same way. Uploads are folded
into the form data under their field keys; when a text value and an upload
share a key, the upload metadata wins.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol

from starlette.datastructures import FormData, QueryParams, UploadFile

from .core.paths import set_path

# Upload metadata keys grouped per attribute, e.g. {"name": {"avatar": "a.png"}}.
_GROUPED_FILE_KEYS = frozenset({"name", "type", "tmp_name", "error", "size", "full_path"})


class SubmissionSource(Protocol):
    """Supplies raw submitted data for a form."""

    def values(self, form_id: str, method: str) -> Mapping[str, Any] | None: ...

    def files(self, form_id: str) -> Mapping[str, Any] | None: ...


class MappingSource:
    """Submission source over already-parsed nested mappings.

    ``post`` and ``get`` map form ids to their submitted values, ``files``
    maps form ids to upload metadata.
    """

    def __init__(
        self,
        *,
        post: Mapping[str, Any] | None = None,
        get: Mapping[str, Any] | None = None,
        files: Mapping[str, Any] | None = None,
    ) -> None:
        self._post = dict(post or {})
        self._get = dict(get or {})
        self._files = dict(files or {})

    def values(self, form_id: str, method: str) -> Mapping[str, Any] | None:
        bucket = self._post if method == "POST" else self._get
        value = bucket.get(form_id)
        return value if isinstance(value, Mapping) else None

    def files(self, form_id: str) -> Mapping[str, Any] | None:
        value = self._files.get(form_id)
        return value if isinstance(value, Mapping) else None


class StarletteSource(MappingSource):
    """Submission source built from Starlette multi-dicts with bracketed names.

    ``form_1[colors][]=red&form_1[colors][]=blue`` becomes
    ``{"form_1": {"colors": ["red", "blue"]}}``; :class:`UploadFile` values
    are collected as file metadata.
    """

    @classmethod
    def from_multidicts(
        cls,
        *,
        form: FormData | None = None,
        query: QueryParams | None = None,
    ) -> "StarletteSource":
        post: dict[str, Any] = {}
        files: dict[str, Any] = {}
        if form is not None:
            for name, value in form.multi_items():
                if isinstance(value, UploadFile):
                    set_path(files, name, describe_upload(value))
                else:
                    set_path(post, name, value)
        get = parse_bracketed_items(query.multi_items()) if query is not None else {}
        return cls(post=post, get=get, files=files)


def parse_bracketed_items(items: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    """Nest ``(name, value)`` pairs by their bracketed names."""

    tree: dict[str, Any] = {}
    for name, value in items:
        set_path(tree, name, value)
    return tree


def describe_upload(upload: UploadFile) -> dict[str, Any]:
    return {
        "name": upload.filename,
        "type": upload.content_type,
        "size": upload.size,
        "file": upload,
    }


def merge_file_metadata(values: Mapping[str, Any], files: Mapping[str, Any] | None) -> dict[str, Any]:
    """Fold upload metadata into a copy of ``values`` under matching field keys.

    ``files`` may be grouped per metadata attribute
    (``{"name": {"avatar": "a.png"}, "size": {"avatar": 12}}``) or per field
    (``{"avatar": {"name": "a.png", "size": 12}}``).
    """

    data = dict(values)
    if not files:
        return data
    for field_id, metadata in _files_per_field(files).items():
        existing = data.get(field_id)
        if isinstance(metadata, Mapping) and isinstance(existing, Mapping):
            data[field_id] = {**existing, **metadata}
        else:
            data[field_id] = metadata
    return data


def _files_per_field(files: Mapping[str, Any]) -> dict[str, Any]:
    grouped = all(key in _GROUPED_FILE_KEYS and isinstance(value, Mapping) for key, value in files.items())
    per_field: dict[str, Any] = {}
    if grouped:
        for file_key, fields in files.items():
            for field_id, value in fields.items():
                per_field.setdefault(str(field_id), {})[file_key] = value
        return per_field
    for field_id, metadata in files.items():
        # Multiple uploads under one "field[]" name arrive as a list of metadata.
        if isinstance(metadata, Mapping):
            per_field[str(field_id)] = dict(metadata)
        elif isinstance(metadata, list):
            per_field[str(field_id)] = list(metadata)
    return per_field


__all__ = [
    "MappingSource",
    "StarletteSource",
    "SubmissionSource",
    "describe_upload",
    "merge_file_metadata",
    "parse_bracketed_items",
]

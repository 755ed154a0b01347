"""Whitelist -> filter -> validate pipeline over submitted form data."""
from __future__ import annotations

import logging
from collections import deque
from typing import Any, Iterable, Mapping, Sequence

from ..constants import RESERVED_KEYS
from ..utils.collections import copy_structure, unique_everseen
from ..validation import Validator
from .filters import FilterCallable, FilterSpec, apply_filter, normalize_filter_declarations
from .paths import FieldDataStore
from .references import DEFAULT_FIELD_REFERENCE, FieldReferencePattern

logger = logging.getLogger(__name__)


class FormPipeline:
    """Derive filtered data from a :class:`FieldDataStore` and feed it to a validator.

    Whitelisted and filtered data are computed once and cached. The filter
    queue is drained on the first :meth:`filter` call, so later calls return
    the cached result without running any filter again; declaring new
    filters afterwards queues them for the next call. :meth:`reset` drops the
    cached data after the store changed; consumed filters are not run again.
    """

    def __init__(
        self,
        store: FieldDataStore,
        *,
        validator: Validator | None = None,
        custom_filters: Mapping[str, FilterCallable] | None = None,
        reference_pattern: FieldReferencePattern = DEFAULT_FIELD_REFERENCE,
    ) -> None:
        self.store = store
        self.validator = validator
        self.reference_pattern = reference_pattern
        self._custom_filters: dict[str, FilterCallable] = dict(custom_filters or {})
        self._whitelisted_fields: list[str] = []
        self._queue: deque[FilterSpec] = deque()
        self._whitelisted: dict[str, Any] | None = None
        self._filtered: dict[str, Any] | None = None

    @property
    def whitelisted_fields(self) -> list[str]:
        return list(self._whitelisted_fields)

    @property
    def pending_filters(self) -> tuple[FilterSpec, ...]:
        return tuple(self._queue)

    @property
    def custom_filters(self) -> dict[str, FilterCallable]:
        return dict(self._custom_filters)

    def add_whitelisted_fields(self, fields: str | Iterable[str]) -> list[str]:
        if isinstance(fields, str):
            fields = [fields]
        self._whitelisted_fields = list(unique_everseen([*self._whitelisted_fields, *fields]))
        self.reset()
        return self.whitelisted_fields

    def add_filters(self, declarations: Mapping[str, Any]) -> list[FilterSpec]:
        specs = normalize_filter_declarations(declarations, pattern=self.reference_pattern)
        self._queue.extend(specs)
        return specs

    def add_custom_filters(self, filters: Mapping[str, FilterCallable]) -> None:
        self._custom_filters.update(filters)

    def reset(self) -> None:
        """Drop cached results so the next call derives them from the store again.

        Filters that already ran stay consumed; only pending filters run on the
        next call.
        """

        self._whitelisted = None
        self._filtered = None

    def whitelist(self) -> dict[str, Any]:
        """Return the submitted data restricted to the whitelisted fields.

        Without a whitelist the store's data is returned as-is.
        """

        if self._whitelisted is None:
            raw = self.store.data
            if self._whitelisted_fields:
                allowed = {*self._whitelisted_fields, *RESERVED_KEYS}
                self._whitelisted = {key: value for key, value in raw.items() if key in allowed}
            else:
                self._whitelisted = raw
        return self._whitelisted

    def filter(self) -> dict[str, Any]:
        """Run every queued filter in declaration order and return the filtered data."""

        if self._filtered is None:
            self._filtered = copy_structure(self.whitelist())
        executed = 0
        while self._queue:
            spec = self._queue.popleft()
            if apply_filter(
                spec,
                self._filtered,
                custom_filters=self._custom_filters,
                pattern=self.reference_pattern,
            ):
                executed += 1
        if executed:
            logger.debug("Applied %d filter(s)", executed)
        return self._filtered

    def validate(self) -> Mapping[str, bool]:
        if self.validator is None:
            return {}
        self.validator.set_data(self.filter())
        return self.validator.validate()

    def get_errors(self) -> Mapping[str, Sequence[str]]:
        if self.validator is None:
            return {}
        self.validator.set_data(self.filter())
        return self.validator.get_errors()


__all__ = ["FormPipeline"]

# ui/components/selection.py
"""
Record pickers keyed by id.

Selectboxes hold record ids and render labels through `format_func`, so two
records with the same label (two projects named "Website", two identical
expenses on one day) stay separately selectable.
"""

from __future__ import annotations

from typing import Callable, Dict, Generic, List, Optional, Sequence, TypeVar

import streamlit as st

T = TypeVar("T")


class RecordChoices(Generic[T]):
    """Ids in display order, plus the label and record behind each id.

    With `none_label` set, `None` is offered first (e.g. "no linked project").
    """

    def __init__(
        self,
        records: Sequence[T],
        describe: Callable[[T], str],
        none_label: Optional[str] = None,
    ):
        self._by_id: Dict[str, T] = {str(r.id): r for r in records}
        self._describe = describe
        self._none_label = none_label

    @property
    def ids(self) -> List[Optional[str]]:
        leading: List[Optional[str]] = [None] if self._none_label is not None else []
        return leading + list(self._by_id)

    def label(self, record_id: Optional[str]) -> str:
        if record_id is None:
            return self._none_label or ""
        return self._describe(self._by_id[record_id])

    def get(self, record_id: Optional[str]) -> Optional[T]:
        return None if record_id is None else self._by_id[record_id]


def select_record(label: str, choices: RecordChoices[T], container=st, **kwargs) -> Optional[str]:
    """Render a selectbox over `choices` and return the chosen id."""
    return container.selectbox(label, choices.ids, format_func=choices.label, **kwargs)

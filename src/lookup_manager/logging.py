"""Structured logging helpers for the lookup manager."""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping

ROOT_LOGGER_NAME = "lookup_manager"


class LookupLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that attaches the component name and an optional context
    mapping to every record it emits.

    Call sites pass ``context={...}`` alongside the message; the mapping is
    merged with any ``extra={"context": ...}`` already supplied and exposed
    on the record as ``record.context``.
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        context = kwargs.pop("context", None)
        if context is not None and not isinstance(context, Mapping):
            raise TypeError("context must be a mapping")  # noqa: TRY003

        extra = dict(kwargs.get("extra") or {})
        merged: dict[str, Any] = {}
        existing = extra.get("context")
        if isinstance(existing, Mapping):
            merged.update(existing)
        if context:
            merged.update(context)

        extra["component"] = self.extra["component"]  # type: ignore[index]
        extra["context"] = merged
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(component: str) -> LookupLoggerAdapter:
    """
    Return a logger adapter namespaced below ``lookup_manager``.

    Parameters:
        component (str): Dotted component name, e.g. ``"entities.lookup"``.

    Returns:
        LookupLoggerAdapter: Adapter for ``lookup_manager.<component>``.
    """
    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}")
    return LookupLoggerAdapter(logger, {"component": component})

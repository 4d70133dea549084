"""Shared pytest fixtures."""

from __future__ import annotations

import logging

import pytest

from targetflow.pipeline.context import PipelineContext
from targetflow.utils import logging as logging_utils


@pytest.fixture
def context() -> PipelineContext:
    return PipelineContext()


@pytest.fixture
def package_logging(monkeypatch: pytest.MonkeyPatch):
    """Let a test call ``setup_logging`` and drop the installed handlers afterwards."""

    monkeypatch.setattr(logging_utils, "_LOG_PATH", None)
    logger = logging.getLogger(logging_utils.PACKAGE_LOGGER)
    yield logger
    logging_utils._remove_owned_handlers(logger)
    logger.setLevel(logging.NOTSET)

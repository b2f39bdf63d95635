"""Shared fixtures for webhook and client tests."""

import pytest

from sample_notifications import (
    errors_document,
    message_document,
    status_document,
    unknown_document,
)


@pytest.fixture
def text_document() -> dict:
    return message_document({"type": "text", "text": {"body": "hello world"}})


@pytest.fixture
def failed_status_document() -> dict:
    return status_document(
        "failed",
        errors=[{"code": 131, "title": "Message failed", "message": "Message failed"}],
    )


@pytest.fixture
def top_level_errors_document() -> dict:
    return errors_document()


@pytest.fixture
def unrecognized_document() -> dict:
    return unknown_document()

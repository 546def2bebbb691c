"""Request context and logger adapter tests."""

import logging
from dataclasses import fields
from unittest.mock import MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from urlshortener.dependencies import RequestContext, RequestLoggerAdapter, ServiceManager


@pytest.fixture
def context(settings, token_generator) -> RequestContext:
    manager = ServiceManager()
    manager.initialize()
    return RequestContext(
        database=MagicMock(spec=AsyncSession),
        service_manager=manager,
        settings=settings,
        token_generator=token_generator,
        trace_id="trace-1",
        client_ip="10.0.0.1",
    )


def test_logger_adapter_merges_call_extra_with_context() -> None:
    adapter = RequestLoggerAdapter(logging.getLogger("urlshortener"), {"request_id": "r1", "client_ip": "10.0.0.1"})

    msg, kwargs = adapter.process("hello", {"extra": {"operation": "decode", "token": "abc"}})

    assert msg == "hello"
    assert kwargs["extra"] == {"request_id": "r1", "client_ip": "10.0.0.1", "operation": "decode", "token": "abc"}


def test_logger_adapter_without_call_extra() -> None:
    adapter = RequestLoggerAdapter(logging.getLogger("urlshortener"), {"request_id": "r1"})
    _, kwargs = adapter.process("hello", {})
    assert kwargs["extra"] == {"request_id": "r1"}


def test_request_context_logger_carries_request_fields(context: RequestContext, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="urlshortener"):
        context.logger.info("Decode requested", extra={"operation": "decode"})

    record = caplog.records[-1]
    assert record.operation == "decode"
    assert record.trace_id == "trace-1"
    assert record.client_ip == "10.0.0.1"
    assert record.request_id == context.request_id


def test_request_context_only_holds_what_requests_use() -> None:
    assert {f.name for f in fields(RequestContext)} == {
        "database",
        "service_manager",
        "settings",
        "token_generator",
        "request_id",
        "trace_id",
        "user_agent",
        "client_ip",
        "start_time",
    }

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from proxy_tab.utils.traced_requests import traced_request


@pytest.fixture
def span_exporter():
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    yield exporter, provider.get_tracer(__name__)
    provider.shutdown()


def test_span_carries_operation_and_target(span_exporter):
    exporter, tracer = span_exporter

    with traced_request(
        tracer, "asset_relay", "https://example.com/a.png", "[Asset] Relaying"
    ) as span:
        span.set_attribute("proxy.status_code", 200)

    (finished,) = exporter.get_finished_spans()
    assert finished.name == "asset_relay"
    assert finished.attributes["proxy.operation"] == "asset_relay"
    assert finished.attributes["proxy.target_url"] == "https://example.com/a.png"
    assert finished.attributes["proxy.status_code"] == 200


def test_missing_target_is_not_recorded(span_exporter):
    exporter, tracer = span_exporter

    with traced_request(tracer, "page_metadata", None, "[Meta] Looking up"):
        pass

    (finished,) = exporter.get_finished_spans()
    assert "proxy.target_url" not in finished.attributes


def test_start_message_is_logged(span_exporter, caplog):
    _, tracer = span_exporter

    with caplog.at_level("INFO", logger="uvicorn.error"):
        with traced_request(tracer, "proxy_page", "https://example.com/", "[Proxy] Loading"):
            pass

    assert "[Proxy] Loading https://example.com/" in caplog.text

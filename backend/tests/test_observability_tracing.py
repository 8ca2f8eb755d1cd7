import io

from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from nestspec import describe
from nestspec.observability import setup_observability


def test_tracing_records_spans_for_contexts_and_examples():
    exporter = InMemorySpanExporter()
    setup_observability(tracing_exporter=exporter)
    exporter.clear()

    def group(ctx):
        ctx.it("passes", lambda e: e.expect(1).to(e.eq(1)))
        ctx.it("fails", lambda e: e.expect(1).to(e.eq(2)))

    describe("traced", group, out=io.StringIO())

    spans = exporter.get_finished_spans()
    examples = [s for s in spans if s.name == "spec.example"]
    contexts = [s for s in spans if s.name == "spec.context"]

    assert contexts, "expected a span for the root context"
    assert {s.attributes["spec.outcome"] for s in examples} == {"passed", "failed"}
    assert any(s.attributes["spec.example"] == "traced > it fails" for s in examples)

import pytest

from nestspec.errors import AssertionFailure, DeclarationError, MatcherUsageError, NoSuchCapability, SubjectError
from nestspec.runner import Context, Example, ExampleState, MatcherBuilder


def make_example(body, description="example", subject=None):
    root = Context("group")
    if subject is not None:
        root.subject(subject)
    example = root.it(description, body)
    return root, example


def test_passing_body_transitions_to_passed():
    root, example = make_example(lambda e: e.expect(1).to(e.eq(1)))
    assert example.state is ExampleState.NOT_RUN

    outcome = example.run(1)

    assert outcome.state is ExampleState.PASSED
    assert outcome.passed
    assert outcome.error is None
    assert example.outcome is outcome


def test_assertion_failure_is_captured_as_failed():
    root, example = make_example(lambda e: e.expect(1).to(e.eq(2)))

    outcome = example.run(1)

    assert outcome.state is ExampleState.FAILED
    assert isinstance(outcome.error, AssertionFailure)
    assert str(outcome.error) == "1 is not equal to 2"


def test_plain_assert_counts_as_failure():
    def body(e):
        assert 1 == 2, "math is broken"

    root, example = make_example(body)
    assert example.run(1).state is ExampleState.FAILED


def test_other_exceptions_are_captured_as_errors():
    def body(e):
        raise RuntimeError("boom")

    root, example = make_example(body)
    outcome = example.run(1)

    assert outcome.state is ExampleState.ERRORED
    assert str(outcome.error) == "boom"


def test_unknown_name_is_an_error_not_a_failure():
    root, example = make_example(lambda e: e.expect(1).to(e.frobnicate(1)))
    outcome = example.run(1)

    assert outcome.state is ExampleState.ERRORED
    assert isinstance(outcome.error, NoSuchCapability)


def test_matcher_usage_error_is_an_error():
    root, example = make_example(lambda e: e.expect(1).to(e.be))
    outcome = example.run(1)

    assert outcome.state is ExampleState.ERRORED
    assert isinstance(outcome.error, MatcherUsageError)


def test_keyboard_interrupt_is_not_swallowed():
    def body(e):
        raise KeyboardInterrupt

    root, example = make_example(body)
    with pytest.raises(KeyboardInterrupt):
        example.run(1)


def test_example_runs_only_once():
    root, example = make_example(lambda e: None)
    example.run(1)

    with pytest.raises(DeclarationError):
        example.run(1)


def test_expect_block_substitutes_raised_error():
    seen = {}

    def body(e):
        expectation = e.expect(block=lambda: {}["missing"])
        seen["target"] = expectation.target
        expectation.to(e.raise_error(KeyError))

    root, example = make_example(body)
    assert example.run(1).passed
    assert isinstance(seen["target"], KeyError)


def test_expect_block_value_when_nothing_raised():
    root, example = make_example(lambda e: e.expect(block=lambda: 2 + 2).to(e.eq(4)))
    assert example.run(1).passed


def test_expect_requires_exactly_one_target():
    root, example = make_example(lambda e: None)

    with pytest.raises(MatcherUsageError):
        example.expect()
    with pytest.raises(MatcherUsageError):
        example.expect(1, block=lambda: 1)


def test_is_expected_uses_context_subject():
    root, example = make_example(
        lambda e: e.is_expected.to(e.be < 10),
        description="",
        subject=lambda: 5,
    )

    assert example.run(1).passed
    assert example.expects[0].is_subject_shorthand
    assert example.describe(1) == "  it is expected to be < 10"


def test_subject_property_matches_context_subject():
    seen = []
    root, example = make_example(lambda e: seen.append(e.subject), subject=lambda: object())
    example.run(1)

    assert seen[0] is root.subject()


def test_let_bindings_resolve_before_matchers():
    def body(ctx):
        ctx.let("eq", lambda: "shadowed")
        ctx.let("one", lambda: 1)

    root = Context("group", body=body)
    example = root.it("x", lambda e: None)

    assert example.eq == "shadowed"
    assert example.one == 1
    assert isinstance(example.be_empty, MatcherBuilder)
    assert not hasattr(example, "frobnicate")


def test_private_names_do_not_reach_matchers():
    root, example = make_example(lambda e: None)
    with pytest.raises(AttributeError) as exc:
        example._secret
    assert not isinstance(exc.value, NoSuchCapability)


def test_describe_without_expectations():
    root, example = make_example(lambda e: None, description="does nothing")
    assert example.describe(2) == "    it does nothing"

    bare = root.it(lambda e: None)
    assert bare.describe(1) == "  it"


def test_describe_lists_expectations_one_level_deeper():
    def body(e):
        e.expect(1).to(e.eq(1))
        e.expect([]).not_to(e.have_item(3))

    root, example = make_example(body, description="checks")
    example.run(1)

    assert example.describe(1) == "\n".join([
        "  it checks",
        "    expect 1 to be equal to 1",
        "    expect [] to not have item 3",
    ])


def test_path_includes_context_labels():
    root = Context("Stack")
    inner = root.context("when empty", lambda ctx: None)
    example = inner.it("pops nothing", lambda e: None)

    assert example.path == "Stack > when empty > it pops nothing"


class Broken:
    def __init__(self):
        None.missing


def test_attribute_error_while_building_subject_keeps_its_cause():
    root = Context(Broken)
    example = root.it(lambda e: e.is_expected.to(e.be_truthy))

    outcome = example.run(1)

    assert outcome.state is ExampleState.ERRORED
    assert isinstance(outcome.error, SubjectError)
    assert not isinstance(outcome.error, NoSuchCapability)
    assert isinstance(outcome.error.__cause__, AttributeError)
    assert "missing" in str(outcome.error)
    assert "Broken" in str(outcome.error)


def test_example_attributes_never_fall_back_to_matchers():
    root, example = make_example(lambda e: None)

    with pytest.raises(AttributeError) as exc:
        Example.__getattr__(example, "is_expected")
    assert not isinstance(exc.value, NoSuchCapability)

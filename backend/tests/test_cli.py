import textwrap

import pytest

from nestspec.cli import build_parser, main
from nestspec.dsl import SpecSession
from nestspec.loader import discover_spec_files, load_spec_file

PASSING_SPEC = textwrap.dedent(
    """
    from nestspec import describe


    @describe("Stack")
    def stack(ctx):
        ctx.subject(list)

        @ctx.it("starts empty")
        def _(e):
            e.is_expected.to(e.be_empty)
    """
)

FAILING_SPEC = textwrap.dedent(
    """
    from nestspec import describe

    describe("Math", lambda ctx: ctx.it("is broken", lambda e: e.expect(1 + 1).to(e.eq(3))))
    """
)


def write(path, source):
    path.write_text(source, encoding="utf-8")
    return path


def test_discover_spec_files_expands_directories(tmp_path):
    nested = tmp_path / "nested"
    nested.mkdir()
    a = write(tmp_path / "a_spec.py", PASSING_SPEC)
    b = write(nested / "b_spec.py", PASSING_SPEC)
    write(tmp_path / "helper.py", "")

    files = discover_spec_files([str(tmp_path), str(a)])

    assert [f.name for f in files] == ["a_spec.py", "b_spec.py"]
    assert b in files


def test_discover_spec_files_rejects_missing_paths(tmp_path):
    with pytest.raises(FileNotFoundError):
        discover_spec_files([str(tmp_path / "missing")])


def test_load_spec_file_records_describes(tmp_path):
    session = SpecSession()
    load_spec_file(write(tmp_path / "stack_spec.py", PASSING_SPEC), session)

    assert session.results == [True]
    assert session.roots[0].label == "Stack"


def test_main_passes_for_green_specs(tmp_path, capsys):
    write(tmp_path / "stack_spec.py", PASSING_SPEC)

    assert main([str(tmp_path)]) == 0
    assert "1 ok, 0 failed, 0 errors." in capsys.readouterr().out


def test_main_fails_when_any_spec_fails(tmp_path, capsys):
    write(tmp_path / "stack_spec.py", PASSING_SPEC)
    write(tmp_path / "math_spec.py", FAILING_SPEC)

    assert main([str(tmp_path)]) == 1
    out = capsys.readouterr().out
    assert "FAILURES:" in out
    assert "2 is not equal to 3" in out


def test_main_counts_broken_files_as_failures(tmp_path, capsys):
    write(tmp_path / "stack_spec.py", PASSING_SPEC)
    write(tmp_path / "broken_spec.py", "import does_not_exist_anywhere\n")

    assert main([str(tmp_path)]) == 1
    assert "error loading" in capsys.readouterr().err


def test_main_without_spec_files(tmp_path, capsys):
    assert main([str(tmp_path)]) == 1
    assert "no spec files found" in capsys.readouterr().err


def test_main_missing_path(tmp_path):
    assert main([str(tmp_path / "nope")]) == 2


def test_main_honours_pattern_and_writes_metrics(tmp_path):
    write(tmp_path / "spec_stack.py", PASSING_SPEC)
    metrics = tmp_path / "metrics.prom"

    assert main([str(tmp_path), "--pattern", "spec_*.py", "--metrics-out", str(metrics)]) == 0
    assert "nestspec_example_outcomes_total" in metrics.read_text(encoding="utf-8")


def test_parser_defaults_to_current_directory():
    args = build_parser().parse_args([])
    assert args.paths == ["."]
    assert args.pattern is None

import time

import pytest

from static_review.context import RunContext
from static_review.engine import Engine, run_review
from static_review.errors import (
    CancellationError,
    ConfigurationError,
    LogicError,
    ReviewExecutionError,
)
from static_review.file import File
from static_review.registry import Registry
from static_review.result import Result
from static_review.reviews import BaseReview
from static_review.reviews.builtin import builtin_registry
from static_review.status import ResultStatus, RunStatus


class AlwaysPass(BaseReview):
    def evaluate(self, file):
        return self.passed(file)


class BreaksOn(BaseReview):
    """Raise on the named file, pass everywhere else."""

    def evaluate(self, file):
        if file.name == self.options["broken"]:
            raise ReviewExecutionError("cannot evaluate")
        return self.passed(file)


class RaisesValueError(BaseReview):
    def evaluate(self, file):
        raise ValueError("boom")


class WrongKey(BaseReview):
    def evaluate(self, file):
        return Result("someone-else", file.path, ResultStatus.PASSED)


class ReadsContent(BaseReview):
    def evaluate(self, file):
        file.content()
        return self.passed(file)


class Sleeps(BaseReview):
    def evaluate(self, file):
        time.sleep(self.options["seconds"])
        return self.passed(file)


class NotAReview:
    def applies(self, file):
        return True


class CancelsAfterFirst(BaseReview):
    def __init__(self, identifier, event):
        super().__init__(identifier)
        self.event = event

    def evaluate(self, file):
        self.event.set()
        return self.passed(file)


def registry_with(**reviews):
    registry = Registry()
    for identifier, build in reviews.items():
        registry.bind(identifier, build)
    return registry


def write_files(tmp_path, *names, content="ok\n"):
    paths = []
    for name in names:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        paths.append(str(path))
    return paths


def test_line_length_failure_yields_failure_run(tmp_path):
    (foo,) = write_files(tmp_path, "foo.txt", content="x" * 200 + "\n")
    context = RunContext.from_paths([foo], ["line-length"], builtin_registry())

    report = run_review(context)

    assert [result.key for result in report.results] == [("line-length", foo)]
    assert report.get("line-length", foo).status is ResultStatus.FAILED
    assert report.status is RunStatus.FAILURE
    assert report.exit_code != 0
    assert report.error is None


def test_inapplicable_review_yields_empty_success(tmp_path):
    (bar,) = write_files(tmp_path, "bar.txt", content="trailing   \n")
    context = RunContext.from_paths([bar], ["trailing-whitespace"], builtin_registry())

    report = run_review(context)

    assert report.results == ()
    assert len(context.collector) == 0
    assert report.status is RunStatus.SUCCESS
    assert report.exit_code == 0


def test_unknown_review_aborts_before_any_evaluation(tmp_path):
    (foo,) = write_files(tmp_path, "foo.txt", content="x" * 200 + "\n")
    context = RunContext.from_paths([foo], ["line-length", "Unknown\\Review"], builtin_registry())

    report = run_review(context)

    assert isinstance(report.error, ConfigurationError)
    assert "Unknown\\Review" in str(report.error)
    assert report.results == ()
    assert report.status is RunStatus.ERRORED
    assert report.exit_code == 2


def test_review_error_on_second_file_keeps_first_results(tmp_path):
    paths = write_files(tmp_path, "one.py", "two.py", "three.py")
    registry = registry_with(checker=lambda _registry: BreaksOn("checker", {"broken": "two.py"}))
    context = RunContext.from_paths(paths, ["checker"], registry)

    report = run_review(context)

    assert report.status is RunStatus.ERRORED
    assert isinstance(report.error, ReviewExecutionError)
    assert report.error.review_identifier == "checker"
    assert report.error.file_path == paths[1]
    assert [result.file_path for result in report.results] == [paths[0]]
    assert report.exit_code == 2
    assert report.exit_code != RunStatus.FAILURE.exit_code


def test_results_follow_file_then_review_order(tmp_path):
    paths = write_files(tmp_path, "a.py", "b.py")
    registry = registry_with(
        first=lambda _registry: AlwaysPass("first"),
        second=lambda _registry: AlwaysPass("second"),
    )
    report = run_review(RunContext.from_paths(paths, ["second", "first"], registry))

    assert [result.key for result in report.results] == [
        ("second", paths[0]),
        ("first", paths[0]),
        ("second", paths[1]),
        ("first", paths[1]),
    ]


def test_missing_file_is_a_review_execution_error(tmp_path):
    missing = str(tmp_path / "gone.py")
    registry = registry_with(reader=lambda _registry: ReadsContent("reader"))

    report = run_review(RunContext.from_paths([missing], ["reader"], registry))

    assert report.status is RunStatus.ERRORED
    assert isinstance(report.error, ReviewExecutionError)
    assert missing in str(report.error)


def test_unexpected_exception_is_wrapped(tmp_path):
    paths = write_files(tmp_path, "a.py")
    registry = registry_with(broken=lambda _registry: RaisesValueError("broken"))

    report = run_review(RunContext.from_paths(paths, ["broken"], registry))

    assert isinstance(report.error, ReviewExecutionError)
    assert "ValueError: boom" in str(report.error)
    assert isinstance(report.error.__cause__, ValueError)


def test_result_for_wrong_pair_is_rejected(tmp_path):
    paths = write_files(tmp_path, "a.py")
    registry = registry_with(liar=lambda _registry: WrongKey("liar"))

    report = run_review(RunContext.from_paths(paths, ["liar"], registry))

    assert report.status is RunStatus.ERRORED
    assert isinstance(report.error, ReviewExecutionError)
    assert report.results == ()


def test_duplicate_review_identifier_is_a_configuration_error(tmp_path):
    paths = write_files(tmp_path, "a.py")

    report = run_review(RunContext.from_paths(paths, ["line-length", "line-length"], builtin_registry()))

    assert isinstance(report.error, ConfigurationError)
    assert report.results == ()


def test_collaborator_cannot_be_run_as_review(tmp_path):
    paths = write_files(tmp_path, "a.py")

    report = run_review(RunContext.from_paths(paths, ["review-options"], builtin_registry()))

    assert isinstance(report.error, ConfigurationError)


def test_empty_run_succeeds():
    report = run_review(RunContext(files=[], review_identifiers=[], registry=Registry()))

    assert report.status is RunStatus.SUCCESS
    assert report.results == ()
    assert not report.has_failures


def test_state_machine_and_outcome(tmp_path):
    paths = write_files(tmp_path, "a.py")
    engine = Engine(RunContext.from_paths(paths, ["line-length"], builtin_registry()))

    assert engine.status is RunStatus.NOT_STARTED
    with pytest.raises(LogicError, match="run has not completed"):
        engine.outcome()
    with pytest.raises(LogicError, match="run has not completed"):
        engine.status.exit_code

    report = engine.run()

    assert engine.status is RunStatus.SUCCESS
    assert engine.outcome() is report
    with pytest.raises(LogicError):
        engine.run()


def test_cancelled_context_starts_no_pairs(tmp_path):
    paths = write_files(tmp_path, "a.py", "b.py")
    context = RunContext.from_paths(paths, ["line-length"], builtin_registry())
    context.cancel()

    report = run_review(context)

    assert report.status is RunStatus.ERRORED
    assert isinstance(report.error, CancellationError)
    assert report.results == ()


def test_cancellation_between_pairs_keeps_completed_results(tmp_path):
    paths = write_files(tmp_path, "a.py", "b.py", "c.py")
    registry = Registry()
    context = RunContext.from_paths(paths, ["canceller"], registry)
    registry.bind("canceller", lambda _registry: CancelsAfterFirst("canceller", context.cancel_event))

    report = run_review(context)

    assert isinstance(report.error, CancellationError)
    assert [result.file_path for result in report.results] == [paths[0]]


def test_results_are_stable_across_reads(tmp_path):
    paths = write_files(tmp_path, "a.py", content="x" * 200 + "\n")
    report = run_review(RunContext.from_paths(paths, ["line-length", "no-commit-tag"], builtin_registry()))

    first = report.results
    second = report.results

    assert first == second
    assert all(result.status in (ResultStatus.PASSED, ResultStatus.FAILED) for result in first)


def test_parallel_run_matches_sequential_order(tmp_path):
    names = [f"file{index:02d}.py" for index in range(20)]
    paths = write_files(tmp_path, *names, content="value = 1   \n")
    reviews = ["line-length", "trailing-whitespace", "no-commit-tag", "line-endings"]

    sequential = run_review(RunContext.from_paths(paths, reviews, builtin_registry()))
    parallel = run_review(RunContext.from_paths(paths, reviews, builtin_registry(), workers=4))

    assert parallel.results == sequential.results
    assert parallel.status is RunStatus.FAILURE


def test_parallel_run_reports_review_error(tmp_path):
    paths = write_files(tmp_path, "one.py", "two.py", "three.py")
    registry = registry_with(checker=lambda _registry: BreaksOn("checker", {"broken": "two.py"}))

    report = run_review(RunContext.from_paths(paths, ["checker"], registry, workers=3))

    assert report.status is RunStatus.ERRORED
    assert isinstance(report.error, ReviewExecutionError)
    assert report.get("checker", paths[1]) is None


def test_invalid_workers_rejected():
    with pytest.raises(ConfigurationError):
        RunContext(files=[], review_identifiers=[], registry=Registry(), workers=0)


def test_report_to_dict(tmp_path):
    (foo,) = write_files(tmp_path, "foo.txt", content="x" * 200 + "\n")
    report = run_review(RunContext.from_paths([foo], ["line-length"], builtin_registry()))

    data = report.to_dict()

    assert data["status"] == "FAILURE"
    assert data["exit_code"] == 1
    assert data["summary"] == {"passed": 0, "failed": 1, "total": 1}
    assert data["results"][0]["file_path"] == foo
    assert data["error"] is None


def test_files_are_plain_handles(tmp_path):
    (foo,) = write_files(tmp_path, "foo.txt")
    context = RunContext.from_paths([foo], [], Registry())

    assert context.files == (File(foo),)


def test_factory_error_ends_run_errored_without_results(tmp_path):
    paths = write_files(tmp_path, "a.py")

    def explode(_registry):
        raise ValueError("plugin constructor exploded")

    registry = registry_with(bad=explode, good=lambda _registry: AlwaysPass("good"))
    engine = Engine(RunContext.from_paths(paths, ["good", "bad"], registry))

    report = engine.run()

    assert engine.status is RunStatus.ERRORED
    assert engine.outcome() is report
    assert isinstance(report.error, ConfigurationError)
    assert "cannot build bad" in str(report.error)
    assert isinstance(report.error.__cause__, ValueError)
    assert report.results == ()
    assert report.exit_code == 2


def test_object_without_review_shape_is_a_configuration_error(tmp_path):
    paths = write_files(tmp_path, "a.py")
    registry = registry_with(shapeless=lambda _registry: NotAReview())

    report = run_review(RunContext.from_paths(paths, ["shapeless"], registry))

    assert report.status is RunStatus.ERRORED
    assert isinstance(report.error, ConfigurationError)
    assert "shapeless" in str(report.error)
    assert report.results == ()


def test_timeout_stops_before_next_pair(tmp_path):
    paths = write_files(tmp_path, "a.py", "b.py", "c.py")
    registry = registry_with(slow=lambda _registry: Sleeps("slow", {"seconds": 0.2}))

    report = run_review(RunContext.from_paths(paths, ["slow"], registry, timeout=0.1))

    assert report.status is RunStatus.ERRORED
    assert isinstance(report.error, CancellationError)
    assert "timed out" in str(report.error)
    assert [result.file_path for result in report.results] == [paths[0]]


def test_parallel_cancellation_starts_no_new_pairs(tmp_path):
    names = [f"file{index}.py" for index in range(6)]
    paths = write_files(tmp_path, *names)
    registry = Registry()
    context = RunContext.from_paths(paths, ["canceller"], registry, workers=2)
    registry.bind("canceller", lambda _registry: CancelsAfterFirst("canceller", context.cancel_event))

    report = run_review(context)

    assert report.status is RunStatus.ERRORED
    assert isinstance(report.error, CancellationError)
    assert 1 <= len(report.results) < len(paths)
    ordered = [result.file_path for result in report.results]
    assert ordered == sorted(ordered, key=paths.index)

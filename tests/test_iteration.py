import pytest

from requestors import ConfigurationError, Outcome, chained, constant, repeat, unary
from fakes import Counted, Pending, Recorder


def add(a):
    return lambda b: a + b


class TestRepeat:
    def test_runs_until_predicate_fails(self) -> None:
        increment = Counted(lambda x: x + 1)
        recorder = Recorder()
        repeat(lambda x: x < 3)(increment.task).run(recorder, 0)
        assert increment.count == 3
        assert increment.inputs == [0, 1, 2]
        assert recorder.only == Outcome.Success(3)

    def test_initial_value_failing_predicate(self) -> None:
        increment = Counted(lambda x: x + 1)
        recorder = Recorder()
        repeat(lambda x: x < 3)(increment.task).run(recorder, 5)
        assert increment.count == 0
        assert recorder.only == Outcome.Success(5)

    def test_failure_short_circuits(self) -> None:
        def step(x):
            if x == 4:
                raise RuntimeError("stuck at 4")
            return x + 1

        recorder = Recorder()
        counted = Counted(step)
        repeat(lambda x: x < 100)(counted.task).run(recorder, 0)
        assert recorder.only == Outcome.Failure("stuck at 4")
        assert counted.count == 5

    def test_truthy_predicate_result_does_not_pass(self) -> None:
        increment = Counted(lambda x: x + 1)
        recorder = Recorder()
        repeat(lambda x: 3 - x)(increment.task).run(recorder, 0)
        assert increment.count == 0
        assert recorder.only == Outcome.Success(0)

    def test_raising_predicate(self) -> None:
        recorder = Recorder()
        repeat(lambda x: x["missing"])(unary(lambda x: x)).run(recorder, {})
        assert recorder.only.failed

    def test_many_synchronous_rounds(self) -> None:
        recorder = Recorder()
        repeat(lambda x: x < 20_000)(unary(lambda x: x + 1)).run(recorder, 0)
        assert recorder.only == Outcome.Success(20_000)

    def test_asynchronous_rounds(self) -> None:
        pending = Pending()
        recorder = Recorder()
        repeat(lambda x: x < 2)(pending.task).run(recorder, 0)

        pending.succeed(1)
        assert recorder.outcomes == []
        pending.succeed(2)
        assert recorder.only == Outcome.Success(2)
        assert pending.inputs == [0, 1]

    def test_cancel_reaches_current_round(self) -> None:
        pending = Pending()
        recorder = Recorder()
        cancel = repeat(lambda x: x < 3)(pending.task).run(recorder, 0)

        pending.succeed(1, index=0)
        cancel()
        assert pending.cancelled == [1]

        pending.succeed(2, index=1)
        assert recorder.outcomes == []
        assert len(pending.calls) == 2

        cancel()
        assert pending.cancelled == [1]

    def test_late_outcome_of_settled_round_ignored(self) -> None:
        pending = Pending()
        recorder = Recorder()
        repeat(lambda x: x < 1)(pending.task).run(recorder, 0)
        pending.succeed(1)
        pending.succeed(5, index=0)
        assert recorder.only == Outcome.Success(1)


class TestChained:
    def test_accumulates_until_continuer_fails(self) -> None:
        recorder = Recorder()
        chained(continuer=lambda acc: acc < 10, aggregator=add)(constant(3)).run(recorder, 0)
        assert recorder.only == Outcome.Success(12)

    def test_round_count_and_inputs(self) -> None:
        three = Counted(lambda _: 3)
        recorder = Recorder()
        chained(continuer=lambda acc: acc < 10, aggregator=add)(three.task).run(recorder, 0)
        assert three.inputs == [0, 3, 6, 9]
        assert recorder.only == Outcome.Success(12)

    def test_runs_at_least_once(self) -> None:
        three = Counted(lambda _: 3)
        recorder = Recorder()
        chained(continuer=lambda acc: False, aggregator=add)(three.task).run(recorder, 100)
        assert three.count == 1
        assert recorder.only == Outcome.Success(103)

    def test_mapping_configuration(self) -> None:
        recorder = Recorder()
        config = {"continuer": lambda acc: len(acc) < 3, "aggregator": lambda a: lambda b: a + [b]}
        chained(config)(constant("x")).run(recorder, [])
        assert recorder.only == Outcome.Success(["x", "x", "x"])

    def test_failure_short_circuits(self) -> None:
        pending = Pending()
        recorder = Recorder()
        chained(continuer=lambda acc: True, aggregator=add)(pending.task).run(recorder, 0)

        pending.succeed(1)
        pending.succeed(1)
        pending.fail("quota exhausted")
        assert recorder.only == Outcome.Failure("quota exhausted")
        assert pending.inputs == [0, 1, 2]

    def test_raising_aggregator(self) -> None:
        recorder = Recorder()
        chained(continuer=lambda acc: True, aggregator=lambda a: lambda b: a / b)(constant(0)).run(recorder, 1)
        assert recorder.only.failed
        assert "division" in recorder.only.reason

    def test_cancel_reaches_current_round(self) -> None:
        pending = Pending()
        recorder = Recorder()
        cancel = chained(continuer=lambda acc: True, aggregator=add)(pending.task).run(recorder, 0)

        pending.succeed(5)
        pending.succeed(5)
        cancel()
        assert pending.cancelled == [2]
        pending.succeed(5)
        assert recorder.outcomes == []

    def test_cancel_after_settlement_is_noop(self) -> None:
        pending = Pending()
        recorder = Recorder()
        cancel = chained(continuer=lambda acc: False, aggregator=add)(pending.task).run(recorder, 0)
        pending.succeed(1)
        cancel()
        assert pending.cancelled == []
        assert recorder.only == Outcome.Success(1)

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"aggregator": add}, "Continuer function missing"),
            ({"continuer": bool}, "Aggregator function missing"),
        ],
    )
    def test_missing_configuration(self, kwargs, message) -> None:
        with pytest.raises(ConfigurationError, match=message):
            chained(**kwargs)

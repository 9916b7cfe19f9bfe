from collections import defaultdict

import pytest

from requestors import (
    ConfigurationError,
    Options,
    Outcome,
    applied_fallback,
    applied_parallel,
    applied_parallel_object,
    applied_race,
    conditional,
    indexed,
    record,
    unary,
)
from fakes import Counted, Pending, RecordingEngine, Recorder


class TestRecord:
    def test_feeds_each_key(self) -> None:
        recorder = Recorder()
        task = record({})({"a": unary(lambda x: x + 1), "b": unary(lambda x: x * 2)})
        task.run(recorder, {"a": 1, "b": 2})
        assert recorder.only == Outcome.Success({"a": 2, "b": 4})

    def test_missing_key_yields_empty_record(self) -> None:
        doubled = Counted(lambda x: x * 2)
        recorder = Recorder()
        record()({"a": unary(lambda x: x + 1), "b": doubled.task}).run(recorder, {"a": 1})
        assert recorder.only == Outcome.Success({"a": 2, "b": {}})
        assert doubled.count == 0

    def test_missing_key_of_defaultdict_left_alone(self) -> None:
        inputs = defaultdict(int, {"a": 1})
        recorder = Recorder()
        record()({"a": unary(str), "b": unary(str)}).run(recorder, inputs)
        assert recorder.only == Outcome.Success({"a": "1", "b": {}})
        assert dict(inputs) == {"a": 1}

    def test_extra_input_keys_ignored(self) -> None:
        recorder = Recorder()
        record()({"a": unary(str)}).run(recorder, {"a": 1, "z": 26})
        assert recorder.only == Outcome.Success({"a": "1"})

    def test_rejects_non_mapping_input(self) -> None:
        counted = Counted(str)
        recorder = Recorder()
        record()({"a": counted.task}).run(recorder, [1])
        assert recorder.only == Outcome.Failure("Invalid input object")
        assert counted.count == 0

    def test_failure_of_one_key(self) -> None:
        recorder = Recorder()
        record()({"a": conditional(lambda x: x > 0, "a must be positive"), "b": unary(str)}).run(
            recorder, {"a": -1, "b": 2}
        )
        assert recorder.only == Outcome.Failure("a must be positive")

    def test_requires_mapping_of_tasks(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid requestors object"):
            record()([unary(str)])
        with pytest.raises(ConfigurationError):
            record()({"a": str})


class TestIndexed:
    def test_feeds_each_position(self) -> None:
        recorder = Recorder()
        indexed()([unary(lambda x: x + 1), unary(lambda x: x * 2)]).run(recorder, [1, 2])
        assert recorder.only == Outcome.Success([2, 4])

    def test_missing_position_yields_empty_record(self) -> None:
        doubled = Counted(lambda x: x * 2)
        recorder = Recorder()
        indexed()([unary(lambda x: x + 1), doubled.task]).run(recorder, [1])
        assert recorder.only == Outcome.Success([2, {}])
        assert doubled.count == 0

    @pytest.mark.parametrize("bad_input", [{"0": 1}, "ab", 5])
    def test_rejects_non_sequence_input(self, bad_input) -> None:
        recorder = Recorder()
        indexed()([unary(str)]).run(recorder, bad_input)
        assert recorder.only == Outcome.Failure("Input is not an array")

    def test_requires_sequence_of_tasks(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid requestors array"):
            indexed()({"a": unary(str)})


class TestApplied:
    def test_parallel_runs_task_per_input(self) -> None:
        squared = Counted(lambda x: x * x)
        recorder = Recorder()
        applied_parallel()(squared.task).run(recorder, [1, 2, 3])
        assert recorder.only == Outcome.Success([1, 4, 9])
        assert sorted(squared.inputs) == [1, 2, 3]

    def test_race_first_success(self) -> None:
        recorder = Recorder()
        applied_race()(conditional(lambda x: x > 2)).run(recorder, [1, 3, 5])
        assert recorder.only == Outcome.Success(3)

    def test_fallback_first_success_in_order(self) -> None:
        recorder = Recorder()
        applied_fallback()(conditional(lambda x: x > 2)).run(recorder, (1, 4, 5))
        assert recorder.only == Outcome.Success(4)

    @pytest.mark.parametrize("factory", [applied_race, applied_parallel, applied_fallback])
    def test_non_sequence_input_short_circuits(self, factory) -> None:
        counted = Counted(str)
        recorder = Recorder()
        factory()(counted.task).run(recorder, "oops")
        assert recorder.outcomes == [Outcome.Failure("Input is not an array")]
        assert counted.count == 0

    def test_parallel_object_keeps_keys(self) -> None:
        recorder = Recorder()
        applied_parallel_object()(unary(str.upper)).run(recorder, {"x": "a", "y": "b"})
        assert recorder.only == Outcome.Success({"x": "A", "y": "B"})

    def test_parallel_object_rejects_sequence(self) -> None:
        counted = Counted(str)
        recorder = Recorder()
        applied_parallel_object()(counted.task).run(recorder, ["a"])
        assert recorder.outcomes == [Outcome.Failure("Invalid input object")]
        assert counted.count == 0

    def test_cancel_reaches_engine(self) -> None:
        pending = Pending()
        recorder = Recorder()
        cancel = applied_parallel()(pending.task).run(recorder, ["a", "b"])
        assert pending.inputs == ["a", "b"]
        cancel()
        assert sorted(pending.cancelled) == [0, 1]
        pending.succeed(1, index=0)
        pending.succeed(2, index=1)
        assert recorder.outcomes == []


class TestEngineOptions:
    def test_options_reach_injected_engine(self) -> None:
        engine = RecordingEngine()
        recorder = Recorder()
        applied_race({"time_limit": 5, "throttle": 2}, engine=engine)(unary(str)).run(recorder, [1])
        assert recorder.only == Outcome.Success("1")
        assert engine.builds[-1] == ("race", 1, Options(time_limit=5, throttle=2))

    def test_construction_builds_nothing(self) -> None:
        engine = RecordingEngine(reject_empty=True)
        recorder = Recorder()
        task = applied_parallel(engine=engine)(unary(lambda x: x * 2))
        keyed = applied_parallel_object(engine=engine)(unary(str))
        assert engine.builds == []
        assert engine.checked == ["parallel", "parallel_object"]
        task.run(recorder, [1, 2])
        assert recorder.only == Outcome.Success([2, 4])
        keyed.run(recorder, {"k": 1})
        assert recorder.outcomes[-1] == Outcome.Success({"k": "1"})

    def test_record_uses_parallel_object(self) -> None:
        engine = RecordingEngine()
        record(engine=engine)({"a": unary(str), "b": unary(str)})
        assert engine.builds == [("parallel_object", 2, Options())]

    def test_default_engine_refuses_time_limit(self) -> None:
        with pytest.raises(ConfigurationError):
            applied_parallel({"time_limit": 1})
        with pytest.raises(ConfigurationError):
            record({"throttle": 3})({"a": unary(str)})

    def test_unknown_option(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid options"):
            indexed({"timelimit": 1})

import pytest

from conftest import FixedRoller, make_course
from syllaboard.engine.errors import InvalidTaskIndex, NoPendingRoll, PendingRollConflict
from syllaboard.engine.progression import ProgressionEngine
from syllaboard.schemas import CompleteTaskRequest, Course, Student, Task


def _request(task_index: int, **fields) -> CompleteTaskRequest:
    return CompleteTaskRequest(task_index=task_index, **fields)


def test_deferred_roll_then_resolve(course) -> None:
    engine = ProgressionEngine(FixedRoller(5))
    student = Student()

    outcome = engine.complete_task(0, course, student, _request(0, score_obtained=18, defer_roll=True))
    assert outcome.kind == "pending"
    assert outcome.pending is not None
    assert outcome.pending.die_min == 5
    assert student.current_position == 0
    assert student.total_reward == 0
    assert student.completed_tasks == []
    assert student.pending_completion is not None
    assert student.pending_completion.score_percent == 90

    rolled = engine.resolve_pending_roll(course, student)
    assert rolled.kind == "rolled"
    assert rolled.die is not None
    assert (rolled.die.min, rolled.die.roll) == (5, 5)
    assert student.current_position == 5
    assert rolled.reward_gained == course.path_vector[5].reward == 15
    assert student.total_reward == 15
    assert student.pending_completion is None
    assert len(student.completed_tasks) == 1
    entry = student.completed_tasks[0]
    assert entry.task_index == 0
    assert (entry.die_min_used, entry.die_roll_used) == (5, 5)
    assert entry.score_obtained == 18
    assert entry.position == 5


def test_explicit_advance_ignores_scores(course) -> None:
    roller = FixedRoller(6)
    engine = ProgressionEngine(roller)
    student = Student(current_position=1)

    outcome = engine.complete_task(2, course, student, _request(2, advance_by=-3, score_percent=99, defer_roll=True))
    assert outcome.kind == "advanced"
    assert student.current_position == 10
    assert outcome.reward_gained == 20
    assert student.pending_completion is None
    assert roller.calls == []
    entry = student.completed_tasks[0]
    assert entry.advance_by_used == -3
    assert entry.step_used == -3
    assert entry.score_percent == 99
    assert entry.die_roll_used is None


def test_immediate_roll_uses_score_minimum(course) -> None:
    roller = FixedRoller(1)
    engine = ProgressionEngine(roller)
    student = Student()

    outcome = engine.complete_task(1, course, student, _request(1, score_percent=72))
    assert outcome.kind == "rolled"
    assert roller.calls == [3]
    assert outcome.die.min == 3
    assert outcome.die.roll == 3
    assert student.current_position == 3
    assert student.total_reward == 13
    assert student.completed_tasks[0].die_min_used == 3


def test_default_step_when_nothing_usable(course) -> None:
    engine = ProgressionEngine(FixedRoller(6))
    student = Student(current_position=11)

    outcome = engine.complete_task(3, course, student, _request(3, score_obtained="n/a", advance_by="soon", defer_roll=True))
    assert outcome.kind == "stepped"
    assert student.current_position == 0
    assert outcome.reward_gained == 10
    entry = student.completed_tasks[0]
    assert entry.step_used == 1
    assert entry.die_min_used is None
    assert entry.advance_by_used is None


def test_score_without_max_points_falls_back_to_default_step() -> None:
    course = make_course()
    course.tasks[0] = Task(title="Participation", type="participation", points=None)
    engine = ProgressionEngine(FixedRoller(6))
    student = Student()

    outcome = engine.complete_task(0, course, student, _request(0, score_obtained=18))
    assert outcome.kind == "stepped"
    assert student.current_position == 1


def test_invalid_task_index(course) -> None:
    engine = ProgressionEngine(FixedRoller(4))
    for index in (-1, 4, 100):
        with pytest.raises(InvalidTaskIndex):
            engine.complete_task(index, course, Student(), _request(index))


def test_completing_twice_is_a_no_op(course) -> None:
    engine = ProgressionEngine(FixedRoller(4))
    student = Student()
    engine.complete_task(0, course, student, _request(0, advance_by=2))
    before = student.model_copy(deep=True)

    again = engine.complete_task(0, course, student, _request(0, advance_by=5))
    assert again.kind == "already_completed"
    assert again.reward_gained == 0
    assert student == before


def test_second_deferred_roll_conflicts(course) -> None:
    engine = ProgressionEngine(FixedRoller(4))
    student = Student()
    engine.complete_task(0, course, student, _request(0, score_obtained=18, defer_roll=True))

    with pytest.raises(PendingRollConflict):
        engine.complete_task(1, course, student, _request(1, score_obtained=10, defer_roll=True))
    assert student.pending_completion.task_index == 0


def test_explicit_advance_allowed_while_roll_pending(course) -> None:
    engine = ProgressionEngine(FixedRoller(4))
    student = Student()
    engine.complete_task(0, course, student, _request(0, score_obtained=18, defer_roll=True))

    outcome = engine.complete_task(1, course, student, _request(1, advance_by=1))
    assert outcome.kind == "advanced"
    assert student.pending_completion is not None
    assert [c.task_index for c in student.completed_tasks] == [1]


def test_pending_task_cannot_be_completed_again(course) -> None:
    engine = ProgressionEngine(FixedRoller(4))
    student = Student()
    engine.complete_task(0, course, student, _request(0, score_obtained=18, defer_roll=True))

    outcome = engine.complete_task(0, course, student, _request(0, advance_by=1))
    assert outcome.kind == "already_pending"
    assert student.current_position == 0
    assert student.completed_tasks == []


def test_resolve_without_pending(course) -> None:
    engine = ProgressionEngine(FixedRoller(4))
    with pytest.raises(NoPendingRoll):
        engine.resolve_pending_roll(course, Student())


def test_move_does_not_record_completion(course) -> None:
    engine = ProgressionEngine(FixedRoller(4))
    student = Student()

    outcome = engine.move(course, student, 4)
    assert outcome.kind == "moved"
    assert student.current_position == 4
    assert student.total_reward == 14
    assert student.completed_tasks == []

    engine.move(course, student, None)
    assert student.current_position == 5


def test_empty_board_keeps_position() -> None:
    course = Course(tasks=[Task(title="Only")])
    engine = ProgressionEngine(FixedRoller(6))
    student = Student()

    outcome = engine.complete_task(0, course, student, _request(0, score_percent=100))
    assert outcome.kind == "rolled"
    assert student.current_position == 0
    assert student.total_reward == 0
    assert len(student.completed_tasks) == 1


def test_explicit_advance_beyond_float_precision(course) -> None:
    engine = ProgressionEngine(FixedRoller(1))
    student = Student()

    outcome = engine.complete_task(0, course, student, _request(0, advance_by=2**53 + 1))
    assert outcome.kind == "advanced"
    # 2**53 % 12 == 8
    assert student.current_position == 9
    assert outcome.reward_gained == 19
    assert student.completed_tasks[0].advance_by_used == 2**53 + 1

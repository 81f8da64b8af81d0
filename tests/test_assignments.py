import pytest

from core.exceptions import AlreadyExistsError, InvalidArgumentError, NotFoundError
from models.assignment_submission import AssignmentSubmissionModel
from utils.assignment_manager import AssignmentManager


@pytest.fixture
def teacher(make_user):
    return make_user(role="teacher")


@pytest.fixture
def assignment(db, teacher):
    return AssignmentManager(db).create_assignment(
        title="Fractions", assignment_type="quiz", standard="5", division="A", created_by=teacher.id
    )


def test_create_assignment_rejects_unknown_type(db, teacher):
    with pytest.raises(InvalidArgumentError):
        AssignmentManager(db).create_assignment("Essay", "oral", "5", "A", teacher.id)


def test_create_assignment_requires_existing_creator(db):
    with pytest.raises(NotFoundError):
        AssignmentManager(db).create_assignment("Essay", "written", "5", "A", 42)


def test_submit_returns_full_row(db, assignment, make_user):
    student = make_user(role="student")
    submission = AssignmentManager(db).submit_assignment(
        assignment.id, student.id, content="3/4", file_path=None
    )
    assert submission.id is not None
    assert submission.assignment_id == assignment.id
    assert submission.student_id == student.id
    assert submission.content == "3/4"
    assert submission.submitted_at is not None


def test_second_submission_is_rejected(db, assignment, make_user):
    student = make_user(role="student")
    manager = AssignmentManager(db)
    manager.submit_assignment(assignment.id, student.id, content="first")

    with pytest.raises(AlreadyExistsError):
        manager.submit_assignment(assignment.id, student.id, content="second")

    rows = (
        db.query(AssignmentSubmissionModel)
        .filter(
            AssignmentSubmissionModel.assignment_id == assignment.id,
            AssignmentSubmissionModel.student_id == student.id,
        )
        .all()
    )
    assert len(rows) == 1
    assert rows[0].content == "first"


def test_store_constraint_rejects_duplicate_when_check_is_bypassed(
    db, assignment, make_user, monkeypatch
):
    student = make_user(role="student")
    manager = AssignmentManager(db)
    manager.submit_assignment(assignment.id, student.id)

    # Simulate the race: the second request passed the existence check too
    monkeypatch.setattr(manager, "has_submitted", lambda assignment_id, student_id: False)
    with pytest.raises(AlreadyExistsError):
        manager.submit_assignment(assignment.id, student.id)

    assert db.query(AssignmentSubmissionModel).count() == 1


def test_submit_checks_assignment_before_student(db, make_user):
    with pytest.raises(NotFoundError, match="Assignment"):
        AssignmentManager(db).submit_assignment(999, 999)


def test_submit_requires_student_role(db, assignment, teacher):
    with pytest.raises(NotFoundError, match="Student"):
        AssignmentManager(db).submit_assignment(assignment.id, teacher.id)


def test_list_for_class(db, teacher):
    manager = AssignmentManager(db)
    manager.create_assignment("A1", "quiz", "5", "A", teacher.id)
    manager.create_assignment("A2", "written", "5", "B", teacher.id)
    manager.create_assignment("A3", "upload", "5", "A", teacher.id)

    titles = [a.title for a in manager.list_assignments_for_class("5", "A")]
    assert titles == ["A3", "A1"]
    assert len(manager.list_assignments()) == 3


def test_list_submissions_includes_names(db, assignment, make_user):
    student = make_user(role="student", name="Asha")
    manager = AssignmentManager(db)
    manager.submit_assignment(assignment.id, student.id, content="done")

    [detail] = manager.list_submissions(assignment.id)
    assert detail.student_name == "Asha"
    assert detail.assignment_title == "Fractions"
    assert detail.content == "done"


def test_list_submissions_unknown_assignment(db):
    with pytest.raises(NotFoundError):
        AssignmentManager(db).list_submissions(123)

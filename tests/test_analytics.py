from datetime import timedelta

import pytest

from core.exceptions import NotFoundError
from models.base import utcnow
from models.course_progress import CourseProgressModel
from models.login_log import LoginLogModel
from models.user import UserModel
from utils.analytics_manager import AnalyticsManager
from utils.assignment_manager import AssignmentManager
from utils.course_manager import CourseManager
from utils.parent_manager import ParentManager
from utils.progress_manager import ProgressManager
from utils.user_manager import UserManager


@pytest.fixture
def teacher(make_user):
    return make_user(role="teacher")


@pytest.fixture
def courses(db, teacher):
    manager = CourseManager(db)
    return [manager.create_course(title=f"Course {i}", created_by=teacher.id) for i in range(3)]


def test_average_excludes_courses_without_progress(db, courses, make_user):
    student = make_user(role="student")
    progress = ProgressManager(db)
    progress.upsert_progress(courses[0].id, student.id, 60)
    progress.upsert_progress(courses[1].id, student.id, 80)

    assert AnalyticsManager(db).average_completion(student.id) == pytest.approx(70)


def test_average_without_progress_is_zero(db, make_user):
    student = make_user(role="student")
    assert AnalyticsManager(db).average_completion(student.id) == 0


def test_rollups_average_only_courses_with_progress(db, courses, make_user):
    student = make_user(role="student", standard="7", division="C")
    progress = ProgressManager(db)
    progress.upsert_progress(courses[0].id, student.id, 60)
    progress.upsert_progress(courses[1].id, student.id, 80)
    # courses[2] has no row for this student and must not count as zero

    analytics = AnalyticsManager(db)
    [row] = analytics.get_student_progress()
    assert row.average_completion == pytest.approx(70)

    [batch] = analytics.get_batches()
    assert batch.students[0].average_completion == pytest.approx(70)
    assert analytics.get_batch("7", "C").students[0].average_completion == pytest.approx(70)


def test_student_progress_listing(db, courses, make_user):
    zara = make_user(role="student", name="Zara")
    amit = make_user(role="student", name="Amit")
    ProgressManager(db).upsert_progress(courses[0].id, zara.id, 50)

    rows = AnalyticsManager(db).get_student_progress()
    assert [r.name for r in rows] == ["Amit", "Zara"]
    assert rows[0].average_completion == 0
    assert rows[1].average_completion == pytest.approx(50)
    assert rows[0].id == amit.id


def test_batches_group_students_and_skip_unplaced(db, courses, make_user):
    a1 = make_user(role="student", name="A1", standard="5", division="A")
    make_user(role="student", name="A2", standard="5", division="A")
    make_user(role="student", name="B1", standard="6", division="B")
    # Placement can only be missing on rows written outside create_user
    db.add(UserModel(username="loose", role="student", name="Loose", phone_number="+1"))
    db.commit()
    ProgressManager(db).upsert_progress(courses[0].id, a1.id, 90)

    batches = AnalyticsManager(db).get_batches()
    assert [(b.standard, b.division, b.student_count) for b in batches] == [
        ("5", "A", 2),
        ("6", "B", 1),
    ]
    first = batches[0]
    assert [s.name for s in first.students] == ["A1", "A2"]
    assert first.students[0].average_completion == pytest.approx(90)
    assert first.students[1].average_completion == 0


def test_batches_empty(db):
    assert AnalyticsManager(db).get_batches() == []


def test_get_batch_unknown(db):
    with pytest.raises(NotFoundError):
        AnalyticsManager(db).get_batch("9", "Z")


def test_overview_counts_recent_logins_only(db, make_user):
    student = make_user(role="student")
    make_user(role="student")
    make_user(role="teacher")
    make_user(role="parent")
    db.add(LoginLogModel(user_id=student.id, login_time=utcnow()))
    db.add(LoginLogModel(user_id=student.id, login_time=utcnow() - timedelta(days=10)))
    db.commit()

    overview = AnalyticsManager(db).get_overview()
    assert overview.total_students == 2
    assert overview.total_teachers == 1
    assert overview.total_logins_this_week == 1


def test_pending_assignments_is_set_difference(db, teacher, make_user):
    student = make_user(role="student", standard="5", division="A")
    assignments = AssignmentManager(db)
    a1 = assignments.create_assignment("A1", "quiz", "5", "A", teacher.id)
    a2 = assignments.create_assignment("A2", "written", "5", "A", teacher.id)
    assignments.create_assignment("Other class", "quiz", "5", "B", teacher.id)
    assignments.submit_assignment(a1.id, student.id)

    pending = ParentManager(db).pending_assignments(student)
    assert [p.assignment_id for p in pending] == [a2.id]
    assert pending[0].assignment_type == "written"


def test_parent_dashboard(db, teacher, courses):
    student, parent, _ = UserManager(db).create_student_with_parent(
        "Asha", "asha01", "9876500000", "5", "A", "Rita Sharma", "9876500001"
    )
    assignments = AssignmentManager(db)
    assignments.create_assignment("Homework", "upload", "5", "A", teacher.id)
    ProgressManager(db).upsert_progress(courses[0].id, student.id, 35)

    dashboard = ParentManager(db).get_parent_dashboard(parent.id)
    [child] = dashboard.children
    assert child.id == student.id
    assert [(p.course_title, p.progress_percentage) for p in child.course_progress] == [
        ("Course 0", 35)
    ]
    assert [a.assignment_title for a in child.pending_assignments] == ["Homework"]


def test_parent_dashboard_without_children_is_empty(db, make_user):
    parent = make_user(role="parent")
    assert ParentManager(db).get_parent_dashboard(parent.id).children == []


def test_parent_dashboard_requires_parent_role(db, make_user):
    student = make_user(role="student")
    with pytest.raises(NotFoundError):
        ParentManager(db).get_parent_dashboard(student.id)


def test_deleting_course_cascades_to_progress(db, courses, make_user):
    student = make_user(role="student")
    progress = ProgressManager(db)
    progress.upsert_progress(courses[0].id, student.id, 100)
    progress.upsert_progress(courses[1].id, student.id, 50)
    analytics = AnalyticsManager(db)
    assert analytics.average_completion(student.id) == pytest.approx(75)

    CourseManager(db).delete_course(courses[0].id)

    db.expire_all()
    remaining = db.query(CourseProgressModel).filter(CourseProgressModel.course_id == courses[0].id)
    assert remaining.count() == 0
    assert analytics.average_completion(student.id) == pytest.approx(50)

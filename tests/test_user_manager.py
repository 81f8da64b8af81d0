import pytest

from core.exceptions import AlreadyExistsError, InvalidArgumentError, NotFoundError
from models.parent_child import ParentChildModel
from models.user import UserModel
from utils.user_manager import UserManager, derive_parent_username


def test_create_user_lowercases_username_and_normalizes_phone(db):
    user = UserManager(db).create_user(
        username="MrKumar", name="Ravi Kumar", phone_number="9811100000", role="teacher"
    )
    assert user.username == "mrkumar"
    assert user.phone_number == "+9811100000"
    assert user.id is not None


def test_create_user_rejects_username_case_insensitively(db, make_user):
    make_user(role="teacher", username="mrkumar")
    with pytest.raises(AlreadyExistsError, match="Username"):
        UserManager(db).create_user(
            username="MRKUMAR", name="Other", phone_number="9811100099", role="teacher"
        )


def test_create_user_rejects_duplicate_phone_in_either_form(db, make_user):
    make_user(role="teacher", phone_number="+9811100000")
    with pytest.raises(AlreadyExistsError, match="Phone"):
        UserManager(db).create_user(
            username="someone", name="Someone", phone_number="9811100000", role="teacher"
        )


def test_student_requires_class_placement(db):
    with pytest.raises(InvalidArgumentError):
        UserManager(db).create_user(
            username="kid", name="Kid", phone_number="1", role="student", standard="5"
        )


def test_create_user_rejects_unknown_role(db):
    with pytest.raises(InvalidArgumentError):
        UserManager(db).create_user(
            username="x", name="X", phone_number="1", role="janitor"
        )


def test_update_phone(db, make_user):
    user = make_user(role="teacher")
    updated = UserManager(db).update_phone(user.id, " 9822200000")
    assert updated.phone_number == "+9822200000"


def test_update_phone_to_own_number_is_allowed(db, make_user):
    user = make_user(role="teacher", phone_number="+9822200000")
    assert UserManager(db).update_phone(user.id, "9822200000").phone_number == "+9822200000"


def test_update_phone_rejects_number_of_another_user(db, make_user):
    make_user(role="teacher", phone_number="+9822200000")
    other = make_user(role="teacher")
    with pytest.raises(AlreadyExistsError):
        UserManager(db).update_phone(other.id, "9822200000")


def test_update_phone_unknown_user(db):
    with pytest.raises(NotFoundError):
        UserManager(db).update_phone(999, "9822200000")


def test_list_users_by_role(db, make_user):
    make_user(role="teacher")
    make_user(role="teacher")
    make_user(role="student")
    teachers = UserManager(db).list_users_by_role("teacher")
    assert len(teachers) == 2
    assert {u.role for u in teachers} == {"teacher"}
    # newest first
    assert teachers[0].id > teachers[1].id


def test_derive_parent_username():
    assert derive_parent_username("Rita Sharma") == "rita_sharma"
    assert derive_parent_username("  Anil   Kumar Rao ") == "anil_kumar_rao"


def test_create_student_with_parent_scenario(db):
    student, parent, parent_phone = UserManager(db).create_student_with_parent(
        student_name="Asha",
        student_username="asha01",
        student_phone="9876500000",
        standard="5",
        division="A",
        parent_name="Rita Sharma",
        parent_phone="9876500001",
    )

    assert student.role == "student"
    assert student.username == "asha01"
    assert student.phone_number == "+9876500000"
    assert (student.standard, student.division) == ("5", "A")
    assert parent.role == "parent"
    assert parent.username == "rita_sharma"
    assert parent.phone_number == "+9876500001"
    assert parent_phone == "+9876500001"

    assert db.query(UserModel).filter(UserModel.role == "student").count() == 1
    assert db.query(UserModel).filter(UserModel.role == "parent").count() == 1
    links = db.query(ParentChildModel).all()
    assert [(link.parent_id, link.child_id) for link in links] == [(parent.id, student.id)]


def test_create_student_with_parent_reuses_existing_parent(db):
    manager = UserManager(db)
    _, first_parent, _ = manager.create_student_with_parent(
        "Asha", "asha01", "9876500000", "5", "A", "Rita Sharma", "9876500001"
    )
    sibling, parent, parent_phone = manager.create_student_with_parent(
        "Arjun", "arjun02", "9876500002", "3", "B", "Rita Sharma", "+9876500001"
    )

    assert parent.id == first_parent.id
    assert parent_phone is None
    assert db.query(UserModel).filter(UserModel.role == "parent").count() == 1
    child_ids = {
        link.child_id
        for link in db.query(ParentChildModel).filter(ParentChildModel.parent_id == parent.id)
    }
    assert sibling.id in child_ids
    assert len(child_ids) == 2


def test_create_student_with_parent_rejects_existing_username(db, make_user):
    make_user(role="student", username="asha01")
    with pytest.raises(AlreadyExistsError):
        UserManager(db).create_student_with_parent(
            "Asha", "ASHA01", "9876500000", "5", "A", "Rita Sharma", "9876500001"
        )
    assert db.query(ParentChildModel).count() == 0


def test_parent_username_collision_gets_suffix(db):
    manager = UserManager(db)
    manager.create_student_with_parent(
        "Asha", "asha01", "9876500000", "5", "A", "Rita Sharma", "9876500001"
    )
    _, parent, _ = manager.create_student_with_parent(
        "Meera", "meera01", "9876500010", "5", "A", "Rita Sharma", "9876500011"
    )
    assert parent.username == "rita_sharma_2"


def test_provisioning_is_atomic(db, make_user):
    # The parent phone belongs to a teacher, so no parent can be created
    make_user(role="teacher", phone_number="+9876500001")

    with pytest.raises(AlreadyExistsError):
        UserManager(db).create_student_with_parent(
            "Asha", "asha01", "9876500000", "5", "A", "Rita Sharma", "9876500001"
        )

    assert db.query(UserModel).filter(UserModel.username == "asha01").first() is None
    assert db.query(ParentChildModel).count() == 0


def test_ensure_admin_only_seeds_once(db):
    manager = UserManager(db)
    admin = manager.ensure_admin("admin", "Administrator", "9000000001")
    assert admin is not None and admin.role == "admin"
    assert manager.ensure_admin("admin2", "Other", "9000000002") is None
    assert db.query(UserModel).filter(UserModel.role == "admin").count() == 1


@pytest.mark.parametrize("username", ["", "   ", "\t"])
def test_create_user_rejects_blank_username(db, username):
    with pytest.raises(InvalidArgumentError, match="blank"):
        UserManager(db).create_user(
            username=username, name="Ravi", phone_number="9811100000", role="teacher"
        )
    assert db.query(UserModel).count() == 0


@pytest.mark.parametrize(
    "student_username, parent_name",
    [("   ", "Rita Sharma"), ("asha01", "   "), ("   ", "   ")],
)
def test_create_student_with_parent_rejects_blank_names(db, student_username, parent_name):
    with pytest.raises(InvalidArgumentError, match="blank"):
        UserManager(db).create_student_with_parent(
            "Asha", student_username, "9876500000", "5", "A", parent_name, "9876500001"
        )
    assert db.query(UserModel).count() == 0
    assert db.query(ParentChildModel).count() == 0


def test_get_student_requires_student_role(db, make_user):
    student = make_user(role="student")
    parent = make_user(role="parent")
    manager = UserManager(db)

    assert manager.get_student(student.id).id == student.id
    with pytest.raises(NotFoundError, match="Student"):
        manager.get_student(parent.id)
    with pytest.raises(NotFoundError):
        manager.get_student(999)

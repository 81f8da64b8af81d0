from .base import Base
from .user import UserModel
from .parent_child import ParentChildModel
from .course import CourseModel
from .course_progress import CourseProgressModel
from .assignment import AssignmentModel
from .assignment_submission import AssignmentSubmissionModel
from .login_log import LoginLogModel
from .otp import OtpModel

__all__ = [
    "Base",
    "UserModel",
    "ParentChildModel",
    "CourseModel",
    "CourseProgressModel",
    "AssignmentModel",
    "AssignmentSubmissionModel",
    "LoginLogModel",
    "OtpModel",
]

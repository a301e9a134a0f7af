from app.models.subject import Subject, TeacherSubjectAssignment  # noqa: F401
from app.models.teacher import AttendanceStatus, TeacherAttendance  # noqa: F401
from app.models.timetable import TeacherTimetable, TimeSlot  # noqa: F401

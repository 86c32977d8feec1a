"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; scheduling and attendance rules live in services.
"""

from datetime import date

from config import load_settings

from src.edu_center.edu_center.container import build_container


def main():
    container = build_container(db_config=load_settings().DB_CONFIG)
    day = container.lesson_service.schedule_for_date(date.today())
    print(f"{day.requested_date} -> {day.weekday.value} ({day.resolved_date})")
    for lesson in day.lessons:
        print(f"  #{lesson.lesson_id} {lesson.start_time:%H:%M}-{lesson.end_time:%H:%M} {lesson.room} {lesson.desc}")

    for record in container.attendance_service.list_for_date(date.today()):
        print(f"  attendance #{record.attendance_id} lesson={record.lesson_id} {record.subject.subject_id}: {record.desc}")


if __name__ == "__main__":
    main()

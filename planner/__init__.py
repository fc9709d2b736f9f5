"""Event calendar and course timetable service."""

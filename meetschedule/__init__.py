"""
MeetSchedule: cohort timetable, personal events, reminders and assignments.
"""

"""Interview result tracking."""
from .tracker import HrNotes, InterviewResultTracker, completion_percentage

__all__ = ["HrNotes", "InterviewResultTracker", "completion_percentage"]

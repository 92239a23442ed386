"""ORM models. Importing this package registers every table on Base.metadata."""

from smartnotes.models.bookmark import Bookmark
from smartnotes.models.job import Application, Job
from smartnotes.models.note import Note
from smartnotes.models.user import User

__all__ = ["Application", "Bookmark", "Job", "Note", "User"]

"""
SmartNotesX Backend — Admin Dashboard Schemas
===============================================

What:  Shapes returned by the admin statistics and user-management endpoints.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel

from smartnotes.schemas.common import CamelModel, Pagination
from smartnotes.schemas.note import NoteOut
from smartnotes.schemas.user import UserOut


class Overview(CamelModel):
    # Students only; admins are not counted
    total_users: int
    total_notes: int
    total_downloads: int
    total_views: int


class BranchCount(CamelModel):
    branch: str
    count: int


class SemesterCount(CamelModel):
    semester: int
    count: int


class Contributor(CamelModel):
    id: uuid.UUID
    name: str
    email: str
    branch: Optional[str] = None
    notes_count: int


class DashboardStats(CamelModel):
    overview: Overview
    notes_by_branch: List[BranchCount]
    notes_by_semester: List[SemesterCount]
    top_contributors: List[Contributor]
    recent_notes: List[NoteOut]


class UserPage(BaseModel):
    users: List[UserOut]
    pagination: Pagination

"""
SmartNotesX Backend — Domain Constants
========================================

What:  Enumerations shared by models, schemas, services and upload checks.
"""

BRANCHES = [
    "CSE",
    "AIML",
    "AIDS",
    "IT",
    "ECE",
    "EE",
    "ME",
    "CE",
    "BT",
    "MAE",
    "Other",
]

SEMESTERS = [1, 2, 3, 4, 5, 6, 7, 8]


class UserRole:
    STUDENT = "student"
    ADMIN = "admin"


class NoteStatus:
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class JobStatus:
    ACTIVE = "active"
    CLOSED = "closed"
    DRAFT = "draft"


class ApplicationStatus:
    APPLIED = "applied"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


# ── Uploads ───────────────────────────────────────────────────────────────
FILE_TYPES = {
    "PDF": "application/pdf",
    "DOCX": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "DOC": "application/msword",
    "JPG": "image/jpeg",
    "PNG": "image/png",
}

ALLOWED_FILE_TYPES = frozenset(FILE_TYPES.values())

# Extension used when a backend has to name the stored file itself
MIME_EXTENSIONS = {
    "application/pdf": ".pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "application/msword": ".doc",
    "image/jpeg": ".jpg",
    "image/png": ".png",
}

DEFAULT_AVATAR_URL = "https://res.cloudinary.com/demo/image/upload/avatar-default.png"
DEFAULT_COMPANY_LOGO_URL = "https://via.placeholder.com/100"

from enum import Enum


class CaseStatus(str, Enum):
    pending = "pending"
    analyzing = "analyzing"
    completed = "completed"
    error = "error"


class CaseSort(str, Enum):
    date = "date"
    name = "name"
    pages = "pages"

"""Core business logic.

Modules:
- scoring: Net score of a subject and of a whole exam
- taxonomy: Subject tree traversal (dotted paths, selectable subjects)
- exam_repository: Exam records and the persisted exam store
- analysis: Filters, summaries and chart series over the exam history
- exam_form: New exam input validation and record creation
"""

__all__ = [
    "scoring",
    "taxonomy",
    "exam_repository",
    "analysis",
    "exam_form",
]

"""Core workflow modules.

- models: Records, status enums and operation results
- doubt_lifecycle: Doubt creation, student history, professor inbox
- answer_recorder: Direct answers (insert + status flip in one transaction)
- practice_review: Practice submission, review and review queue
- query_views: Archive, leaderboard, subjects, professor directory
"""

__all__ = [
    "models",
    "doubt_lifecycle",
    "answer_recorder",
    "practice_review",
    "query_views",
]

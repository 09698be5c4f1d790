# src/constants.py
from enum import Enum

class PromptKind(Enum):
    DEEP_REPORT = "deep_report"    # Long-form narrative report
    BRIEF_REPORT = "brief_report"  # Short structured JSON guide

class ChatRole(Enum):
    SYSTEM = "system"
    USER = "user"

# Placeholders used when an answer is missing from the response map
UNANSWERED_CHOICE_TEXT = "未选择"
UNANSWERED_OPEN_TEXT = "未填写"
NO_HIGH_SCORE_TEXT = "暂无显著高分项"

# Answers scoring at least this much are quoted back to the report writer
HIGH_SCORE_THRESHOLD = 2

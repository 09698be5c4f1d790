import json
import logging
import re
from typing import Dict, Any, List, Optional

from pydantic import TypeAdapter, ValidationError

from ..schemas.assessment import BriefReport, RelapseWarning, WeeklyPlan

logger = logging.getLogger(__name__)

JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
TRAILING_COMMA_OBJECT_RE = re.compile(r",\s*}")
TRAILING_COMMA_ARRAY_RE = re.compile(r",\s*]")
CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")

# Shown whenever the model leaves a field out or returns something unusable
DEFAULT_BRIEF_REPORT = {
    "analysis": "正在分析您的成长阻碍模式...",
    "immediateActions": [
        "今天花5分钟写下一个小小的成功经历",
        "对镜子里的自己说一句鼓励的话",
        "完成一件一直拖延的小事",
    ],
    "plan21Days": {
        "week1": ["观察自己的内心声音", "记录触发情绪的时刻", "每天肯定自己一次"],
        "week2": ["尝试一个小小的改变", "与信任的人分享感受", "练习说\"不\""],
        "week3": ["回顾进步", "调整策略", "建立新习惯"],
    },
    "relapseWarnings": [
        {"signal": "开始自我批评", "strategy": "暂停，深呼吸，提醒自己进步需要时间"},
        {"signal": "想要放弃", "strategy": "回顾已取得的小进步"},
        {"signal": "感到焦虑", "strategy": "做一件让自己放松的事"},
    ],
}

FIELD_ADAPTERS = {
    "analysis": TypeAdapter(str),
    "immediateActions": TypeAdapter(List[str]),
    "plan21Days": TypeAdapter(WeeklyPlan),
    "relapseWarnings": TypeAdapter(List[RelapseWarning]),
}


def extract_json_object(content: Optional[str]) -> Dict[str, Any]:
    """
    Parses the model reply as a JSON object. When the reply is wrapped in prose
    or carries trailing commas and raw control characters, the outermost {...}
    is cleaned up and parsed again. Returns an empty dict when nothing parses.
    """
    if not content:
        return {}
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        match = JSON_OBJECT_RE.search(content)
        if not match:
            logger.warning("Brief report reply contains no JSON object")
            return {}
        cleaned = TRAILING_COMMA_OBJECT_RE.sub("}", match.group(0))
        cleaned = TRAILING_COMMA_ARRAY_RE.sub("]", cleaned)
        cleaned = CONTROL_CHARS_RE.sub(" ", cleaned)
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.warning(f"Brief report reply could not be parsed: {e}")
            return {}
    return data if isinstance(data, dict) else {}


def parse_brief_report(content: Optional[str]) -> BriefReport:
    """Builds a complete BriefReport, filling missing or malformed fields with the defaults."""
    raw = extract_json_object(content)
    fields = {}
    for key, adapter in FIELD_ADAPTERS.items():
        value = raw.get(key)
        if value:
            try:
                fields[key] = adapter.validate_python(value)
                continue
            except ValidationError:
                logger.warning("Brief report field has an unexpected shape", extra={"field": key})
        fields[key] = adapter.validate_python(DEFAULT_BRIEF_REPORT[key])
    return BriefReport.model_validate(fields)

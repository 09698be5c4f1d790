# services/scoring_engine/definitions.py
# Static scoring tables for both assessment models.

from .models import ScoringModel

CATALOG_FILES = {
    ScoringModel.GROWTH_OBSTACLE: "growth_obstacle.yml",
    ScoringModel.MENTAL_ENERGY_DRAIN: "mental_energy.yml",
}

# --- Growth obstacle model ---

BELIEF_WEIGHTS = {
    "金钱与价值": 0.12,
    "自我价值": 0.20,
    "能力信念": 0.15,
    "关系模式": 0.13,
    "时间与年龄": 0.08,
    "风险与失败": 0.12,
    "世界观": 0.08,
    "完美主义": 0.12,
}

# Divisor for the weighted belief score. Kept as published, it is not 12 * sum(weights).
BELIEF_WEIGHT_DIVISOR = 12.12
BEHAVIOR_TOTAL_MAX = 75

BELIEF_SHARE = 0.55
BEHAVIOR_SHARE = 0.45

AGE_GROUP_QUESTION_ID = 1
FOCUS_AREA_QUESTION_ID = 2
STUCK_DURATION_QUESTION_ID = 3
CHANGE_EXPECTATION_QUESTION_ID = 4
LIFE_SATISFACTION_QUESTION_ID = 5

# Keyed by the stringified option index of the stuck-duration question
DURATION_MULTIPLIERS = {"0": 1.0, "1": 1.1, "2": 1.2, "3": 1.3}
DEFAULT_DURATION_KEY = "0"

DEFAULT_LIFE_SATISFACTION = 5
SATISFACTION_STEP = 0.02

OVERALL_INDEX_CEILING = 10.0

BEHAVIOR_CORRELATIONS = {
    "自我价值": ["自我破坏", "过度补偿"],
    "完美主义": ["拖延与逃避", "能量内耗", "完美主义行为"],
    "能力信念": ["拖延与逃避", "自我破坏"],
    "风险与失败": ["拖延与逃避", "过度防御"],
    "关系模式": ["过度补偿", "过度防御"],
}

PATTERN_TYPE_CORRELATED = "强关联型"
PATTERN_TYPE_MULTI_POINT = "多点型"
CORRELATED_SEVERITY_BOOST = 1.2
DEFAULT_SEVERITY_BOOST = 1.0

# Upper bounds for 轻度 / 中度 per behavior pattern maximum; anything above is 重度
PATTERN_SEVERITY_THRESHOLDS = {
    12: (4, 8),
    13: (4, 9),
}
PATTERN_SEVERITY_LABELS = ("轻度", "中度", "重度")

GROWTH_OBSTACLE_LEVELS = [
    {"max": 2.9, "label": "绿灯区 (轻度阻碍)", "emoji": "🟢", "tags": ["#状态在线", "#小有卡顿", "#顺势而为"]},
    {"max": 4.9, "label": "黄灯区 (中度阻碍)", "emoji": "🟡", "tags": ["#时走时停", "#想要又不敢", "#值得留意"]},
    {"max": 6.9, "label": "橙灯区 (中重度阻碍)", "emoji": "🟠", "tags": ["#原地打转", "#自我设限", "#需要松绑"]},
    {"max": 8.4, "label": "红灯区 (重度阻碍)", "emoji": "🔴", "tags": ["#深度卡点", "#反复受挫", "#是时候改变了"]},
    {"max": 10.0, "label": "紧急区 (极重度阻碍)", "emoji": "🚨", "tags": ["#寸步难行", "#身心俱疲", "#先照顾好自己"]},
]

# --- Mental energy drain model ---

MENTAL_ENERGY_LEVELS = [
    {"min": 0, "max": 25, "label": "能量自由型", "emoji": "🌟", "percent": "12%", "tags": ["#人间清醒", "#松弛感天花板", "#低内耗体质"]},
    {"min": 26, "max": 50, "label": "轻度内耗型", "emoji": "🌤️", "percent": "38%", "tags": ["#还算正常人", "#偶尔emo", "#可控范围内"]},
    {"min": 51, "max": 75, "label": "中度内耗型", "emoji": "⛅", "percent": "35%", "tags": ["#精神内耗重灾区", "#长期疲惫", "#该重视了"]},
    {"min": 76, "max": 100, "label": "重度内耗型", "emoji": "🌧️", "percent": "15%", "tags": ["#能量耗竭", "#需要帮助", "#抱抱你"]},
]

# (score_min, score_max, beat_at_min, beat_at_max); illustrative, not a measured distribution
BEAT_PERCENT_BANDS = [
    (0, 25, 100, 88),
    (26, 50, 88, 62),
    (51, 75, 62, 15),
    (76, 100, 15, 0),
]

TOTAL_SCORE_MIN = 0
TOTAL_SCORE_MAX = 100

# src/prompts/formatter.py
# Renders scored assessments into instructions for the report-writing model.
# Every sanitized open answer and every dimension name is interpolated exactly
# once; later sections refer back to them by question number or by role.

import json
from typing import Dict, Any, List, Sequence

from services.scoring_engine.models import GrowthObstacleScores

from ..constants import ChatRole, PromptKind
from ..schemas.assessment import GrowthObstacleUserData, MentalEnergyUserData
from .user_data import format_number

FORBIDDEN_TERMS = ["架构师", "解码", "逻辑", "代码", "漏洞", "系统", "扫描"]
FORBIDDEN_SELF_TITLES = ["咨询师", "医生", "伙伴"]
REPORTER_IDENTITY = "成长观察员"

SYSTEM_PERSONAS = {
    PromptKind.DEEP_REPORT: '你是一位资深的"成长观察员"和个人成长导师，致力于通过行为细节揭示一个人的内在防御机制。你的分析深刻、温暖且具有洞察力。',
    PromptKind.BRIEF_REPORT: '你是一位专业的心理成长分析师，擅长输出结构化的 JSON 格式报告。只输出有效的 JSON，不要有任何其他文字。',
}


def _plain(value: Any) -> Any:
    """Drops the trailing .0 from whole floats so JSON blocks read like the scores shown elsewhere."""
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _json_block(data: Any) -> str:
    return json.dumps(_plain(data), ensure_ascii=False, indent=2)


def _compact_json(data: Any) -> str:
    return json.dumps(_plain(data), ensure_ascii=False, separators=(",", ":"))


def _quoted_list(items: Sequence[str]) -> str:
    return "、".join(f'"{item}"' for item in items)


def _requirements(word_range: str, example_question: int, scene_count: int) -> str:
    return f"""⚠️ 关键要求：
1. 字数严格控制在 {word_range} 字（这是硬性指标）。
2. 严禁使用 Markdown 的双星号 (**) 进行加粗。请使用清晰的标题结构（# 和 ##）以及优美的排版来区分段落，不要在正文中使用任何加粗标记。
3. 每个判断必须有具体答题证据支撑（引用题号和选项，如：你在 Q{example_question} 选择了...）。
4. 至少还原 {scene_count} 个具体生活场景（像电影慢镜头一样生动拆解）。
5. 绝对禁止技术术语：严禁出现{_quoted_list(FORBIDDEN_TERMS)}等程序员或工程词汇。
6. 身份统一：你是"{REPORTER_IDENTITY}"。严禁自称{_quoted_list(FORBIDDEN_SELF_TITLES)}。"""


def format_growth_obstacle_prompt(user_data: GrowthObstacleUserData) -> str:
    """Deep report instructions for the 50-question growth obstacle assessment."""
    info = user_data.basic_info
    scores = user_data.scores
    core = scores.core_obstacle
    opens = user_data.open_responses
    named = {core.primary_belief, core.secondary_belief, core.key_behavior}
    other_beliefs = {name: score for name, score in scores.belief_raw.items() if name not in named}
    other_behaviors = {
        name: pattern.model_dump() for name, pattern in scores.behavior_scores.items() if name not in named
    }
    secondary = "无"
    if core.secondary_belief:
        secondary = f"{core.secondary_belief}（分值：{format_number(scores.belief_raw[core.secondary_belief])}）"
    key_behavior = "无"
    if core.key_behavior:
        pattern = scores.behavior_scores[core.key_behavior]
        key_behavior = f"{core.key_behavior}（分值：{format_number(pattern.score)}，程度：{pattern.level}）"

    return f"""# 任务说明
现在有一位用户完成了"成长阻碍探测器"测评，你需要基于其50道题的答题数据，撰写一份深度个性化的成长分析报告。

{_requirements("5000-7000", 12, 4)}

---

# 用户测评数据
## 基础信息
- 年龄段：{info.age_group}
- 关注领域：{"、".join(info.focus_areas)}
- 被卡住时长：{info.stuck_duration}
- 改变期待：{info.change_expectation}
- 生活满意度：{format_number(info.life_satisfaction)}/10
## 核心评分
- 阻碍指数：{format_number(scores.overall_index)}/10
- 状态评估：{scores.level.emoji} {scores.level.label}
- 核心心智障碍：{core.primary_belief}（分值：{format_number(core.primary_score)}/{format_number(core.primary_max_score)}）
- 次要心智障碍：{secondary}
- 关键行为模式：{key_behavior}
- 信念与行为的关联：{core.pattern_type}
## 其余信念维度得分
{_json_block(other_beliefs)}
## 其余行为模式得分
{_json_block(other_behaviors)}
## 开放题原文
Q48 - 内心的声音：{opens.q48_limiting_voice}
Q49 - 最害怕的是：{opens.q49_fear}
Q50 - 理想中的我：{opens.q50_ideal_future}
## 显著特征题目
{user_data.high_score_summary}

---

# 报告结构要求

## 第一部分：深层心理机制透视（1200-1500字）
1. 开篇锚定：引用上面的阻碍指数开启对话。
2. 核心矛盾揭示：基于最高分维度，通过至少 3 道具体题目拆解内心冲突。
3. 隐藏功能分析：分析 Q48 中那句"内心的声音"的自我保护意图。
4. 自动化循环推测：描述触发、想法、情绪、行为到结果的闭环。

## 第二部分：早期经验与生命印记（800-1000字）
1. 答题模式中的印记：从关系维度推测早期环境。
2. 三个可能的童年场景假设：生动描述场景、信念形成及当代影响。
3. 生存策略的当代后果：以前的"聪明选择"如何变成现在的"沉重负担"。

## 第三部分：典型场景深度还原（1500-1800字）⭐最重要
1. 场景1：机会来临的那一刻。结合 Q33 拆解 T-24h 到 T+24h 的内心戏剧。
2. 场景2：获得赞美的瞬间。结合 Q9 拆解由于自我否定导致的"不适感"。
3. 场景3：[根据用户突出问题定制场景，如做决定的时刻]。
4. 场景4：理想与现实的对话。分析现实中的你与 Q50 中"理想我"之间的恐惧墙。

## 第四部分：限制性心智图谱（800-1000字）
1. 信念闭环可视化描述：用文字描绘一张从核心恐惧到行为逃避的地图。
2. 最难撼动的那一环：为什么它能长久存在？
3. 撬动改变的缝隙：具体的替换实验设计。

## 第五部分：行为模式的维持力量（600-800字）
1. 现状的"奖赏"：你的拖延或防御在潜意识里为你争取到了什么？
2. 循环图解说：详细解释每个环节的心理连接。

## 第六部分：突破路径规划（1200-1500字）
1. 阶段1：意识觉醒期（1-2周）。每日练习：反例搜集、声音监测。
2. 阶段2：小范围实验期（3-4周）。针对关键行为模式的微突破动作。
3. 阶段3：重塑期（5-8周）。心智替换练习。
4. 阶段4：巩固期（9-12周）。应对反复，建立长期观察机制。

## 第七部分：写给你的信（500-700字）
回应用户在 Q49 中写下的恐惧。
署名：你的{REPORTER_IDENTITY}。
注意：严禁展示日期。

---

现在，请开始生成这份专属于用户的深度生命报告。记住：不需要加粗语法，用文字的深度去触动内心。"""


def format_mental_energy_prompt(user_data: MentalEnergyUserData) -> str:
    """Deep report instructions for the 38-question 内耗 assessment."""
    scores = user_data.scores
    level = scores.level_info
    opens = user_data.open_responses
    top = scores.top_dimension
    dimensions = {
        name: {"score": score, "percent": scores.dimension_percentages[name]}
        for name, score in scores.dimension_scores.items()
    }
    top_detail = dimensions.pop(top)

    return f"""# 任务说明
现在有一位用户完成了"内耗指数测评"，你需要基于其38道题的答题数据，撰写一份深度个性化的内耗分析报告。

{_requirements("4000-6000", 2, 3)}

---

# 用户测评数据
## 核心评分
- 内耗指数：{scores.total_score}/100
- 内耗类型：{level.emoji} {level.label}（约 {level.percent or "-"} 的测评者属于这一类型）
- 状态标签：{" ".join(level.tags)}
- 能量状态超过了 {scores.beat_percent}% 的测评者
- 最突出的内耗维度：{top}（原始分：{format_number(top_detail["score"])}，百分比：{top_detail["percent"]}）
## 其余维度得分（score 为原始分，percent 为 0-100 百分比）
{_json_block(dimensions)}
## 开放题原文
Q36 - 最近一次内耗到崩溃：{opens.q36_breakdown}
Q37 - 最想给自己放的假：{opens.q37_vacation}
Q38 - 现在与理想的生活状态：{opens.q38_status}
## 显著特征题目
{user_data.high_score_summary}

---

# 报告结构要求

## 第一部分：你的内耗画像（800-1000字）
1. 开篇锚定：引用上面的内耗指数和内耗类型开启对话。
2. 能量的整体流向：结合四个维度的百分比，说明能量主要消耗在哪里。
3. 重点剖析最突出的内耗维度：通过至少 3 道具体题目还原内耗发生的方式。

## 第二部分：崩溃时刻的慢镜头（1000-1200字）
1. 还原 Q36 中描述的那次崩溃：事情的起点、脑内的声音、身体的反应。
2. 那一刻真正让人疲惫的不是事情本身，而是什么？
3. 同样的模式还会在生活的哪些角落出现？

## 第三部分：典型场景深度还原（1000-1200字）⭐最重要
1. 场景1：等待回复的那半小时。反复推演的念头如何把一件小事放大成一部连续剧。
2. 场景2：情绪被点燃的瞬间。起伏的情绪如何让一句话在心里回响好几天。
3. 场景3：迟迟无法开始的那件事。犹豫和拖延如何让计划一直停留在脑子里。
4. 场景4：又一次委屈自己的时刻。讨好和顾虑如何让你为别人的感受买单。

## 第四部分：内耗背后的自我保护（600-800字）
1. 内耗在替你挡住什么？
2. 它曾经如何帮助过你，又在什么时候开始反过来消耗你。

## 第五部分：能量回收计划（800-1000字）
1. 第1周：觉察期。记录每天最耗能的三个时刻。
2. 第2-3周：减负期。针对最突出的内耗维度设计微小的替代动作。
3. 第4周及以后：充电期。结合 Q37 中的心愿，安排属于自己的充电时刻。

## 第六部分：写给你的信（500-700字）
回应用户在 Q38 中写下的理想状态，告诉 TA 从现在到那里的第一步。
署名：你的{REPORTER_IDENTITY}。
注意：严禁展示日期。

---

现在，请开始生成这份专属于用户的内耗分析报告。记住：不需要加粗语法，用温暖而具体的文字陪伴对方看见自己。"""


def format_brief_report_prompt(scores: GrowthObstacleScores, open_answers: Sequence[str]) -> str:
    """Short JSON guide instructions for the growth obstacle assessment."""
    voices = "\n".join(open_answers)
    primary = scores.core_obstacle.primary_belief
    other_beliefs = {name: score for name, score in scores.belief_scores.items() if name != primary}

    return f"""作为资深"{REPORTER_IDENTITY}"与"个人成长导师"，根据以下探测量化结果生成一份针对性的简要指南。请保持冷静、客观且极具洞察力的分析风格，严禁出现任何医疗或心理咨询建议的措辞。

# 重要原则
- 严禁使用{_quoted_list(FORBIDDEN_TERMS)}等技术词汇。
- 使用人文、心理、成长相关的词汇，关注"生命脚本"与"重塑"。

# 探测数据
- 核心卡点: {primary}（{format_number(scores.belief_scores[primary])}/5）
- 其余信念维度: {_compact_json(other_beliefs)}
- 6个行为模式: {_compact_json(scores.pattern_scores)}
- 综合阻碍指数: {format_number(scores.overall_index)}/10

# 用户心声
{voices}

请输出严格的 JSON 格式报告，包含以下字段：
- analysis: 针对核心卡点的心智解读，指出潜意识是如何为了维持现状的"心理安全感"而牺牲了"真实成长"。(200-300字)
- immediateActions: 3个在24小时内可立即执行的小动作（具体、简单、不带压力）。
- plan21Days: 包含week1, week2, week3的对象，每周3条具体建议。
- relapseWarnings: 包含3个对象，每个对象有signal(预警信号)和strategy(应对策略)。

只输出 JSON，不要有其他内容。"""


def build_chat_messages(prompt: str, kind: PromptKind = PromptKind.DEEP_REPORT) -> List[Dict[str, str]]:
    """System persona plus user prompt, in chat-completion message format."""
    return [
        {"role": ChatRole.SYSTEM.value, "content": SYSTEM_PERSONAS[kind]},
        {"role": ChatRole.USER.value, "content": prompt},
    ]

import json

import pytest

from services.scoring_engine import growth_obstacle, mental_energy
from src.constants import PromptKind
from src.prompts.formatter import (
    FORBIDDEN_TERMS,
    SYSTEM_PERSONAS,
    build_chat_messages,
    format_brief_report_prompt,
    format_growth_obstacle_prompt,
    format_mental_energy_prompt,
)
from src.prompts.user_data import build_growth_obstacle_user_data, build_mental_energy_user_data

LIMITING_VOICE = "你凭什么觉得自己能做到"
FEAR = "害怕成功之后被更多人审视"
IDEAL_FUTURE = "在海边开一家小书店"


def count_names(prompt, names):
    """Occurrences of each name, not counting those inside a longer name from the same list."""
    counts = {}
    for name in names:
        longer = [other for other in names if other != name and name in other]
        counts[name] = prompt.count(name) - sum(prompt.count(other) for other in longer)
    return counts


@pytest.fixture
def growth_user_data(growth_catalog, answer_all, settings):
    responses = answer_all(growth_catalog, 2)
    responses.update({5: 4, 48: LIMITING_VOICE, 49: FEAR, 50: IDEAL_FUTURE})
    scores = growth_obstacle.compute_scores(growth_catalog, responses)
    return build_growth_obstacle_user_data(growth_catalog, responses, scores, settings)


@pytest.fixture
def energy_user_data(energy_catalog, answer_max, settings):
    responses = answer_max(energy_catalog, range(1, 11))
    responses.update({36: "开会说错一句话", 37: "一个人去山里发呆", 38: "焦虑、疲惫、麻木"})
    scores = mental_energy.compute_scores(energy_catalog, responses)
    return build_mental_energy_user_data(energy_catalog, responses, scores, settings)


def test_growth_prompt_quotes_open_answers_exactly_once(growth_user_data):
    prompt = format_growth_obstacle_prompt(growth_user_data)
    for answer in (LIMITING_VOICE, FEAR, IDEAL_FUTURE):
        assert prompt.count(answer) == 1


def test_growth_prompt_contains_scores_and_dimensions(growth_user_data):
    prompt = format_growth_obstacle_prompt(growth_user_data)
    scores = growth_user_data.scores
    assert f"阻碍指数：{scores.overall_index}/10" in prompt
    assert scores.level.label in prompt
    assert "核心心智障碍：金钱与价值（分值：6/12）" in prompt
    assert "次要心智障碍：自我价值（分值：6）" in prompt
    assert "关键行为模式：拖延与逃避（分值：" in prompt
    assert "生活满意度：4/10" in prompt
    assert '"能力信念": 6' in prompt
    assert '"level": "中度"' in prompt


def test_growth_prompt_structure(growth_user_data):
    prompt = format_growth_obstacle_prompt(growth_user_data)
    assert "5000-7000" in prompt
    for term in FORBIDDEN_TERMS:
        assert f'"{term}"' in prompt
    for heading, words in [("第一部分", "1200-1500"), ("第三部分", "1500-1800"), ("第七部分", "500-700")]:
        assert heading in prompt and words in prompt
    assert prompt.count("## 第") == 7
    assert "署名：你的成长观察员" in prompt


def test_growth_prompt_from_empty_answers(growth_catalog, settings):
    """Any valid scores aggregate produces a complete prompt, with placeholders for gaps."""
    scores = growth_obstacle.compute_scores(growth_catalog, {})
    prompt = format_growth_obstacle_prompt(build_growth_obstacle_user_data(growth_catalog, {}, scores, settings))
    assert prompt.count("未填写") == 3
    assert "暂无显著高分项" in prompt
    assert prompt.rstrip().endswith("用文字的深度去触动内心。")


def test_energy_prompt(energy_user_data):
    prompt = format_mental_energy_prompt(energy_user_data)
    for answer in ("开会说错一句话", "一个人去山里发呆", "焦虑、疲惫、麻木"):
        assert prompt.count(answer) == 1
    assert "内耗指数：28/100" in prompt
    assert "🌤️ 轻度内耗型" in prompt
    assert "最突出的内耗维度：思维内耗（原始分：28，百分比：100）" in prompt
    assert '"percent": 0' in prompt
    assert "#偶尔emo" in prompt
    assert prompt.count("## 第") == 6


def test_brief_prompt(growth_user_data):
    scores = growth_user_data.scores
    prompt = format_brief_report_prompt(scores, [LIMITING_VOICE, FEAR])
    assert f"综合阻碍指数: {scores.overall_index}/10" in prompt
    assert "核心卡点: 金钱与价值（" in prompt
    names = list(scores.belief_scores) + list(scores.pattern_scores)
    assert count_names(prompt, names) == {name: 1 for name in names}
    assert f"{LIMITING_VOICE}\n{FEAR}" in prompt
    assert "只输出 JSON" in prompt


def test_build_chat_messages():
    messages = build_chat_messages("prompt body")
    assert messages == [
        {"role": "system", "content": SYSTEM_PERSONAS[PromptKind.DEEP_REPORT]},
        {"role": "user", "content": "prompt body"},
    ]
    brief = build_chat_messages("json please", PromptKind.BRIEF_REPORT)
    assert "只输出有效的 JSON" in brief[0]["content"]


def test_growth_prompt_names_each_dimension_once(growth_user_data):
    prompt = format_growth_obstacle_prompt(growth_user_data)
    scores = growth_user_data.scores
    names = list(scores.belief_raw) + list(scores.behavior_scores)
    assert count_names(prompt, names) == {name: 1 for name in names}


def test_growth_prompt_names_each_dimension_once_with_empty_answers(growth_catalog, settings):
    scores = growth_obstacle.compute_scores(growth_catalog, {})
    prompt = format_growth_obstacle_prompt(build_growth_obstacle_user_data(growth_catalog, {}, scores, settings))
    names = list(scores.belief_raw) + list(scores.behavior_scores)
    assert count_names(prompt, names) == {name: 1 for name in names}


def test_energy_prompt_names_each_dimension_once(energy_user_data):
    prompt = format_mental_energy_prompt(energy_user_data)
    names = list(energy_user_data.scores.dimension_scores)
    assert count_names(prompt, names) == {name: 1 for name in names}

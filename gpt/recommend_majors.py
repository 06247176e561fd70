"""
大模型志愿推荐

流程（每次请求独立，不保存状态）：
1. 校验考生输入，不合法直接报错，不调用大模型；
2. 把考生信息发给大模型，并提供 getMajorRecommendations 工具，模型可以调用零次或多次；
3. 模型最终回答必须是 {"recommendedMajors": [...], "reasoning": "..."}，缺字段即失败；
4. 返回校验后的推荐结果。

任何一步失败都直接抛错给前端，不重试，也不退回到条件筛选结果。
"""

import json
import re
from typing import Any, List, Optional

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from config import LLM_MAX_TOOL_ROUNDS, OPENAI_MODEL, OPENAI_TEMPERATURE, RECOMMENDATION_MODE
from db.catalog import MajorCatalog
from exceptions import SchemaViolation, UpstreamError, ValidationError
from matching.filters import apply_exclusions
from matching.subjects import is_subject_compatible
from models.major import Major, MajorRecommendationFilter, MAJOR_CATEGORIES, TUITION_RANGES, ALL_OPTION
from models.recommendation import RecommendationOutput, RecommendationResult, RecommendedMajor
from models.student import FIELD_LABELS, StudentInput

TOOL_NAME = "getMajorRecommendations"
RECOMMENDATION_MODES = ("llm", "filter", "auto")

# 不走大模型时展示的固定说明
FILTER_REASONING = "以下是根据您输入的意向筛选出的专业列表，已按选考科目和排除项过滤。您可以使用筛选栏进一步精确查找。"

MAJOR_RECOMMENDATION_TOOL = {
    "type": "function",
    "function": {
        "name": TOOL_NAME,
        "description": "根据地区、专业类别、学制、学费、院校层次等筛选条件，获取专业录取信息（包括历年分数位次和选科要求）。",
        "parameters": {
            "type": "object",
            "properties": {
                "regions": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "意向地区列表，用于筛选大学所在地区。",
                },
                "majorCategories": {
                    "type": "array",
                    "items": {"type": "string", "enum": MAJOR_CATEGORIES},
                    "description": "意向专业类别列表，用于筛选专业所属大类。",
                },
                "schoolingLength": {
                    "type": "string",
                    "description": "学制要求，例如 \"4年\" 或 \"5年\"。不需要特定学制时不要传。",
                },
                "tuitionRange": {
                    "type": "string",
                    "enum": [r for r in TUITION_RANGES if r != ALL_OPTION],
                    "description": "学费范围。不需要特定学费范围时不要传。",
                },
                "universityTier": {
                    "type": "string",
                    "description": "院校层次要求，例如 \"985\"、\"211\"。不需要特定层次时不要传。",
                },
            },
            "required": [],
            "additionalProperties": False,
        },
    },
}

SYSTEM_PROMPT = "你是一名熟悉浙江新高考志愿填报的升学顾问，擅长结合历年录取位次和选科要求给出稳妥的专业建议。你只输出 JSON。"


def format_validation_errors(error: PydanticValidationError) -> str:
    messages = []
    for err in error.errors():
        field = err["loc"][0] if err["loc"] else ""
        label = FIELD_LABELS.get(field, field or "考生信息")
        if err["type"] == "missing":
            messages.append(f"缺少{label}")
        elif err["type"] == "value_error":
            messages.append(str(err["ctx"]["error"]))
        else:
            messages.append(f"{label}格式不正确")
    return "；".join(messages)


def validate_student_input(input_data: Any) -> StudentInput:
    if isinstance(input_data, StudentInput):
        return input_data
    try:
        return StudentInput.model_validate(input_data)
    except PydanticValidationError as e:
        raise ValidationError(format_validation_errors(e)) from e


def _join(values: Optional[List[str]], default: str) -> str:
    return "、".join(values) if values else default


def _format_score(score: float) -> str:
    return str(int(score)) if float(score).is_integer() else str(score)


def build_recommendation_prompt(student: StudentInput) -> str:
    """构建推荐提示词"""
    subjects = "、".join(student.selected_subjects)
    return f"""
请根据以下考生信息，为其推荐合适的高考志愿专业和大学：

考生分数：{_format_score(student.gaokao_score)}
全省排名：{student.province_ranking}
选考科目：{subjects}

意向地区：{_join(student.intended_regions, '无特殊偏好')}
意向专业类别：{_join(student.intended_major_categories, '无特殊偏好')}
排除地区：{_join(student.excluded_regions, '无')}
排除专业类别：{_join(student.excluded_major_categories, '无')}

要求：
1. 综合考虑考生的分数、排名、选考科目、地区和专业偏好以及排除项，参考历史录取数据（尤其是近三年的分数和位次），分析录取可能性，给出 5-10 条明确的专业志愿建议。
2. 使用 {TOOL_NAME} 工具获取候选专业列表。调用工具时只传入考生明确指定的意向条件，工具返回的数据包含每个专业的选科要求。
3. 推荐的每个专业都必须符合考生的选考科目（{subjects}）：
   - “+” 连接的科目都必须选，例如要求“物理+化学”，考生选了物理、化学、生物则符合；
   - “/” 连接的科目选其一即可，例如“物理/历史均可”“物理/化学/生物任选一”；
   - 组合要求要逐组判断，例如“物理+化学/生物任选一”表示必须选物理，化学和生物至少选一门；
   - “不限”表示没有选科要求。
4. 不要推荐排除地区和排除专业类别中的专业。
5. 推荐理由要解释这些专业和学校为什么适合该考生，结合考生排名与专业历年录取位次做对比，并说明符合选科要求。

只使用工具返回的专业数据，输出 JSON，结构如下：
{{
  "recommendedMajors": [
    {{
      "majorName": "专业名称",
      "majorCode": "专业代码",
      "university": "大学名称",
      "admissionScore2022": 分数或null,
      "admissionRanking2022": 位次或null,
      "admissionScore2023": 分数或null,
      "admissionRanking2023": 位次或null,
      "admissionScore2024": 分数或null,
      "admissionRanking2024": 位次或null,
      "subjectRequirements": "选科要求"
    }}
  ],
  "reasoning": "详细的推荐理由"
}}
"""


def run_major_tool(catalog: MajorCatalog, arguments: Optional[str]) -> str:
    """执行 getMajorRecommendations 工具，返回给模型的 JSON 字符串"""
    try:
        args = json.loads(arguments or "{}")
        major_filter = MajorRecommendationFilter.model_validate(args)
    except (json.JSONDecodeError, PydanticValidationError) as e:
        logger.warning(f"⚠️ 工具参数无法解析: {arguments}")
        return json.dumps({"error": f"筛选条件格式不正确: {e}"}, ensure_ascii=False)

    majors = catalog.list_by_filter(major_filter)
    logger.info(f"🔧 {TOOL_NAME} 条件: {major_filter.to_query_params()}，返回 {len(majors)} 个专业")
    return json.dumps([major.model_dump(by_alias=True, mode="json") for major in majors], ensure_ascii=False)


def _assistant_message(message) -> dict:
    return {
        "role": "assistant",
        "content": message.content,
        "tool_calls": [
            {
                "id": tool_call.id,
                "type": "function",
                "function": {"name": tool_call.function.name, "arguments": tool_call.function.arguments},
            }
            for tool_call in message.tool_calls
        ],
    }


def _run_tool_call(tool_call, catalog: MajorCatalog) -> str:
    if tool_call.function.name != TOOL_NAME:
        logger.warning(f"⚠️ 模型调用了未知工具: {tool_call.function.name}")
        return json.dumps({"error": f"未找到工具 {tool_call.function.name}"}, ensure_ascii=False)
    return run_major_tool(catalog, tool_call.function.arguments)


async def _create_completion(client, model: str, messages: List[dict], temperature: float):
    try:
        response = await client.chat.completions.create(
            model=model,
            messages=messages,
            tools=[MAJOR_RECOMMENDATION_TOOL],
            tool_choice="auto",
            response_format={"type": "json_object"},
            temperature=temperature,
        )
    except Exception as e:
        logger.error(f"❌ 大模型调用失败: {e}")
        raise UpstreamError(f"调用大模型失败: {e}") from e

    if not response.choices:
        raise SchemaViolation("大模型未返回有效结果")
    return response.choices[0].message


_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


def _resolve_recommended_majors(
    recommended: List[RecommendedMajor], catalog: MajorCatalog, student: StudentInput
) -> List[Major]:
    """以数据集中的记录为准，去掉数据集中不存在的、选科不符的和考生排除的专业"""
    resolved = []
    seen = set()
    for item in recommended:
        major = catalog.get_by_key(item.major_code, item.university)
        if major is None:
            logger.warning(f"⚠️ 推荐的专业不在数据集中，已忽略: {item.university} {item.major_name}({item.major_code})")
            continue
        if major.key in seen:
            continue
        if not is_subject_compatible(student.selected_subjects, major.subject_requirements):
            logger.warning(f"⚠️ 推荐的专业不符合选科要求，已忽略: {major.university} {major.major_name}({major.subject_requirements})")
            continue
        seen.add(major.key)
        resolved.append(major)
    return apply_exclusions(resolved, student.excluded_regions, student.excluded_major_categories)


def parse_recommendation_output(content: Optional[str], catalog: MajorCatalog, student: StudentInput) -> RecommendationResult:
    """校验大模型的最终回答"""
    if not content or not content.strip():
        raise SchemaViolation("大模型未返回有效结果")

    try:
        data = json.loads(_CODE_FENCE.sub("", content.strip()))
    except json.JSONDecodeError as e:
        raise SchemaViolation(f"大模型输出不是合法的 JSON: {e}") from e

    if not isinstance(data, dict):
        raise SchemaViolation("大模型输出结构不正确，应为 JSON 对象")

    try:
        output = RecommendationOutput.model_validate(data)
    except PydanticValidationError as e:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in e.errors()})
        logger.error(f"❌ 大模型输出缺少字段或类型错误: {fields}")
        raise SchemaViolation(f"大模型输出结构不正确，缺少或错误的字段: {', '.join(fields)}") from e

    majors = _resolve_recommended_majors(output.recommended_majors, catalog, student)
    logger.info(f"✅ 大模型推荐 {len(output.recommended_majors)} 个专业，校验后保留 {len(majors)} 个")
    return RecommendationResult(recommended_majors=majors, reasoning=output.reasoning, source="llm")


async def generate_personalized_recommendations(
    input_data: Any,
    catalog: MajorCatalog,
    client,
    model: str = OPENAI_MODEL,
    max_tool_rounds: int = LLM_MAX_TOOL_ROUNDS,
    temperature: float = OPENAI_TEMPERATURE,
) -> RecommendationResult:
    """大模型 + 工具调用生成个性化推荐"""
    student = validate_student_input(input_data)
    if client is None:
        raise UpstreamError("大模型服务未配置，请设置 OPENAI_API_KEY")

    logger.info(
        f"🚀 开始生成推荐: 分数={_format_score(student.gaokao_score)}, 排名={student.province_ranking}, "
        f"选科={'、'.join(student.selected_subjects)}"
    )
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_recommendation_prompt(student)},
    ]

    for round_index in range(max_tool_rounds + 1):
        message = await _create_completion(client, model, messages, temperature)
        tool_calls = message.tool_calls or []
        if not tool_calls:
            return parse_recommendation_output(message.content, catalog, student)
        if round_index == max_tool_rounds:
            break

        logger.info(f"🔧 第 {round_index + 1} 轮: 模型调用 {len(tool_calls)} 个工具")
        messages.append(_assistant_message(message))
        for tool_call in tool_calls:
            messages.append({
                "role": "tool",
                "tool_call_id": tool_call.id,
                "content": _run_tool_call(tool_call, catalog),
            })

    raise SchemaViolation(f"大模型在 {max_tool_rounds} 轮工具调用后仍未给出最终结果")


def recommend_by_filter(input_data: Any, catalog: MajorCatalog) -> RecommendationResult:
    """不调用大模型，按意向地区/专业类别初筛，再按排除项和选科要求过滤"""
    student = validate_student_input(input_data)
    major_filter = MajorRecommendationFilter(
        regions=student.intended_regions or None,
        major_categories=student.intended_major_categories or None,
    )
    majors = catalog.list_by_filter(major_filter)
    majors = apply_exclusions(majors, student.excluded_regions, student.excluded_major_categories)
    majors = [m for m in majors if is_subject_compatible(student.selected_subjects, m.subject_requirements)]
    logger.info(f"📊 条件筛选得到 {len(majors)} 个专业")
    return RecommendationResult(recommended_majors=majors, reasoning=FILTER_REASONING, source="filter")


async def recommend_majors(input_data: Any, catalog: MajorCatalog, client, mode: str = RECOMMENDATION_MODE) -> RecommendationResult:
    """按配置选择大模型推荐或条件筛选；大模型失败时不会退回条件筛选"""
    if mode not in RECOMMENDATION_MODES:
        logger.warning(f"⚠️ 未知的推荐模式 {mode}，按 auto 处理")
        mode = "auto"
    if mode == "filter" or (mode == "auto" and client is None):
        return recommend_by_filter(input_data, catalog)
    return await generate_personalized_recommendations(input_data, catalog, client)

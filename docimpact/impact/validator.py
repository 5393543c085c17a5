"""
模型输出校验 -> `DocumentationImpact`。

策略：
- 缺 `requires_documentation` / `impact_level` -> `MissingField`（由 analyzer 兜底）
- impact_level 不认识 -> 记 warning，改用 medium（不因此让整条流水线失败）
- 列表字段缺失 -> 空；单个字符串 -> 包成一项；其他类型 -> 记 warning 后置空
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from docimpact.errors import InvalidEnumValue
from docimpact.errors import MissingField
from docimpact.impact.models import DocumentationImpact
from docimpact.impact.models import ImpactLevel

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("requires_documentation", "impact_level")

_FALSE_STRINGS = frozenset({"", "0", "false", "no", "off", "n"})


def _coerce_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def _string_list(data: Mapping[str, object], key: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, (list, tuple)):
        logger.warning(f"Ignoring non-list field in AI response: {key}={type(value).__name__}")
        return []
    return [str(item) for item in value if item is not None and str(item).strip()]


def _unique(items: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


def parse_impact_level(value: object) -> ImpactLevel:
    try:
        return ImpactLevel.parse(value)
    except InvalidEnumValue:
        logger.warning(f"Invalid impact level in response, falling back to medium: received_level={value!r}")
        return ImpactLevel.MEDIUM


def validate_impact_response(data: Mapping[str, object]) -> DocumentationImpact:
    missing = [key for key in REQUIRED_FIELDS if data.get(key) is None]
    if missing:
        raise MissingField(missing)

    return DocumentationImpact(
        level=parse_impact_level(data["impact_level"]),
        required=_coerce_bool(data["requires_documentation"]),
        impacted_areas=_unique(_string_list(data, "impacted_areas")),
        reasons=tuple(_string_list(data, "reasons")),
        suggestions=tuple(_string_list(data, "suggestions")),
    )

"""
Prompt 的固定文本（静态数据，和拼装逻辑分开，便于单独审阅/测试）。
"""

from __future__ import annotations

SYSTEM_PROMPT = (
    "You are a documentation expert analyzing code changes to determine if user documentation "
    "needs to be updated. Always respond with valid JSON."
)

INTRO = (
    "You are a documentation expert analyzing code changes to determine if user documentation "
    "needs to be updated."
)

NO_CHANGED_FILES = "Not specified in merge request data"

IMPACT_LEVEL_VOCABULARY: tuple[str, ...] = ("none", "low", "medium", "high", "critical")

IMPACTED_AREA_VOCABULARY: tuple[str, ...] = (
    "user_guide",
    "api_docs",
    "configuration",
    "migration_guide",
    "cli_reference",
    "deployment",
)

EXAMPLES_HEADER = "**Examples of Documentation Impact:**"

# 每个类别一段示例；tests/other 没有示例
CATEGORY_EXAMPLES: dict[str, str] = {
    "controllers": (
        "**Controller Changes:**\n"
        "- New action methods → Document new pages/features\n"
        "- Route changes → Update URL references in docs\n"
        "- New form handling → Document form submission process\n"
        "- Authentication changes → Update security documentation\n"
    ),
    "models": (
        "**Model/Entity Changes:**\n"
        "- New fields → Document data structure changes\n"
        "- Validation changes → Update validation rules documentation\n"
        "- Relationship changes → Document new associations\n"
        "- Method additions → Document new business logic\n"
    ),
    "config": (
        "**Configuration Changes:**\n"
        "- New environment variables → Document required settings\n"
        "- Config parameter changes → Update configuration guide\n"
        "- Service definitions → Document new services/dependencies\n"
        "- Route configurations → Update routing documentation\n"
    ),
    "templates": (
        "**Template Changes:**\n"
        "- New UI elements → Screenshot updates needed\n"
        "- Form changes → Update user interaction guides\n"
        "- Layout modifications → Update UI documentation\n"
        "- New template variables → Document template context\n"
    ),
    "migrations": (
        "**Migration Changes:**\n"
        "- Database schema changes → Update database documentation\n"
        "- New tables → Document new data structures\n"
        "- Column modifications → Update field references\n"
        "- Index changes → Document performance implications\n"
    ),
    "api": (
        "**API Changes:**\n"
        "- New endpoints → Document API reference\n"
        "- Parameter changes → Update request/response examples\n"
        "- Authentication changes → Update API authentication docs\n"
        "- Response format changes → Update integration guides\n"
    ),
    "cli": (
        "**CLI Changes:**\n"
        "- New commands → Document command usage\n"
        "- Parameter changes → Update command reference\n"
        "- Output format changes → Update example outputs\n"
        "- New options → Document available flags\n"
    ),
}

ANALYSIS_CHECKLIST: tuple[str, ...] = (
    "Does it change user-facing functionality?",
    "Does it add/modify/remove API endpoints?",
    "Does it change configuration options?",
    "Does it introduce breaking changes?",
    "Does it affect performance in ways users should know?",
    "Does it change CLI commands or parameters?",
    "Does it modify database schema or migrations?",
    "Does it change environment variables or deployment requirements?",
)

IMPACT_RUBRIC = """Consider these change types and their documentation impact:

**Critical Impact Changes:**
- Breaking changes that require immediate user action
- Security vulnerabilities or fixes affecting user behavior
- Complete feature removals or major API overhauls
- Changes requiring data migration or system downtime

**High Impact Changes:**
- New API endpoints or significant API changes
- New features that users interact with
- Changes to configuration files or environment variables
- Database schema changes requiring migrations
- New CLI commands or significant parameter changes
- Changes to authentication or authorization

**Medium Impact Changes:**
- Enhancements to existing features
- New optional configuration parameters
- Performance improvements users should know about
- Changes to error messages or logging
- Updates to third-party integrations
- UI/UX improvements or changes

**Low Impact Changes:**
- Bug fixes that don't change user behavior
- Minor performance optimizations
- Internal API improvements without breaking changes
- Logging improvements
- Minor configuration additions

**No Impact Changes:**
- Internal code organization and refactoring
- Comment updates
- Test-only changes
- Build script improvements
- Code style or formatting changes
- Documentation-only changes
- Dependency updates without functional changes"""

_LEVELS_TEXT = "|".join(IMPACT_LEVEL_VOCABULARY)
_AREAS_TEXT = ", ".join(f'"{area}"' for area in IMPACTED_AREA_VOCABULARY)

OUTPUT_FORMAT = (
    "Respond in JSON format with exactly these fields:\n"
    "{\n"
    '    "requires_documentation": true/false,\n'
    f'    "impact_level": "{_LEVELS_TEXT}",\n'
    f'    "impacted_areas": [{_AREAS_TEXT}],\n'
    '    "reasons": ["List of specific reasons why documentation is needed"],\n'
    '    "suggestions": ["Specific documentation suggestions with examples or instructions"]\n'
    "}\n\n"
    "Focus on being practical and helpful. If documentation is needed, provide specific, "
    "actionable suggestions with code examples when appropriate."
)

"""
Accessibility Scan Schemas

Response models for the /analyze endpoint. Field aliases follow the
axe-core result format so payloads round-trip unchanged.
"""
from typing import Annotated, Any, List

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, computed_field


def _replace_lone_surrogates(value: str) -> str:
    # axe truncates outerHTML by UTF-16 length, which can split a surrogate pair
    return value.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


def _clean_str(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, str):
        return _replace_lone_surrogates(value)
    return value


def _clean_str_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, list):
        return [_replace_lone_surrogates(item) if isinstance(item, str) else item for item in value]
    return value


# axe reports null for some fields (e.g. the impact of a node with no failing check)
NullableStr = Annotated[str, BeforeValidator(_clean_str)]
NullableStrList = Annotated[List[str], BeforeValidator(_clean_str_list)]


class ViolationNode(BaseModel):
    """One offending DOM node."""
    model_config = ConfigDict(populate_by_name=True)

    impact: NullableStr = ""  # minor | moderate | serious | critical, or empty
    html: NullableStr = ""
    target: NullableStrList = Field(default_factory=list)
    failure_summary: NullableStr = Field(default="", alias="failureSummary")


class Violation(BaseModel):
    """One rule failure reported by the engine."""
    model_config = ConfigDict(populate_by_name=True)

    id: NullableStr = ""
    impact: NullableStr = ""
    tags: NullableStrList = Field(default_factory=list)
    description: NullableStr = ""
    help: NullableStr = ""
    help_url: NullableStr = Field(default="", alias="helpUrl")
    nodes: List[ViolationNode] = Field(default_factory=list)


class ScanResponse(BaseModel):
    """Response with the violations found on one page."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "url": "https://example.com",
                "timestamp": "2024-01-01T12:00:00+00:00",
                "violations": [
                    {
                        "id": "color-contrast",
                        "impact": "serious",
                        "tags": ["wcag2aa"],
                        "description": "Ensures the contrast between foreground and background colors meets WCAG 2 AA",
                        "help": "Elements must have sufficient color contrast",
                        "helpUrl": "https://dequeuniversity.com/rules/axe/4.8/color-contrast",
                        "nodes": [
                            {
                                "impact": "serious",
                                "html": "<a href=\"/\">Home</a>",
                                "target": ["#nav > a"],
                                "failureSummary": "Fix any of the following: ...",
                            }
                        ],
                    }
                ],
                "count": 1,
            }
        }
    )

    url: str
    timestamp: str
    violations: List[Violation] = Field(default_factory=list)

    @computed_field
    @property
    def count(self) -> int:
        return len(self.violations)

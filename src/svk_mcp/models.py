"""Data models for the SVK MCP server."""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

PENDING = "pending"
IN_PROGRESS = "in_progress"
COMPLETE = "complete"


# ─── Skill state ──────────────────────────────────────────────────────────


class PhaseRecord(BaseModel):
    """One phase entry of a skill's STATE.json.

    Skill-specific counters (topics_completed, batches_total, proven, ...)
    are kept as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    status: str = PENDING

    @model_validator(mode="before")
    @classmethod
    def _bare_status(cls, data: Any) -> Any:
        # Some producers write "scan": "complete" instead of an object
        if isinstance(data, str):
            return {"status": data}
        return data

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return value or PENDING

    def counter(self, name: str) -> Any:
        """Return a skill-specific counter, or 0 when the producer omitted it."""
        return (self.model_extra or {}).get(name) or 0


class SkillState(BaseModel):
    """A normalized STATE.json document."""

    skill: str
    version: str = ""
    phases: dict[str, PhaseRecord] = Field(min_length=1)  # order = pipeline topology
    updated: str = ""  # ISO timestamp as written by the producer
    extra: dict[str, Any] = Field(default_factory=dict)
    state_dir: str = ""

    @classmethod
    def from_document(cls, raw: dict[str, Any], state_dir: str = "") -> "SkillState":
        """Split a raw state document into common fields and skill-specific extras."""
        common = {"skill", "version", "phases", "updated", "last_updated"}
        return cls.model_validate({
            "skill": raw.get("skill"),
            "version": str(raw.get("version") or ""),
            "phases": raw.get("phases") or {},
            "updated": str(raw.get("updated") or raw.get("last_updated") or ""),
            "extra": {k: v for k, v in raw.items() if k not in common},
            "state_dir": state_dir,
        })


Progress = Union[str, dict[str, Any], None]


class CurrentPhaseSummary(BaseModel):
    """Where a skill currently stands (derived, never persisted)."""

    phase: str
    status: str
    progress: Progress = None
    next_step: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)  # skill-specific fields


class SkillProgress(BaseModel):
    """Output of a per-skill progress formatter."""

    progress: Progress = None
    details: dict[str, Any] = Field(default_factory=dict)


class ArtifactReference(BaseModel):
    """Which artifact snapshot of an audit skill a caller means."""

    skill: str
    mode: Literal["current", "previous", "explicit"] = "current"
    explicit_path: str | None = None

    @classmethod
    def parse(cls, skill: str, audit: str | None) -> "ArtifactReference":
        if not audit or audit == "current":
            return cls(skill=skill)
        if audit == "previous":
            return cls(skill=skill, mode="previous")
        return cls(skill=skill, mode="explicit", explicit_path=audit)


# ─── Tool results ─────────────────────────────────────────────────────────
# Every operation returns one member of ToolResult. TextResult is the uniform
# shape for soft absences ("nothing found", "not produced yet", bad params).


class TextResult(BaseModel):
    kind: Literal["text"] = "text"
    text: str
    available: list[str] | None = None


class SkillStatus(BaseModel):
    skill: str
    phase: str
    status: str
    updated: str = "unknown"  # date part only
    progress: Progress = None
    next: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class ProjectStatus(BaseModel):
    kind: Literal["status"] = "status"
    skills: list[SkillStatus] = Field(default_factory=list)
    history: dict[str, int] = Field(default_factory=dict)  # history root -> snapshots
    audit_history_count: int = 0
    summary: str = ""


class AuditDocument(BaseModel):
    kind: Literal["audit_document"] = "audit_document"
    type: str  # report, architecture, strategies
    path: str  # relative to the project
    content: str


class Finding(BaseModel):
    file: str
    content: str


class FindingsResult(BaseModel):
    kind: Literal["findings"] = "findings"
    count: int = 0
    findings: list[Finding] = Field(default_factory=list)


class SearchMatch(BaseModel):
    line: int  # 1-based
    excerpt: str


class FileMatches(BaseModel):
    file: str  # relative to the project
    matches: list[SearchMatch] = Field(default_factory=list)


class SearchResults(BaseModel):
    kind: Literal["search"] = "search"
    query: str
    scope: str
    total_files_matched: int = 0
    results: list[FileMatches] = Field(default_factory=list)


class DocSummary(BaseModel):
    name: str
    path: str
    description: str = ""


class DocListing(BaseModel):
    kind: Literal["doc_listing"] = "doc_listing"
    documents: list[DocSummary] = Field(default_factory=list)


class DocContent(BaseModel):
    kind: Literal["doc"] = "doc"
    name: str
    path: str
    content: str


class DecisionsResult(BaseModel):
    kind: Literal["decisions"] = "decisions"
    decisions: list[DocContent] = Field(default_factory=list)


class Suggestion(BaseModel):
    suggestion: str
    priority: str  # critical, high, medium, info
    reason: str = ""


class SuggestionsResult(BaseModel):
    kind: Literal["suggestions"] = "suggestions"
    suggestions: list[Suggestion] = Field(default_factory=list)


# ─── Knowledge bases ──────────────────────────────────────────────────────


class KnowledgeSource(BaseModel):
    """Static registry entry for one SVK knowledge base."""

    id: str
    name: str
    description: str = ""
    base_path: str  # relative to the SVK repo
    primary_index: str | None = None
    static_files: list[str] | None = None


class DomainPack(BaseModel):
    name: str
    index: str | None = None
    file_count: int = 0


class KnowledgeCategory(BaseModel):
    file_count: int = 0
    subcategories: list[str] | None = None
    files: list[str] | None = None


class KnowledgeBaseSummary(BaseModel):
    skill: str
    name: str
    description: str = ""
    primary_index: str | None = None
    categories: list[str] | None = None
    file_count: int | None = None
    files: list[str] | None = None
    domain_packs: list[DomainPack] | None = None


class KnowledgeOverview(BaseModel):
    kind: Literal["knowledge_overview"] = "knowledge_overview"
    knowledge_bases: list[KnowledgeBaseSummary] = Field(default_factory=list)


class KnowledgeDetail(BaseModel):
    kind: Literal["knowledge_detail"] = "knowledge_detail"
    skill: str
    name: str
    primary_index: str | None = None
    categories: dict[str, KnowledgeCategory] | None = None
    files: list[str] | None = None
    total_files: int = 0
    domain_packs: list[DomainPack] | None = None


class KnowledgeFile(BaseModel):
    kind: Literal["knowledge_file"] = "knowledge_file"
    skill: str
    path: str
    content: str


ToolResult = Annotated[
    Union[
        TextResult,
        ProjectStatus,
        AuditDocument,
        FindingsResult,
        SearchResults,
        DocListing,
        DocContent,
        DecisionsResult,
        SuggestionsResult,
        KnowledgeOverview,
        KnowledgeDetail,
        KnowledgeFile,
    ],
    Field(discriminator="kind"),
]

"""Normalized activity schema shared by every platform adapter.

Adapters translate their native payloads into these types; the registry and
the terminal browser only ever see this vocabulary.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import ClassVar

from reviewr.models.enums import CategoryKind

_DISPLAY_NAMES: dict[CategoryKind, str] = {
    CategoryKind.CHANGES_CREATED: "Changes Created",
    CategoryKind.CHANGES_REVIEWED: "Changes Reviewed",
    CategoryKind.CHANGES_MERGED: "Changes Merged",
    CategoryKind.REVIEWS_GIVEN: "Reviews Given",
    CategoryKind.REVIEWS_RECEIVED: "Reviews Received",
    CategoryKind.ISSUES_CREATED: "Issues Created",
    CategoryKind.ISSUES_ASSIGNED: "Issues Assigned",
    CategoryKind.ISSUES_RESOLVED: "Issues Resolved",
    CategoryKind.ISSUES_COMMENTED: "Issues Commented",
    CategoryKind.MERGE_REQUESTS_CREATED: "Merge Requests Created",
    CategoryKind.MERGE_REQUESTS_REVIEWED: "Merge Requests Reviewed",
    CategoryKind.MERGE_REQUESTS_MERGED: "Merge Requests Merged",
    CategoryKind.COMMITS_PUSHED: "Commits Pushed",
}

@dataclass(frozen=True)
class ActivityCategory:
    """Relationship between an activity item and the subject.

    The fixed kinds are exposed as class attributes
    (``ActivityCategory.CHANGES_CREATED``); anything else is expressed with
    ``ActivityCategory.other(name)``. Equality and hashing are structural, so
    two ``other("x")`` values are the same dictionary key.
    """

    kind: CategoryKind
    name: str | None = None

    CHANGES_CREATED: ClassVar[ActivityCategory]
    CHANGES_REVIEWED: ClassVar[ActivityCategory]
    CHANGES_MERGED: ClassVar[ActivityCategory]
    REVIEWS_GIVEN: ClassVar[ActivityCategory]
    REVIEWS_RECEIVED: ClassVar[ActivityCategory]
    ISSUES_CREATED: ClassVar[ActivityCategory]
    ISSUES_ASSIGNED: ClassVar[ActivityCategory]
    ISSUES_RESOLVED: ClassVar[ActivityCategory]
    ISSUES_COMMENTED: ClassVar[ActivityCategory]
    MERGE_REQUESTS_CREATED: ClassVar[ActivityCategory]
    MERGE_REQUESTS_REVIEWED: ClassVar[ActivityCategory]
    MERGE_REQUESTS_MERGED: ClassVar[ActivityCategory]
    COMMITS_PUSHED: ClassVar[ActivityCategory]

    def __post_init__(self) -> None:
        if self.kind is CategoryKind.OTHER:
            if not self.name:
                raise ValueError("Other categories need a name")
        elif self.name is not None:
            raise ValueError(f"Category {self.kind.value} does not take a name")

    @classmethod
    def other(cls, name: str) -> ActivityCategory:
        """Build an open-ended category."""
        return cls(CategoryKind.OTHER, name)

    @property
    def key(self) -> str:
        """Stable string form used in exports."""
        if self.kind is CategoryKind.OTHER:
            return f"{CategoryKind.OTHER.value}:{self.name}"
        return self.kind.value

    @property
    def display_name(self) -> str:
        if self.kind is CategoryKind.OTHER:
            return self.name or ""
        return _DISPLAY_NAMES[self.kind]

    def __str__(self) -> str:
        return self.display_name


for _kind in CategoryKind:
    if _kind is not CategoryKind.OTHER:
        setattr(ActivityCategory, _kind.name, ActivityCategory(_kind))


@dataclass(frozen=True)
class ActivityItem:
    """One normalized unit of activity: a change, a ticket or a merge request.

    Timestamps are kept as the ISO-8601 text the platform returned. The
    same underlying record may appear several times under different
    categories; each appearance is its own instance.
    """

    id: str
    title: str
    status: str
    created: str
    updated: str
    url: str
    platform: str
    category: ActivityCategory
    project: str
    metadata: Mapping[str, str] = field(default_factory=dict)

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on id, title and project."""
        needle = query.lower()
        return (
            needle in self.title.lower()
            or needle in self.project.lower()
            or needle in self.id.lower()
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "created": self.created,
            "updated": self.updated,
            "url": self.url,
            "platform": self.platform,
            "category": self.category.key,
            "project": self.project,
            "metadata": dict(self.metadata),
        }


@dataclass
class ActivityMetrics:
    """Aggregate counts for one platform.

    ``total_items`` is expected to equal the sum of ``items_by_category``;
    use :meth:`from_counts` to build instances that hold that property.
    """

    total_items: int = 0
    items_by_category: dict[ActivityCategory, int] = field(default_factory=dict)
    platform_specific: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_counts(
        cls,
        counts: Mapping[ActivityCategory, int],
        platform_specific: Mapping[str, int] | None = None,
    ) -> ActivityMetrics:
        return cls(
            total_items=sum(counts.values()),
            items_by_category=dict(counts),
            platform_specific=dict(platform_specific or {}),
        )

    def is_consistent(self) -> bool:
        return self.total_items == sum(self.items_by_category.values())


@dataclass
class DetailedActivities:
    """Full item lists keyed by category.

    Category insertion order and item order within a category are the
    platform's (usually newest first) and are preserved for display.
    """

    items_by_category: dict[ActivityCategory, list[ActivityItem]] = field(default_factory=dict)

    def add(self, category: ActivityCategory, items: list[ActivityItem]) -> None:
        self.items_by_category[category] = items

    def categories(self) -> list[ActivityCategory]:
        return list(self.items_by_category)

    def items(self, category: ActivityCategory) -> list[ActivityItem]:
        return self.items_by_category.get(category, [])

    def all_items(self) -> Iterator[ActivityItem]:
        for items in self.items_by_category.values():
            yield from items

    @property
    def total_items(self) -> int:
        return sum(len(items) for items in self.items_by_category.values())

    def to_metrics(self, platform_specific: Mapping[str, int] | None = None) -> ActivityMetrics:
        """Count items per category."""
        return ActivityMetrics.from_counts(
            {category: len(items) for category, items in self.items_by_category.items()},
            platform_specific,
        )

"""
Design pattern catalog - the patterns document expressed as validated data.

The catalog keeps the pattern names, their section order and the explanatory
claims made for each pattern (summary, advantages, disadvantages, variants and
the roles taking part). It can render itself back to Markdown and can check
its own fidelity against the canonical section list.
"""
import importlib
import re
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from patternkit.domain.exceptions import CatalogValidationError, PatternNotFoundError

# Canonical section order of the patterns document
CANONICAL_ORDER: List[str] = [
    "Template Method",
    "Strategy",
    "Observer",
    "Proxy",
    "Builder",
    "Composite",
    "Iterator",
    "Command",
    "Mediator",
]

GLOSSARY: Dict[str, str] = {
    "Template Method": (
        "Base class defines an algorithm skeleton; subclasses override specific steps."
    ),
    "Strategy": "Interchangeable algorithm objects supplied to a context at runtime.",
    "Observer": "Subject notifies registered dependents on state change.",
    "Proxy": (
        "Stand-in object forwarding/controlling access to a real object "
        "(protection, remote, virtual variants)."
    ),
    "Builder": "Encapsulates multi-step construction of a complex object.",
    "Composite": "Uniform treatment of leaf and branch nodes in a tree.",
    "Iterator": (
        "Sequential element access without exposing container representation "
        "(external vs internal)."
    ),
    "Command": (
        "Encapsulates an action (and optional undo state) as an object for "
        "deferred execution or queuing."
    ),
    "Mediator": (
        "Centralizes communication between otherwise mutually-aware collaborator objects."
    ),
}

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Turn a section title into a Markdown anchor slug."""
    return _SLUG_RE.sub("-", name.strip().lower()).strip("-")


class PatternCategory(str, Enum):
    """Classic pattern families."""
    BEHAVIORAL = "behavioral"
    STRUCTURAL = "structural"
    CREATIONAL = "creational"


class PatternEntry(BaseModel):
    """One section of the patterns document."""
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    category: PatternCategory
    order: int = Field(..., ge=1)
    summary: str
    advantages: List[str] = Field(default_factory=list)
    disadvantages: List[str] = Field(default_factory=list)
    variants: List[str] = Field(default_factory=list)
    roles: List[str] = Field(default_factory=list)
    module: str

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Keys are kebab-case slugs."""
        if v != slugify(v):
            raise ValueError(f"Pattern key must be a kebab-case slug, got '{v}'")
        return v

    @property
    def anchor(self) -> str:
        """Markdown anchor of this section."""
        return f"#{slugify(self.name)}"

    def to_dict(self) -> Dict[str, object]:
        data = self.model_dump(mode="json")
        data["anchor"] = self.anchor
        return data

    def to_markdown(self) -> str:
        """Render this entry as a Markdown section."""
        lines = [f"## {self.name}", "", self.summary, ""]
        if self.roles:
            lines.append(f"**Roles:** {', '.join(self.roles)}")
            lines.append("")
        for heading, items in (
            ("Advantages", self.advantages),
            ("Disadvantages", self.disadvantages),
            ("Variants", self.variants),
        ):
            if not items:
                continue
            lines.append(f"### {heading}")
            lines.append("")
            lines.extend(f"- {item}" for item in items)
            lines.append("")
        lines.append(f"Implementation: `{self.module}`")
        return "\n".join(lines)


_DEFAULT_ENTRIES: List[dict] = [
    {
        "key": "template-method",
        "name": "Template Method",
        "category": PatternCategory.BEHAVIORAL,
        "summary": GLOSSARY["Template Method"],
        "advantages": [
            "Common code lives once in the skeletal base class",
            "Subclasses override only the steps that vary",
            "Hook methods give optional extension points with default behaviour",
        ],
        "disadvantages": [
            "No runtime flexibility: the variant is fixed when the subclass is chosen",
            "Built on inheritance, so subclasses depend on base class internals",
        ],
        "roles": ["Abstract base class", "Concrete subclass", "Hook method"],
        "module": "patternkit.patterns.template_method",
    },
    {
        "key": "strategy",
        "name": "Strategy",
        "category": PatternCategory.BEHAVIORAL,
        "summary": GLOSSARY["Strategy"],
        "advantages": [
            "Separates the varying algorithm from the context using it",
            "Strategies can be swapped at runtime",
            "Composition instead of inheritance",
            "A plain callable is enough for a single-method strategy",
        ],
        "disadvantages": [
            "Context and strategy must agree on the data passed between them",
        ],
        "roles": ["Context", "Strategy"],
        "module": "patternkit.patterns.strategy",
    },
    {
        "key": "observer",
        "name": "Observer",
        "category": PatternCategory.BEHAVIORAL,
        "summary": GLOSSARY["Observer"],
        "advantages": [
            "Subject and observers stay loosely coupled",
            "Any number of observers can be added or removed at runtime",
        ],
        "disadvantages": [
            "Notifying observers before all updates are executed could cause an inconsistent state",
            "Frequent small notifications can be expensive",
            "The correct way to handle exceptions raised by an observer varies from case to case",
        ],
        "variants": ["Push notification", "Pull notification", "Callable observers"],
        "roles": ["Subject", "Observer"],
        "module": "patternkit.patterns.observer",
    },
    {
        "key": "proxy",
        "name": "Proxy",
        "category": PatternCategory.STRUCTURAL,
        "summary": GLOSSARY["Proxy"],
        "advantages": [
            "Separates a concern (security, location, creation cost) from the real object",
            "Clients use the proxy through the same interface as the subject",
        ],
        "disadvantages": [
            "Hand-written forwarding methods repeat the whole subject interface",
            "Catch-all dynamic forwarding hides which calls are actually delegated",
        ],
        "variants": ["protection", "remote", "virtual"],
        "roles": ["Subject", "Proxy", "Real subject"],
        "module": "patternkit.patterns.proxy",
    },
    {
        "key": "builder",
        "name": "Builder",
        "category": PatternCategory.CREATIONAL,
        "summary": GLOSSARY["Builder"],
        "advantages": [
            "Hides the details of assembling a complex object",
            "Validates the product before handing it out",
            "Reusable builders can produce several similar objects",
        ],
        "disadvantages": [
            "Adds a class for each family of products",
        ],
        "variants": ["Fluent builder", "Magic-method builder"],
        "roles": ["Builder", "Product", "Director"],
        "module": "patternkit.patterns.builder",
    },
    {
        "key": "composite",
        "name": "Composite",
        "category": PatternCategory.STRUCTURAL,
        "summary": GLOSSARY["Composite"],
        "advantages": [
            "Clients treat single objects and groups of objects the same way",
            "Trees of arbitrary depth are built from a few simple classes",
        ],
        "disadvantages": [
            "Leaf and composite interfaces diverge for child management",
            "Recursive structures are easy to break with cycles",
        ],
        "roles": ["Component", "Leaf", "Composite"],
        "module": "patternkit.patterns.composite",
    },
    {
        "key": "iterator",
        "name": "Iterator",
        "category": PatternCategory.BEHAVIORAL,
        "summary": GLOSSARY["Iterator"],
        "advantages": [
            "The aggregate keeps its representation private",
            "External iterators let the client control the pace, for example to merge two sequences",
            "Internal iterators keep the iteration logic in one place",
        ],
        "disadvantages": [
            "Changing the aggregate during iteration can confuse an iterator",
        ],
        "variants": ["external", "internal"],
        "roles": ["Aggregate", "Iterator"],
        "module": "patternkit.patterns.iterator",
    },
    {
        "key": "command",
        "name": "Command",
        "category": PatternCategory.BEHAVIORAL,
        "summary": GLOSSARY["Command"],
        "advantages": [
            "Separates what is done from when it is done",
            "Commands can be queued, logged, composed and undone",
        ],
        "disadvantages": [
            "Undo needs each command to save the state it destroys",
        ],
        "variants": ["Composite command", "Undoable command", "Queued command"],
        "roles": ["Command", "Invoker", "Receiver"],
        "module": "patternkit.patterns.command",
    },
    {
        "key": "mediator",
        "name": "Mediator",
        "category": PatternCategory.BEHAVIORAL,
        "summary": GLOSSARY["Mediator"],
        "advantages": [
            "Colleagues no longer hold references to each other",
            "Interaction rules live in one place",
        ],
        "disadvantages": [
            "The mediator can grow into a monolith that knows everything",
        ],
        "roles": ["Mediator", "Colleague"],
        "module": "patternkit.patterns.mediator",
    },
]


class Catalog:
    """
    Ordered, immutable collection of pattern entries.

    Construction validates that orders are contiguous from 1 and that keys are
    unique. Entries are kept sorted by their order.
    """

    def __init__(self, entries: Sequence[PatternEntry]):
        problems = self._validate(entries)
        if problems:
            raise CatalogValidationError("Invalid catalog", problems)
        self._entries = tuple(sorted(entries, key=lambda e: e.order))

    @staticmethod
    def _validate(entries: Sequence[PatternEntry]) -> List[str]:
        problems = []
        orders = sorted(e.order for e in entries)
        if orders != list(range(1, len(entries) + 1)):
            problems.append(f"Orders must be contiguous from 1, got {orders}")
        keys = [e.key for e in entries]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            problems.append(f"Duplicate keys: {', '.join(duplicates)}")
        return problems

    @classmethod
    def default(cls) -> "Catalog":
        """Build the canonical nine-pattern catalog in document order."""
        entries = [
            PatternEntry(order=index, **data)
            for index, data in enumerate(_DEFAULT_ENTRIES, start=1)
        ]
        return cls(entries)

    def __iter__(self) -> Iterator[PatternEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name_or_key: object) -> bool:
        return isinstance(name_or_key, str) and self.find(name_or_key) is not None

    def names(self) -> List[str]:
        return [entry.name for entry in self._entries]

    def find(self, name_or_key: str) -> Optional[PatternEntry]:
        """Case-insensitive lookup by key, name or anchor."""
        wanted = slugify(name_or_key.lstrip("#"))
        for entry in self._entries:
            if wanted in (entry.key, slugify(entry.name)):
                return entry
        return None

    def get(self, name_or_key: str) -> PatternEntry:
        entry = self.find(name_or_key)
        if entry is None:
            raise PatternNotFoundError("Pattern", name_or_key)
        return entry

    def table_of_contents(self) -> List[str]:
        return [f"{entry.order}. [{entry.name}]({entry.anchor})" for entry in self._entries]

    def to_markdown(self, title: str = "Design Patterns") -> str:
        """Render the whole catalog as the patterns document."""
        parts = [f"# {title}", "", "\n".join(self.table_of_contents()), ""]
        for entry in self._entries:
            parts.append(entry.to_markdown())
            parts.append("")
        parts.append("## Glossary")
        parts.append("")
        for entry in self._entries:
            parts.append(f"- **{entry.name}**: {GLOSSARY.get(entry.name, entry.summary)}")
        return "\n".join(parts) + "\n"

    def verify_fidelity(self) -> List[str]:
        """
        Check the catalog against the canonical patterns document.

        Returns:
            List of problems found; empty when the catalog is faithful
        """
        problems: List[str] = []

        names = self.names()
        if names != CANONICAL_ORDER:
            problems.append(
                f"Sections differ from canonical order: expected {CANONICAL_ORDER}, got {names}"
            )

        for position, entry in enumerate(self._entries, start=1):
            if entry.order != position:
                problems.append(f"{entry.name}: order {entry.order} at position {position}")
            if not entry.summary.strip():
                problems.append(f"{entry.name}: empty summary")

        anchors = [entry.anchor for entry in self._entries]
        if len(set(anchors)) != len(anchors):
            problems.append("Duplicate anchors in table of contents")

        template_method = self.find("template-method")
        if template_method and not any(
            "no runtime flexibility" in item.lower() for item in template_method.disadvantages
        ):
            problems.append("Template Method: missing 'no runtime flexibility' disadvantage")

        for key, required in (
            ("proxy", {"protection", "remote", "virtual"}),
            ("iterator", {"external", "internal"}),
        ):
            entry = self.find(key)
            if entry:
                missing = required - {v.lower() for v in entry.variants}
                if missing:
                    problems.append(
                        f"{entry.name}: missing variants {', '.join(sorted(missing))}"
                    )

        for entry in self._entries:
            try:
                importlib.import_module(entry.module)
            except ImportError as e:
                problems.append(f"{entry.name}: module {entry.module} not importable ({e})")

        return problems

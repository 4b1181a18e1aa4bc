"""Extraction of labels, links and overrides from test annotations."""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from functools import partial

from result_listener.models.descriptor import Annotation, TestDescriptor
from result_listener.models.result import Label, Link

log = logging.getLogger(__name__)

CUSTOM_LINK_TYPE = "custom"

SEVERITIES = frozenset({"blocker", "critical", "normal", "minor", "trivial"})

# Kinds that may be declared more than once at one scope. Their class-scope
# values are added to the method-scope ones instead of acting as a fallback.
REPEATABLE_KINDS = frozenset(
    {"link", "issue", "tms_link", "epic", "feature", "story", "tag"}
)

# Link kinds and the link type each implies, in extraction order.
LINK_KINDS: Mapping[str, str | None] = {
    "link": None,
    "issue": "issue",
    "tms_link": "tms",
}

type LabelHandler = Callable[[Annotation], Label | None]


class AnnotationExtractionError(Exception):
    """Raised when the declared value of an annotation cannot be read."""


def named_label(name: str) -> LabelHandler:
    """Create a handler that copies the annotation value into a label."""

    def handler(annotation: Annotation) -> Label:
        return Label(name=name, value=annotation.value)

    return handler


def severity_label(annotation: Annotation) -> Label | None:
    """Create a severity label, dropping values outside the known levels."""
    value = annotation.value.strip().lower()
    if value not in SEVERITIES:
        log.warning("Ignoring unknown severity %r", annotation.value)
        return None
    return Label(name="severity", value=value)


# Label kinds in extraction order.
LABEL_HANDLERS: Mapping[str, LabelHandler] = {
    "epic": named_label("epic"),
    "feature": named_label("feature"),
    "story": named_label("story"),
    "severity": severity_label,
    "owner": named_label("owner"),
    "tag": named_label("tag"),
}


@dataclass(frozen=True, kw_only=True)
class ExtractedMetadata:
    """Everything derived from a descriptor's annotations."""

    links: frozenset[Link]
    labels: Sequence[Label]
    display_name: str | None = None
    description: str | None = None
    suite_name: str | None = None
    ignore_reason: str | None = None


@dataclass(frozen=True, kw_only=True)
class MetadataExtractor:
    """Resolves annotation metadata with class/method merge rules."""

    link_patterns: Mapping[str, str] = field(default_factory=dict)

    def extract(self, descriptor: TestDescriptor) -> ExtractedMetadata:
        """Extract links, labels and overrides from a descriptor."""
        return ExtractedMetadata(
            links=self.links(descriptor),
            labels=self.labels(descriptor),
            display_name=last_value(descriptor.on_method("display_name")),
            description=(
                last_value(descriptor.on_method("description"))
                or last_value(descriptor.on_class("description"))
            ),
            suite_name=last_value(descriptor.on_class("display_name")),
            ignore_reason=(
                last_value(descriptor.on_method("ignore"))
                or last_value(descriptor.on_class("ignore"))
            ),
        )

    def links(self, descriptor: TestDescriptor) -> frozenset[Link]:
        """Collect links of every kind from class and method scope."""
        links: list[Link] = []
        for kind, link_type in LINK_KINDS.items():
            annotations = [*descriptor.on_class(kind), *descriptor.on_method(kind)]
            reader = partial(self.create_link, link_type=link_type)
            links.extend(read(annotation, reader) for annotation in annotations)
        return frozenset(links)

    def labels(self, descriptor: TestDescriptor) -> Sequence[Label]:
        """Collect labels of every kind, method scope first."""
        return [
            label
            for kind, handler in LABEL_HANDLERS.items()
            for label in self.labels_of_kind(descriptor, kind, handler)
        ]

    def labels_of_kind(
        self, descriptor: TestDescriptor, kind: str, handler: LabelHandler
    ) -> list[Label]:
        """Merge method and class scope labels of one kind.

        Repeatable kinds accumulate both scopes; other kinds use class scope
        only when method scope produced nothing.
        """
        labels = extract_labels(descriptor.on_method(kind), handler)
        if kind in REPEATABLE_KINDS or not labels:
            labels.extend(extract_labels(descriptor.on_class(kind), handler))
        return labels

    def create_link(self, annotation: Annotation, link_type: str | None) -> Link:
        """Create a link, resolving its URL from the configured patterns."""
        resolved_type = link_type or annotation.link_type or CUSTOM_LINK_TYPE
        name = annotation.value or annotation.name
        url = annotation.url or self.link_url(name, resolved_type)
        return Link(name=name, url=url, type=resolved_type)

    def link_url(self, name: str | None, link_type: str) -> str | None:
        pattern = self.link_patterns.get(link_type)
        if pattern is None or not name:
            return None
        return pattern.format(name)


def read[T](annotation: Annotation, reader: Callable[[Annotation], T]) -> T:
    """Apply a reader to an annotation, making any failure fatal."""
    try:
        return reader(annotation)
    except Exception as e:
        raise AnnotationExtractionError(
            f"Could not read value of '{annotation.kind}' annotation: {e}"
        ) from e


def extract_labels(
    annotations: Sequence[Annotation], handler: LabelHandler
) -> list[Label]:
    labels: list[Label] = []
    for annotation in annotations:
        if (label := read(annotation, handler)) is not None:
            labels.append(label)
    return labels


def last_value(annotations: Sequence[Annotation]) -> str | None:
    """Value of the last annotation with a non-empty value."""
    values = [a.value for a in annotations if a.value]
    return values[-1] if values else None

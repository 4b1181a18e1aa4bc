"""Models for the runner-supplied description of a test."""

from collections.abc import Sequence

from pydantic import Field

from result_listener.models.base import Model


class Annotation(Model):
    """Declarative metadata attached to a test class or test function."""

    kind: str = Field(..., description="Metadata kind, e.g. 'tag' or 'issue'")
    value: str = Field(default="", description="Declared value")
    name: str | None = Field(default=None, description="Link display name")
    url: str | None = Field(default=None, description="Explicit link URL")
    link_type: str | None = Field(default=None, description="Link type override")


class TestDescriptor(Model):
    """Identity and metadata of one test at callback time."""

    __test__ = False

    class_name: str = Field(..., description="Qualified, dot separated class name")
    method_name: str | None = Field(default=None, description="Test method name")
    class_annotations: Sequence[Annotation] = Field(default_factory=tuple)
    method_annotations: Sequence[Annotation] = Field(default_factory=tuple)

    @property
    def package(self) -> str:
        """Qualified class name up to its last dot."""
        return self.class_name.rpartition(".")[0]

    @property
    def name(self) -> str:
        return self.method_name if self.method_name is not None else self.class_name

    @property
    def full_name(self) -> str:
        if self.method_name is None:
            return self.class_name
        return f"{self.class_name}.{self.method_name}"

    def on_method(self, kind: str) -> Sequence[Annotation]:
        """Method-scope annotations of a kind, in declaration order."""
        return [a for a in self.method_annotations if a.kind == kind]

    def on_class(self, kind: str) -> Sequence[Annotation]:
        """Class-scope annotations of a kind, in declaration order."""
        return [a for a in self.class_annotations if a.kind == kind]

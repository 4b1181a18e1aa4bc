"""Decorators attaching declarative metadata to test classes and functions.

Metadata is stored as a tuple of `Annotation` objects on the decorated
object, in source order, and read back when a `TestDescriptor` is built::

    @epic("Payments")
    class TestRefunds:
        @tag("smoke")
        @issue("PAY-12")
        def test_full_refund(self): ...
"""

from collections.abc import Callable, Sequence
from typing import Any

from result_listener.models.descriptor import Annotation, TestDescriptor

ANNOTATIONS_ATTR = "__result_annotations__"


def annotate[T](annotation: Annotation) -> Callable[[T], T]:
    """Attach an annotation to the decorated class or function."""

    def decorator(target: T) -> T:
        # Decorators apply bottom-up, so prepend to keep source order.
        own = vars(target).get(ANNOTATIONS_ATTR, ())
        setattr(target, ANNOTATIONS_ATTR, (annotation, *own))
        return target

    return decorator


def annotations_of(target: Any) -> Sequence[Annotation]:
    """Annotations attached to a function, or to a class and its bases.

    Classes inherit per kind: each kind comes from the nearest class in the
    MRO that declares it, so a subclass replaces only the kinds it declares.
    """
    if target is None:
        return ()
    if not isinstance(target, type):
        return getattr(target, ANNOTATIONS_ATTR, ())

    annotations: list[Annotation] = []
    declared: set[str] = set()
    for klass in target.__mro__:
        own = vars(klass).get(ANNOTATIONS_ATTR, ())
        annotations.extend(a for a in own if a.kind not in declared)
        declared.update(a.kind for a in own)
    return tuple(annotations)


def display_name(value: str) -> Callable[[Any], Any]:
    return annotate(Annotation(kind="display_name", value=value))


def description(value: str) -> Callable[[Any], Any]:
    return annotate(Annotation(kind="description", value=value))


def link(
    value: str = "",
    *,
    name: str | None = None,
    url: str | None = None,
    type: str | None = None,
) -> Callable[[Any], Any]:
    return annotate(
        Annotation(kind="link", value=value, name=name, url=url, link_type=type)
    )


def issue(value: str) -> Callable[[Any], Any]:
    return annotate(Annotation(kind="issue", value=value))


def tms_link(value: str) -> Callable[[Any], Any]:
    return annotate(Annotation(kind="tms_link", value=value))


def epic(value: str) -> Callable[[Any], Any]:
    return annotate(Annotation(kind="epic", value=value))


def feature(value: str) -> Callable[[Any], Any]:
    return annotate(Annotation(kind="feature", value=value))


def story(value: str) -> Callable[[Any], Any]:
    return annotate(Annotation(kind="story", value=value))


def severity(value: str) -> Callable[[Any], Any]:
    return annotate(Annotation(kind="severity", value=value))


def owner(value: str) -> Callable[[Any], Any]:
    return annotate(Annotation(kind="owner", value=value))


def tag(value: str) -> Callable[[Any], Any]:
    return annotate(Annotation(kind="tag", value=value))


def ignore(reason: str = "") -> Callable[[Any], Any]:
    return annotate(Annotation(kind="ignore", value=reason))


def describe(
    class_name: str,
    method_name: str | None = None,
    *,
    test_class: type | None = None,
    test_function: Callable[..., Any] | None = None,
    extra_method_annotations: Sequence[Annotation] = (),
) -> TestDescriptor:
    """Build a descriptor from the metadata attached to a test.

    Args:
        class_name: Qualified, dot separated class name
        method_name: Test method name, if the test is a method
        test_class: Class carrying class-scope annotations
        test_function: Function carrying method-scope annotations
        extra_method_annotations: Annotations contributed by the runner

    Returns:
        Descriptor with class and method scope annotations

    """
    return TestDescriptor(
        class_name=class_name,
        method_name=method_name,
        class_annotations=list(annotations_of(test_class)),
        method_annotations=[
            *annotations_of(test_function),
            *extra_method_annotations,
        ],
    )

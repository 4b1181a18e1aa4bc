"""Test factories for generating test data."""

from polyfactory import Use
from polyfactory.factories.pydantic_factory import ModelFactory

from result_listener.models.descriptor import TestDescriptor
from result_listener.models.result import TestResult


class TestDescriptorFactory(ModelFactory[TestDescriptor]):
    """Factory for TestDescriptor without annotations."""

    __test__ = False

    class_name = Use(lambda: f"com.example.{ModelFactory.__faker__.word().title()}")
    method_name = Use(lambda: f"test_{ModelFactory.__faker__.word()}")
    class_annotations = Use(list)
    method_annotations = Use(list)


class TestResultFactory(ModelFactory[TestResult]):
    """Factory for an unfinished TestResult."""

    __test__ = False

    status = None
    status_message = None
    status_trace = None
    stage = None
    start = None
    stop = None
    links = Use(frozenset)
    labels = Use(list)

"""Listener translating runner lifecycle callbacks into test results."""

import logging
import os
import socket
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from result_listener.config import ListenerConfig
from result_listener.history import HistoryIdComputer
from result_listener.identity import IdentityRegistry, TestContext
from result_listener.lifecycle import ResultLifecycle
from result_listener.metadata import ExtractedMetadata, MetadataExtractor
from result_listener.models.descriptor import TestDescriptor
from result_listener.models.result import Label, TestResult
from result_listener.status import StatusDetails, classify, format_trace
from result_listener.writers.base import ResultWriter
from result_listener.writers.loading import create_writer

log = logging.getLogger(__name__)

IGNORED_DEFAULT_MESSAGE = "Test ignored (without reason)!"


def default_to_passed(result: TestResult) -> TestResult:
    if result.status is not None:
        return result
    return result.model_copy(update={"status": "passed"})


@dataclass(frozen=True, kw_only=True)
class ResultListener:
    """Builds one result per test from the runner's callbacks.

    A test goes through `on_test_started`, any number of failure callbacks and
    `on_test_finished`; an ignored test only receives `on_test_ignored`. The
    identity of the calling context is released on either terminal callback.
    """

    lifecycle: ResultLifecycle
    config: ListenerConfig = field(default_factory=ListenerConfig)
    identities: IdentityRegistry = field(default_factory=IdentityRegistry)
    history: HistoryIdComputer = field(default_factory=HistoryIdComputer)
    extractor: MetadataExtractor = field(default_factory=MetadataExtractor)
    classifier: Callable[[BaseException], StatusDetails] = classify

    @classmethod
    def from_config(
        cls,
        config: ListenerConfig,
        classifier: Callable[[BaseException], StatusDetails] = classify,
        writer: ResultWriter | None = None,
    ) -> "ResultListener":
        """Create a listener from configuration.

        Results go to `writer` when given, otherwise to the writer registered
        under `config.writer`.
        """
        if writer is None:
            writer = create_writer(config)
        return cls(
            lifecycle=ResultLifecycle(writer=writer),
            config=config,
            history=HistoryIdComputer(algorithm=config.digest_algorithm),
            extractor=MetadataExtractor(link_patterns=config.link_patterns),
            classifier=classifier,
        )

    def on_run_started(self, descriptor: TestDescriptor | None = None) -> None:
        log.debug("Test run started")

    def on_run_finished(self, descriptor: TestDescriptor | None = None) -> None:
        log.debug("Test run finished")

    def on_test_started(self, descriptor: TestDescriptor) -> None:
        context = self.identities.current()
        log.debug("Test started: %s uuid=%s", descriptor.full_name, context.uuid)
        try:
            metadata = self.extractor.extract(descriptor)
            result = self.create_result(context, descriptor, metadata)
            self.lifecycle.register_result(result)
        except BaseException:
            # No result exists, so no terminal callback will release it.
            self.identities.release()
            raise

    def on_test_failure(
        self, descriptor: TestDescriptor, exception: BaseException
    ) -> None:
        details = self.classifier(exception)
        log.debug("Test %s: %s", details.status, descriptor.full_name)
        self.lifecycle.mutate_current(
            lambda result: result.model_copy(
                update={
                    "status": details.status,
                    "status_message": details.message,
                    "status_trace": details.trace,
                }
            )
        )

    def on_test_assumption_failure(
        self, descriptor: TestDescriptor, exception: BaseException
    ) -> None:
        log.debug("Test skipped by assumption: %s", descriptor.full_name)
        update = {
            "status": "skipped",
            "status_message": str(exception) or None,
            "status_trace": format_trace(exception),
        }
        self.lifecycle.mutate_current(lambda result: result.model_copy(update=update))

    def on_test_finished(self, descriptor: TestDescriptor) -> None:
        context = self.identities.current()
        try:
            self.lifecycle.mutate_current(default_to_passed)
            self.lifecycle.finalize_timing()
            self.lifecycle.persist(context.uuid)
        finally:
            self.identities.release()
        log.debug("Test finished: %s", descriptor.full_name)

    def on_test_ignored(self, descriptor: TestDescriptor) -> None:
        context = self.identities.current()
        try:
            metadata = self.extractor.extract(descriptor)
            result = self.create_result(context, descriptor, metadata)
            self.lifecycle.register_result(
                result.model_copy(
                    update={
                        "status": "skipped",
                        "status_message": (
                            metadata.ignore_reason or IGNORED_DEFAULT_MESSAGE
                        ),
                        "start": self.lifecycle.clock(),
                    }
                )
            )
            self.lifecycle.finalize_timing()
            self.lifecycle.persist(context.uuid)
        finally:
            self.identities.release()
        log.debug("Test ignored: %s", descriptor.full_name)

    def create_result(
        self,
        context: TestContext,
        descriptor: TestDescriptor,
        metadata: ExtractedMetadata,
    ) -> TestResult:
        """Build a fresh result for a descriptor."""
        suite = metadata.suite_name or descriptor.class_name
        labels = [
            *self.mandatory_labels(descriptor, suite),
            *metadata.labels,
        ]
        return TestResult(
            uuid=context.uuid,
            history_id=self.history.history_id(
                descriptor.class_name, descriptor.method_name
            ),
            name=metadata.display_name or descriptor.name,
            full_name=descriptor.full_name,
            description=metadata.description,
            links=metadata.links,
            labels=labels,
        )

    def mandatory_labels(
        self, descriptor: TestDescriptor, suite: str
    ) -> Sequence[Label]:
        return [
            Label(name="package", value=descriptor.package),
            Label(name="testClass", value=descriptor.class_name),
            Label(name="testMethod", value=descriptor.name),
            Label(name="suite", value=suite),
            Label(name="host", value=self.host_name()),
            Label(name="thread", value=self.thread_name()),
        ]

    def host_name(self) -> str:
        return self.config.host_name or socket.gethostname()

    def thread_name(self) -> str:
        if self.config.thread_name:
            return self.config.thread_name
        thread = threading.current_thread()
        return f"{os.getpid()}.{thread.name}({thread.ident})"

"""pytest plugin driving the result listener from runner hooks.

The plugin stays inactive unless ``--result-listener-dir`` is given.
"""

import logging
import os
from collections.abc import Generator
from functools import partial
from pathlib import Path

import pytest

from result_listener.annotations import describe
from result_listener.config import ListenerConfig
from result_listener.history import DigestUnavailableError
from result_listener.listener import ResultListener
from result_listener.models.descriptor import Annotation, TestDescriptor
from result_listener.status import classify
from result_listener.writers.loading import InvalidWriterError, WriterNotFoundError

log = logging.getLogger(__name__)

PLUGIN_NAME = "result_listener_session"

DESCRIPTOR_KEY = pytest.StashKey[TestDescriptor]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("result-listener", "structured test result records")
    group.addoption(
        "--result-listener-dir",
        dest="result_listener_dir",
        default=None,
        help="Directory for result files; enables the result listener",
    )


def pytest_configure(config: pytest.Config) -> None:
    results_dir = config.getoption("result_listener_dir")
    if not results_dir:
        return

    listener_config = ListenerConfig.from_env(os.environ).model_copy(
        update={"results_dir": Path(results_dir)}
    )
    try:
        listener = ResultListener.from_config(
            listener_config,
            classifier=partial(
                classify, failure_types=(AssertionError, pytest.fail.Exception)
            ),
        )
    except (WriterNotFoundError, InvalidWriterError, DigestUnavailableError) as e:
        raise pytest.UsageError(f"result listener: {e}") from e
    log.info("Writing test results to %s", listener_config.results_dir)
    config.pluginmanager.register(ResultListenerPlugin(listener), PLUGIN_NAME)


def pytest_unconfigure(config: pytest.Config) -> None:
    plugin = config.pluginmanager.get_plugin(PLUGIN_NAME)
    if plugin is not None:
        config.pluginmanager.unregister(plugin)


def skip_reason(item: pytest.Item) -> str | None:
    """Reason of an unconditional skip marker, or None if there is none."""
    marker = item.get_closest_marker("skip")
    if marker is None:
        return None
    return str(marker.kwargs.get("reason") or (marker.args[0] if marker.args else ""))


def describe_item(item: pytest.Item) -> TestDescriptor:
    """Build a descriptor from a collected pytest item."""
    module = getattr(item, "module", None)
    test_class = getattr(item, "cls", None)
    module_name = module.__name__ if module is not None else item.path.stem
    class_name = (
        f"{module_name}.{test_class.__qualname__}" if test_class else module_name
    )

    extra: list[Annotation] = []
    if (reason := skip_reason(item)) is not None:
        extra.append(Annotation(kind="ignore", value=reason))

    return describe(
        class_name,
        item.name,
        test_class=test_class,
        test_function=getattr(item, "function", None),
        extra_method_annotations=extra,
    )


class ResultListenerPlugin:
    """Maps pytest's runtest protocol onto listener callbacks."""

    def __init__(self, listener: ResultListener) -> None:
        self.listener = listener

    def pytest_sessionstart(self, session: pytest.Session) -> None:
        self.listener.on_run_started()

    def pytest_sessionfinish(self, session: pytest.Session) -> None:
        self.listener.on_run_finished()

    @pytest.hookimpl(wrapper=True)
    def pytest_runtest_protocol(
        self, item: pytest.Item, nextitem: pytest.Item | None
    ) -> Generator[None, object, object]:
        descriptor = describe_item(item)
        item.stash[DESCRIPTOR_KEY] = descriptor

        if skip_reason(item) is not None:
            self.listener.on_test_ignored(descriptor)
            return (yield)

        self.listener.on_test_started(descriptor)
        try:
            return (yield)
        except BaseException as e:
            # pytest.exit and KeyboardInterrupt escape without a report.
            self.listener.on_test_failure(descriptor, e)
            raise
        finally:
            self.listener.on_test_finished(descriptor)

    @pytest.hookimpl(wrapper=True)
    def pytest_runtest_makereport(
        self, item: pytest.Item, call: pytest.CallInfo[None]
    ) -> Generator[None, pytest.TestReport, pytest.TestReport]:
        report = yield
        descriptor = item.stash.get(DESCRIPTOR_KEY, None)
        if descriptor is None or call.excinfo is None or skip_reason(item) is not None:
            return report

        if report.failed:
            self.listener.on_test_failure(descriptor, call.excinfo.value)
        elif report.skipped:
            self.listener.on_test_assumption_failure(descriptor, call.excinfo.value)
        return report

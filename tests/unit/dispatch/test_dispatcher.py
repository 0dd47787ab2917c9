"""Tests for intent dispatch transitions."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from typtaps.dispatcher import CANCELLED, Services, dispatch
from typtaps.file_tree_model import DirectoryNode, FileNode
from typtaps.intents import (
    DirectoryLoaded,
    DirectoryOpened,
    DocumentRead,
    Edit,
    FileOpened,
    OpenDirectory,
    OpenFile,
    PagesRendered,
    RefreshDirectory,
    ResetZoom,
    SaveFile,
    Tick,
    ToggleDirectory,
    ZoomIn,
    ZoomOut,
)
from typtaps.preview import RENDER_READY, RENDER_WATCHING, RenderPoller
from typtaps.state import AppState


class FakeWatcher:
    def __init__(self, command: str, source: Path, output: Path) -> None:
        self.source = source
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True


def _run_all(state: AppState, tasks, services: Services | None = None) -> None:
    """Run tasks inline and dispatch their completions until none remain."""
    pending = list(tasks)
    while pending:
        intent = pending.pop(0).run()
        if intent is not None:
            pending.extend(dispatch(state, intent, services))


class DispatcherTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.cache = self.root / "cache"
        self.cache.mkdir()
        self.state = AppState(poller=RenderPoller(self.cache, spawn_watcher=FakeWatcher))

    def tearDown(self) -> None:
        self._tmp.cleanup()


class EditorIntentTests(DispatcherTestCase):
    def test_edit_updates_buffer_and_cursor(self) -> None:
        self.assertEqual(dispatch(self.state, Edit(text="hello\nworld")), [])

        self.assertEqual(self.state.session.text, "hello\nworld")
        self.assertEqual((self.state.session.cursor_line, self.state.session.cursor_column), (2, 6))
        self.assertTrue(self.state.session.dirty)

    def test_open_file_reads_document_and_starts_preview(self) -> None:
        doc = self.root / "doc.typ"
        doc.write_text("= Hello\n", encoding="utf-8")
        services = Services(pick_file=lambda: doc)

        _run_all(self.state, dispatch(self.state, OpenFile(), services), services)

        self.assertEqual(self.state.session.path, doc)
        self.assertEqual(self.state.session.text, "= Hello\n")
        self.assertFalse(self.state.session.dirty)
        self.assertEqual(self.state.poller.status, RENDER_WATCHING)

    def test_cancelled_file_dialog_changes_nothing(self) -> None:
        tasks = dispatch(self.state, OpenFile())
        self.assertEqual(len(tasks), 1)

        intent = tasks[0].run()

        self.assertEqual(intent, FileOpened(error=CANCELLED))
        self.assertEqual(dispatch(self.state, intent), [])
        self.assertIsNone(self.state.session.path)

    def test_unreadable_document_is_logged_and_ignored(self) -> None:
        self.state.session.insert("keep me")
        missing = self.root / "missing.typ"

        tasks = dispatch(self.state, FileOpened(path=missing))
        intent = tasks[0].run()
        self.assertIsInstance(intent, DocumentRead)
        self.assertIsNone(intent.text)

        with self.assertLogs("typtaps.dispatcher", level="WARNING"):
            dispatch(self.state, intent)

        self.assertEqual(self.state.session.text, "keep me")
        self.assertIsNone(self.state.session.path)
        self.assertEqual(self.state.poller.status, "idle")

    def test_out_of_order_document_reads_keep_latest_file(self) -> None:
        first = self.root / "first.typ"
        second = self.root / "second.typ"
        first.write_text("first", encoding="utf-8")
        second.write_text("second", encoding="utf-8")

        first_task = dispatch(self.state, FileOpened(path=first))[0]
        second_task = dispatch(self.state, FileOpened(path=second))[0]

        dispatch(self.state, second_task.run())
        dispatch(self.state, first_task.run())

        self.assertEqual(self.state.session.path, second)
        self.assertEqual(self.state.session.text, "second")
        self.assertEqual(self.state.poller.state.document, second)

    def test_save_file_writes_buffer(self) -> None:
        doc = self.root / "doc.typ"
        dispatch(self.state, DocumentRead(path=doc, text=""))
        dispatch(self.state, Edit(text="#set page(width: 10cm)"))

        dispatch(self.state, SaveFile())

        self.assertEqual(doc.read_text(encoding="utf-8"), "#set page(width: 10cm)")
        self.assertFalse(self.state.session.dirty)

    def test_tick_autosaves_after_interval(self) -> None:
        doc = self.root / "doc.typ"
        self.state.session.open_document(doc, "", now=0.0)
        dispatch(self.state, Edit(text="draft"))

        dispatch(self.state, Tick(now=1.0))
        self.assertFalse(doc.exists())

        dispatch(self.state, Tick(now=10.0))
        self.assertEqual(doc.read_text(encoding="utf-8"), "draft")


class TreeIntentTests(DispatcherTestCase):
    def _make_project(self) -> Path:
        project = self.root / "project"
        (project / "chapters").mkdir(parents=True)
        (project / "chapters" / "intro.typ").write_text("", encoding="utf-8")
        (project / "main.typ").write_text("", encoding="utf-8")
        return project

    def test_open_directory_loads_root_level(self) -> None:
        project = self._make_project()
        services = Services(pick_directory=lambda: project)

        _run_all(self.state, dispatch(self.state, OpenDirectory(), services), services)

        self.assertEqual(self.state.tree_root, project)
        self.assertEqual(
            list(self.state.tree.roots),
            [DirectoryNode(path=project / "chapters", name="chapters"), FileNode(path=project / "main.typ", name="main.typ")],
        )

    def test_toggle_loads_children_once(self) -> None:
        project = self._make_project()
        _run_all(self.state, dispatch(self.state, DirectoryOpened(path=project)))
        chapters = project / "chapters"

        tasks = dispatch(self.state, ToggleDirectory(path=chapters))
        self.assertEqual(len(tasks), 1)
        _run_all(self.state, tasks)

        self.assertEqual([node.name for node in self.state.tree.children_of(chapters)], ["intro.typ"])
        self.assertEqual(dispatch(self.state, ToggleDirectory(path=chapters)), [])
        self.assertEqual(dispatch(self.state, ToggleDirectory(path=chapters)), [])

    def test_toggle_unknown_directory_schedules_nothing(self) -> None:
        self.assertEqual(dispatch(self.state, ToggleDirectory(path=self.root / "nope")), [])

    def test_stale_listing_from_previous_root_is_dropped(self) -> None:
        first = self._make_project()
        second = self.root / "second"
        second.mkdir()
        (second / "other.typ").write_text("", encoding="utf-8")

        _run_all(self.state, dispatch(self.state, DirectoryOpened(path=first)))
        stale_tasks = dispatch(self.state, ToggleDirectory(path=first / "chapters"))
        _run_all(self.state, dispatch(self.state, DirectoryOpened(path=second)))

        _run_all(self.state, stale_tasks)

        self.assertEqual([node.name for node in self.state.tree.roots], ["other.typ"])
        self.assertNotIn(first / "chapters" / "intro.typ", self.state.tree)

    def test_late_root_listing_for_replaced_root_is_dropped(self) -> None:
        first = self._make_project()
        second = self.root / "second"
        second.mkdir()

        stale_generation = self.state.tree.generation + 1
        dispatch(self.state, DirectoryOpened(path=first))
        dispatch(self.state, DirectoryOpened(path=second))
        late = DirectoryLoaded(
            path=first,
            entries=(FileNode(path=first / "main.typ", name="main.typ"),),
            generation=stale_generation,
        )

        dispatch(self.state, late)

        self.assertTrue(self.state.tree.is_empty())

    def test_refresh_directory_replaces_children(self) -> None:
        project = self._make_project()
        chapters = project / "chapters"
        _run_all(self.state, dispatch(self.state, DirectoryOpened(path=project)))
        _run_all(self.state, dispatch(self.state, ToggleDirectory(path=chapters)))
        (chapters / "outro.typ").write_text("", encoding="utf-8")

        _run_all(self.state, dispatch(self.state, RefreshDirectory(path=chapters)))

        self.assertEqual([node.name for node in self.state.tree.children_of(chapters)], ["intro.typ", "outro.typ"])

    def test_refresh_root_reloads_top_level(self) -> None:
        project = self._make_project()
        _run_all(self.state, dispatch(self.state, DirectoryOpened(path=project)))
        (project / "appendix.typ").write_text("", encoding="utf-8")

        _run_all(self.state, dispatch(self.state, RefreshDirectory(path=project)))

        self.assertEqual([node.name for node in self.state.tree.roots], ["chapters", "appendix.typ", "main.typ"])

    def test_refresh_unknown_directory_schedules_nothing(self) -> None:
        self.assertEqual(dispatch(self.state, RefreshDirectory(path=self.root / "nope")), [])


class PreviewIntentTests(DispatcherTestCase):
    def test_tick_loads_new_pages(self) -> None:
        doc = self.root / "doc.typ"
        dispatch(self.state, DocumentRead(path=doc, text=""))
        (self.cache / "doc-1.svg").write_text("<svg/>", encoding="utf-8")

        tasks = dispatch(self.state, Tick(now=0.0))
        self.assertEqual(len(tasks), 1)
        intent = tasks[0].run()
        self.assertIsInstance(intent, PagesRendered)
        dispatch(self.state, intent)

        self.assertEqual(self.state.poller.status, RENDER_READY)
        self.assertEqual(len(self.state.poller.pages), 1)
        self.assertEqual(dispatch(self.state, Tick(now=0.1)), [])


class ZoomIntentTests(DispatcherTestCase):
    def test_zoom_steps_and_bounds(self) -> None:
        dispatch(self.state, ZoomIn())
        self.assertAlmostEqual(self.state.zoom, 1.2)

        for _ in range(100):
            dispatch(self.state, ZoomIn())
        self.assertAlmostEqual(self.state.zoom, 10.0)

        for _ in range(100):
            dispatch(self.state, ZoomOut())
        self.assertAlmostEqual(self.state.zoom, 0.1)

        dispatch(self.state, ResetZoom())
        self.assertEqual(self.state.zoom, 1.0)


class UnknownIntentTests(DispatcherTestCase):
    def test_unknown_intent_is_logged(self) -> None:
        with self.assertLogs("typtaps.dispatcher", level="WARNING"):
            self.assertEqual(dispatch(self.state, object()), [])


if __name__ == "__main__":
    unittest.main()

# tests/test_composition.py

import pytest
from PySide6.QtWidgets import (
    QFormLayout, QGridLayout, QHBoxLayout, QLabel, QPushButton, QStackedLayout, QTabWidget, QVBoxLayout, QWidget
)

from smart_sorter.core.errors import InvalidArgumentError
from smart_sorter.gui.composition import BuilderSpec, attach_child, attach_children


def _layout_children(layout):
    return [layout.itemAt(i).widget() or layout.itemAt(i).layout() for i in range(layout.count())]


@pytest.fixture
def container(qtbot):
    widget = QWidget()
    qtbot.addWidget(widget)
    layout = QVBoxLayout(widget)
    first, second = QLabel("a"), QLabel("b")
    layout.addWidget(first)
    layout.addWidget(second)
    return widget, layout, first, second


def test_control_is_appended_last(container):
    widget, layout, first, second = container
    new = QPushButton("new")

    result = attach_child(layout, control=new)

    assert result is None
    assert _layout_children(layout) == [first, second, new]


def test_widget_parent_uses_its_layout(container):
    widget, layout, first, second = container
    new = QLabel("c")

    attach_child(widget, control=new)

    assert _layout_children(layout) == [first, second, new]
    assert new.parent() is widget


def test_widget_without_layout_gets_one(qtbot):
    widget = QWidget()
    qtbot.addWidget(widget)
    a, b = QLabel("a"), QLabel("b")

    attach_child(widget, control=a)
    attach_child(widget, control=b)

    assert isinstance(widget.layout(), QVBoxLayout)
    assert _layout_children(widget.layout()) == [a, b]


def test_builder_result_is_attached(container):
    widget, layout, first, second = container
    built = QLabel("built")

    attach_child(layout, builder=lambda: built)

    assert _layout_children(layout) == [first, second, built]


def test_builder_receives_params_as_keywords(container):
    widget, layout, _, _ = container
    calls = []

    def builder(text, enabled=True):
        calls.append((text, enabled))
        button = QPushButton(text)
        button.setEnabled(enabled)
        return button

    button = attach_child(layout, builder=builder, params={"text": "Go", "enabled": False}, passthrough=True)

    assert calls == [("Go", False)]
    assert button.text() == "Go"
    assert _layout_children(layout)[-1] is button


def test_builder_without_params_gets_no_arguments(container):
    widget, layout, _, _ = container
    calls = []

    def builder(*args, **kwargs):
        calls.append((args, kwargs))
        return QLabel()

    attach_child(layout, builder=builder)

    assert calls == [((), {})]


def test_passthrough_returns_attached_element(container):
    widget, layout, _, _ = container
    new = QLabel("c")

    assert attach_child(layout, control=new, passthrough=True) is new


def test_failing_builder_attaches_nothing(container):
    widget, layout, first, second = container

    def builder():
        raise RuntimeError("cannot build")

    with pytest.raises(RuntimeError, match="cannot build"):
        attach_child(layout, builder=builder)
    assert _layout_children(layout) == [first, second]


def test_missing_parent_fails_before_building():
    calls = []

    with pytest.raises(InvalidArgumentError):
        attach_child(None, builder=lambda: calls.append(1))
    assert calls == []


def test_exactly_one_input_mode_required(container):
    widget, layout, _, _ = container

    with pytest.raises(InvalidArgumentError):
        attach_child(layout)
    with pytest.raises(InvalidArgumentError):
        attach_child(layout, control=QLabel(), builder=QLabel)


def test_unsupported_parent_is_rejected():
    with pytest.raises(InvalidArgumentError):
        attach_child(["not", "a", "container"], control=QLabel())


def test_nested_layout_is_appended(container):
    widget, layout, first, second = container
    row = QHBoxLayout()

    attach_child(layout, control=row)

    assert _layout_children(layout) == [first, second, row]
    assert row.parent() is layout


def test_grid_layout_appends_rows(qtbot):
    widget = QWidget()
    qtbot.addWidget(widget)
    grid = QGridLayout(widget)
    label, row = QLabel("first"), QHBoxLayout()

    attach_children(grid, [label, row])

    assert _layout_children(grid) == [label, row]
    assert grid.getItemPosition(0)[:2] == (0, 0)
    assert grid.getItemPosition(1)[:2] == (1, 0)
    assert row.parent() is grid


def test_form_layout_appends_rows(qtbot):
    widget = QWidget()
    qtbot.addWidget(widget)
    form = QFormLayout(widget)
    label, row = QLabel("first"), QHBoxLayout()

    attach_children(form, [label, row])

    assert form.rowCount() == 2
    assert row.parent() is form


def test_layout_child_rejected_by_widget_only_layout(qtbot):
    widget = QWidget()
    qtbot.addWidget(widget)
    stack = QStackedLayout(widget)

    attach_child(stack, control=QLabel("page"))
    with pytest.raises(InvalidArgumentError):
        attach_child(stack, control=QHBoxLayout())
    assert stack.count() == 1


def test_tab_widget_uses_window_title(qtbot):
    tabs = QTabWidget()
    qtbot.addWidget(tabs)
    page = QWidget()
    page.setWindowTitle("Organizer")

    attach_child(tabs, control=page)

    assert tabs.count() == 1
    assert tabs.tabText(0) == "Organizer"
    assert tabs.widget(0) is page


def test_batch_attaches_in_arrival_order(container):
    widget, layout, first, second = container
    plain = QLabel("plain")

    attached = attach_children(layout, [
        plain,
        BuilderSpec(lambda text: QPushButton(text), {"text": "built"}),
        lambda: QLabel("bare builder"),
    ], passthrough=True)

    assert attached[0] is plain
    assert attached[1].text() == "built"
    assert attached[2].text() == "bare builder"
    assert _layout_children(layout) == [first, second] + attached


def test_batch_without_passthrough_returns_none(container):
    widget, layout, _, _ = container

    assert attach_children(layout, [QLabel("x")]) is None


def test_batch_failure_keeps_earlier_items(container):
    widget, layout, first, second = container
    early = QLabel("early")

    def broken():
        raise ValueError("broken")

    with pytest.raises(ValueError):
        attach_children(layout, [early, broken, QLabel("never")])
    assert _layout_children(layout) == [first, second, early]

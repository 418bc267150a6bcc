# smart_sorter/gui/composition.py

"""
Helpers for building widget trees declaratively.

Instead of creating a layout, adding a widget, keeping a reference and
repeating, a view can hand a container either finished widgets or the
functions that build them:

    attach_children(panel, [
        DirectorySelector("Source Directory:"),
        BuilderSpec(make_options_row, {"recurse": True}),
    ])

Children are always appended, so the order of the calls is the order on
screen.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Union

from PySide6.QtWidgets import (
    QBoxLayout, QFormLayout, QGridLayout, QLayout, QSplitter, QStackedWidget, QTabWidget, QVBoxLayout,
    QWidget
)

from smart_sorter.core.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

UIElement = Union[QWidget, QLayout]
Container = Union[QLayout, QWidget]
Builder = Callable[..., UIElement]


@dataclass(frozen=True)
class BuilderSpec:
    """A builder together with the keyword parameters it should be called with."""
    builder: Builder
    params: Mapping[str, Any] | None = None


def _is_container(parent: Any) -> bool:
    return isinstance(parent, (QLayout, QWidget))


def _tab_title(child: QWidget) -> str:
    return child.windowTitle() or child.objectName() or f"Tab {child.metaObject().className()}"


def _append(parent: Container, child: UIElement):
    """Adds a child as the last element of the container's child collection."""
    if not isinstance(child, (QWidget, QLayout)):
        raise InvalidArgumentError(f"Cannot attach {type(child).__name__}: expected a QWidget or QLayout.")

    if isinstance(parent, QGridLayout):
        # Each child takes a new row in the first column.
        row = parent.rowCount() if parent.count() else 0
        if isinstance(child, QWidget):
            parent.addWidget(child, row, 0)
        else:
            parent.addLayout(child, row, 0)
        return

    if isinstance(parent, QFormLayout):
        parent.addRow(child)
        return

    if isinstance(parent, QLayout):
        if isinstance(child, QWidget):
            parent.addWidget(child)
        elif isinstance(parent, QBoxLayout):
            parent.addLayout(child)
        else:
            raise InvalidArgumentError(f"{type(parent).__name__} only accepts widgets as children.")
        return

    if isinstance(parent, (QTabWidget, QSplitter, QStackedWidget)):
        if not isinstance(child, QWidget):
            raise InvalidArgumentError(f"{type(parent).__name__} only accepts widgets as children.")
        if isinstance(parent, QTabWidget):
            parent.addTab(child, _tab_title(child))
        else:
            parent.addWidget(child)
        return

    # A plain widget: its layout is its child collection. A widget that has
    # none yet gets a vertical one, which appends in call order.
    layout = parent.layout()
    if layout is None:
        layout = QVBoxLayout(parent)
    _append(layout, child)


def attach_child(
        parent: Container,
        control: UIElement | None = None,
        builder: Builder | None = None,
        params: Mapping[str, Any] | None = None,
        passthrough: bool = False,
) -> UIElement | None:
    """
    Appends a widget (or layout) to a container.

    Exactly one of 'control' and 'builder' is given. A builder is called
    once, with 'params' as keyword arguments when present and with no
    arguments otherwise, and what it returns is attached. If the builder
    raises, the exception propagates and nothing is attached.

    Args:
        parent: A QLayout, QTabWidget, QSplitter, QStackedWidget or any QWidget.
        control: The element to attach.
        builder: A callable returning the element to attach.
        params: Keyword arguments for the builder.
        passthrough: Return the attached element instead of None.

    Raises:
        InvalidArgumentError: if 'parent' is missing or unsupported, or if
            not exactly one of 'control' and 'builder' was supplied.
    """
    if parent is None:
        raise InvalidArgumentError("A parent container is required.")
    if not _is_container(parent):
        raise InvalidArgumentError(f"{type(parent).__name__} is not a supported container.")
    if (control is None) == (builder is None):
        raise InvalidArgumentError("Supply exactly one of 'control' or 'builder'.")

    if builder is not None:
        child = builder(**params) if params else builder()
    else:
        child = control

    _append(parent, child)
    logger.debug(f"Attached {type(child).__name__} to {type(parent).__name__}.")
    return child if passthrough else None


def attach_children(
        parent: Container,
        items: Iterable[UIElement | BuilderSpec | Builder],
        passthrough: bool = False,
) -> List[UIElement] | None:
    """
    Attaches a stream of elements and builders, one at a time, in arrival order.

    Each item is a finished element, a BuilderSpec, or a bare builder that
    takes no parameters. A failing item stops the stream; the items before
    it stay attached.
    """
    attached = []
    for item in items:
        if isinstance(item, BuilderSpec):
            child = attach_child(parent, builder=item.builder, params=item.params, passthrough=True)
        elif isinstance(item, (QWidget, QLayout)):
            child = attach_child(parent, control=item, passthrough=True)
        elif callable(item):
            child = attach_child(parent, builder=item, passthrough=True)
        else:
            raise InvalidArgumentError(f"Cannot attach {type(item).__name__}.")
        attached.append(child)
    return attached if passthrough else None

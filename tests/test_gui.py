# tests/test_gui.py

import pytest

from smart_sorter.gui.action_controller import ActionController, OrganizeRequest
from smart_sorter.gui.main_window import MainWindow, WINDOW_TITLE


@pytest.fixture
def window(qtbot, isolated_settings):
    window = MainWindow()
    qtbot.addWidget(window)
    return window


def test_main_window_creation(window):
    assert window.windowTitle() == WINDOW_TITLE
    assert window.tab_widget.count() == 2
    assert window.tab_widget.tabText(0) == "Organizer"
    assert window.tab_widget.tabText(1) == "Image Inspector"
    assert window.tab_widget.widget(0) is window.organizer_tab


def test_start_requires_source_directory(window, tmp_path):
    tab = window.organizer_tab

    assert tab.classifier_editor.items() == ["EquipMake", "EquipModel"]
    assert not tab.start_button.isEnabled()
    assert not tab.preview_button.isEnabled()

    tab.source_selector.setPath(str(tmp_path))

    assert tab.start_button.isEnabled()
    assert tab.preview_button.isEnabled()


def test_build_request_collects_form(window, tmp_path):
    tab = window.organizer_tab
    tab.source_selector.setPath(str(tmp_path))
    tab.classifier_editor.setItems(["Year", "Month"])
    tab.filter_edit.setText("*.jpg")
    tab.exclude_edit.setText("*_thumb.*, *.tmp")
    tab.recurse_check.setChecked(True)

    request = tab.build_request()

    assert request.paths == [str(tmp_path)]
    assert request.entries == ["Year", "Month"]
    assert request.use_expressions is False
    assert request.name_filter == "*.jpg"
    assert request.include == []
    assert request.exclude == ["*_thumb.*", "*.tmp"]
    assert request.recurse is True


def test_inspector_shows_properties(window, tmp_path, make_image):
    tab = window.inspector_tab

    assert tab.show_image(make_image(tmp_path / "shot.jpg", make="Canon"))
    names = [tab.table.item(row, 0).text() for row in range(tab.table.rowCount())]
    assert "EquipMake" in names

    text_file = tmp_path / "notes.txt"
    text_file.write_text("x")
    assert not tab.show_image(text_file)
    assert tab.table.rowCount() == 0


def _wait_until_idle(qtbot, controller, start):
    with qtbot.waitSignal(controller.state_changed, timeout=10000,
                          check_params_cb=lambda state: state == "IDLE"):
        start()


def test_controller_runs_organize_in_background(qtbot, pics, isolated_settings):
    controller = ActionController()
    entries = []
    controller.log_entry_created.connect(entries.append)
    request = OrganizeRequest(paths=[str(pics)], entries=["EquipMake"])

    _wait_until_idle(qtbot, controller, lambda: controller.start_organize(request))

    assert controller.is_idle()
    assert controller.last_summary.copied == 2
    assert (pics / "Nikon" / "a.jpg").is_file()
    assert entries[-1]["status"] == "DONE"
    assert isolated_settings.exists()


def test_controller_preview_copies_nothing(qtbot, pics):
    controller = ActionController()
    entries = []
    controller.log_entry_created.connect(entries.append)
    request = OrganizeRequest(paths=[str(pics)], entries=["image['EquipMake']"], use_expressions=True)

    _wait_until_idle(qtbot, controller, lambda: controller.start_preview(request))

    assert not (pics / "Nikon").exists()
    plans = [entry["message"] for entry in entries if entry["status"] == "INFO"]
    assert any("a.jpg" in message and "Nikon" in message for message in plans)
    assert any(entry["status"] == "SKIPPED" and "c.txt" in entry["message"] for entry in entries)


def test_controller_reports_invalid_expression(qtbot, pics):
    controller = ActionController()
    errors = []
    controller.show_message_box.connect(lambda kind, title, message: errors.append(message))
    request = OrganizeRequest(paths=[str(pics)], entries=["image["], use_expressions=True)

    _wait_until_idle(qtbot, controller, lambda: controller.start_organize(request))

    assert errors
    assert controller.last_summary is None


def test_log_viewer_can_hide_copied_rows(qtbot):
    from smart_sorter.gui.log_viewer import LogViewer

    viewer = LogViewer()
    qtbot.addWidget(viewer)
    viewer.add_log_entry("COPIED", "'a.jpg' -> 'Nikon'")
    viewer.add_log_entry("SKIPPED", "'c.txt': not an image")
    viewer.add_log_entry("DONE", "Done: 1 copied, 1 skipped, 0 failed.")

    assert viewer.visible_row_count() == 3
    viewer.set_problems_only(True)
    assert viewer.visible_row_count() == 2
    viewer.set_problems_only(False)
    assert viewer.visible_row_count() == 3
    assert viewer.log_model().counts()["COPIED"] == 1


def test_theme_menu_reflects_saved_theme(window):
    checked = [action.text() for action in window.theme_group.actions() if action.isChecked()]
    assert checked == ["Dark Theme"]

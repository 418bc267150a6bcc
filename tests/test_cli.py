# tests/test_cli.py

from click.testing import CliRunner

from smart_sorter.cli.main import sorter


def test_organize_by_property(pics, isolated_settings):
    result = CliRunner().invoke(sorter, ["organize", str(pics), "-p", "EquipMake", "--hide-progress"])

    assert result.exit_code == 0, result.output
    assert (pics / "Nikon" / "a.jpg").is_file()
    assert (pics / "Canon" / "b.jpg").is_file()
    assert "Organize complete" in result.output
    assert "Skipped" in result.output


def test_organize_by_expression(pics, isolated_settings):
    result = CliRunner().invoke(sorter, [
        "organize", str(pics), "-e", "props.get('EquipMake', '').upper()", "--hide-progress"])

    assert result.exit_code == 0, result.output
    assert (pics / "NIKON" / "a.jpg").is_file()


def test_property_and_expression_are_exclusive(pics, isolated_settings):
    result = CliRunner().invoke(sorter, ["organize", str(pics), "-p", "EquipMake", "-e", "'x'"])

    assert result.exit_code == 2
    assert "cannot be used together" in result.output
    assert not (pics / "Nikon").exists()


def test_invalid_expression_is_a_usage_error(pics, isolated_settings):
    result = CliRunner().invoke(sorter, ["organize", str(pics), "-e", "image["])

    assert result.exit_code == 2


def test_settings_provide_default_properties(pics, isolated_settings):
    isolated_settings.parent.mkdir(parents=True)
    isolated_settings.write_text('{"organizer": {"properties": ["EquipMake"], "hide_progress": true}}')

    result = CliRunner().invoke(sorter, ["organize", str(pics)])

    assert result.exit_code == 0, result.output
    assert (pics / "Canon" / "b.jpg").is_file()


def test_strict_mode_exits_non_zero(pics, isolated_settings):
    result = CliRunner().invoke(sorter, [
        "organize", str(pics), "-e", "1 / 0", "--strict", "--hide-progress"])

    assert result.exit_code == 1
    assert "Organize stopped" in result.output


def test_inspect_lists_properties(pics):
    result = CliRunner().invoke(sorter, ["inspect", str(pics / "a.jpg")])

    assert result.exit_code == 0, result.output
    assert "EquipMake" in result.output
    assert "Nikon" in result.output


def test_inspect_rejects_non_images(pics):
    result = CliRunner().invoke(sorter, ["inspect", str(pics / "c.txt")])

    assert result.exit_code == 1


def test_bad_duplicates_setting_falls_back_to_replace(pics, isolated_settings):
    isolated_settings.parent.mkdir(parents=True)
    isolated_settings.write_text('{"organizer": {"duplicates": "explode"}}')
    stale = pics / "Nikon" / "a.jpg"
    stale.parent.mkdir()
    stale.write_text("stale")

    result = CliRunner().invoke(sorter, ["organize", str(pics), "-p", "EquipMake", "--hide-progress"])

    assert result.exit_code == 0, result.output
    assert stale.read_bytes() == (pics / "a.jpg").read_bytes()

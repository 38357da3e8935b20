import json

from typer.testing import CliRunner

from slugswap.cli import app

from .conftest import snapshot

runner = CliRunner()


def test_replace_live(plugin_tree):
    result = runner.invoke(
        app, ["replace", "oldslug", "newslug", "--directory", str(plugin_tree)]
    )

    assert result.exit_code == 0, result.output
    assert f"Scanning directory: {plugin_tree}" in result.output
    assert "Found 3 files to process." in result.output
    assert "2 file(s) modified." in result.output
    assert "newslug" in (plugin_tree / "a.php").read_text()
    assert "oldslug" in (plugin_tree / "node_modules" / "c.js").read_text()


def test_replace_dry_run(plugin_tree):
    before = snapshot(plugin_tree)

    result = runner.invoke(
        app,
        ["replace", "oldslug", "newslug", "--directory", str(plugin_tree), "--dry-run"],
    )

    assert result.exit_code == 0, result.output
    assert "Files that would be modified:\n- a.php\n- b.txt" in result.output
    assert "2 file(s) would be modified." in result.output
    assert snapshot(plugin_tree) == before


def test_replace_uses_directory_from_environment(plugin_tree):
    result = runner.invoke(
        app,
        ["replace", "oldslug", "newslug", "--dry-run"],
        env={"SLUGSWAP_DIRECTORY": str(plugin_tree)},
    )

    assert result.exit_code == 0, result.output
    assert "2 file(s) would be modified." in result.output


def test_empty_search_is_an_error(plugin_tree):
    before = snapshot(plugin_tree)

    result = runner.invoke(app, ["replace", "", "newslug", "--directory", str(plugin_tree)])

    assert result.exit_code == 1
    assert "Error: Search and replace strings cannot be empty." in result.output
    assert "Scanning directory" not in result.output
    assert snapshot(plugin_tree) == before


def test_missing_replace_argument_is_rejected(plugin_tree):
    result = runner.invoke(app, ["replace", "oldslug", "--directory", str(plugin_tree)])

    assert result.exit_code != 0
    assert "modified" not in result.output


def test_missing_directory_is_an_error(tmp_path):
    missing = tmp_path / "nope"

    result = runner.invoke(app, ["replace", "a", "b", "--directory", str(missing)])

    assert result.exit_code == 1
    assert f"Error: The directory '{missing}' does not exist." in result.output


def test_no_matches_is_success_with_zero(plugin_tree):
    result = runner.invoke(
        app, ["replace", "absent-token", "x", "--directory", str(plugin_tree)]
    )

    assert result.exit_code == 0, result.output
    assert "0 file(s) modified." in result.output


def test_no_candidate_files_warns_and_succeeds(tmp_path):
    (tmp_path / "image.png").write_bytes(b"\x89PNG")

    result = runner.invoke(app, ["replace", "a", "b", "--directory", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "No valid files found" in result.output
    assert "0 file(s) modified." in result.output


def test_json_report_written_to_file(plugin_tree, tmp_path):
    out = tmp_path / "report.json"

    result = runner.invoke(
        app,
        [
            "replace",
            "oldslug",
            "newslug",
            "--directory",
            str(plugin_tree),
            "--format",
            "json",
            "--output",
            str(out),
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(out.read_text())
    assert payload["changed_count"] == 2
    assert sorted(o["path"] for o in payload["outcomes"] if o["outcome"] == "modified") == [
        "a.php",
        "b.txt",
    ]


def test_bad_format_is_an_error(plugin_tree):
    result = runner.invoke(
        app, ["replace", "a", "b", "--directory", str(plugin_tree), "--format", "xml"]
    )

    assert result.exit_code == 1
    assert "format must be one of" in result.output


def test_unknown_profile_is_an_error(plugin_tree):
    result = runner.invoke(
        app, ["replace", "a", "b", "--directory", str(plugin_tree), "--profile", "nope"]
    )

    assert result.exit_code == 1
    assert "Unknown profile 'nope'" in result.output


def test_scan_lists_candidates(plugin_tree):
    result = runner.invoke(app, ["scan", "--directory", str(plugin_tree)])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines()[:3] == ["a.php", "b.txt", "notes.md"]
    assert "c.js" not in result.output
    assert "Total: 3 files" in result.output


def test_policy_command(tmp_path):
    result = runner.invoke(app, ["policy", "--profile", "standard"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["profile"] == "standard"
    assert "vue" not in payload["allowed_extensions"]
    assert "node_modules" in payload["ignored_directories"]


def test_missing_directory_fails_before_progress_output(tmp_path):
    result = runner.invoke(app, ["replace", "a", "b", "--directory", str(tmp_path / "nope")])

    assert result.exit_code == 1
    assert "Scanning directory" not in result.output
    assert "Ignored directories" not in result.output


def test_profile_help_lists_packaged_profiles():
    result = runner.invoke(app, ["replace", "--help"])

    assert result.exit_code == 0
    assert "extended|standard" in result.output

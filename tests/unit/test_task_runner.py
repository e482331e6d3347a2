import os
import sys

import pytest

from markdown_inventory.domains.tasks import runner as runner_module
from markdown_inventory.domains.tasks.runner import TaskRunner, run_task
from markdown_inventory.models.schemas import DiscoveredFile, Task
from markdown_inventory.utils.config import Settings
from markdown_inventory.utils.errors import TaskError


def make_task(**overrides) -> Task:
    values = {"output_file": "index.md", "folders": ["notes"], "extensions": ["md"]}
    values.update(overrides)
    return Task(**values)


def read_output(root, name="index.md") -> str:
    return (root / name).read_text(encoding="utf-8")


def test_untagged_task_lists_every_file_sorted(tmp_path, write_file):
    write_file(tmp_path / "notes" / "b.md", "---\ntags: [x]\n---\n")
    write_file(tmp_path / "notes" / "a.md", "no tags")

    result = run_task(make_task(), tmp_path, settings=Settings())

    assert read_output(tmp_path) == (
        "- [a](notes/a.md) 2024-03-05\n"
        "- [b](notes/b.md) 2024-03-05\n"
    )
    assert result.file_count == 2
    assert result.template is None


def test_tag_filter_excludes_unmatched_files(tmp_path, write_file):
    write_file(tmp_path / "notes" / "ai.md", "---\ntags: [ia, prompt]\n---\n")
    write_file(tmp_path / "notes" / "inline.md", "talks about #ia")
    write_file(tmp_path / "notes" / "other.md", "---\ntags: [cooking]\n---\n")

    result = run_task(make_task(tags=["#ia"]), tmp_path, settings=Settings())

    assert [line.split("]")[0] for line in result.lines] == ["- [ai", "- [inline"]


def test_only_files_with_configured_extensions(tmp_path, write_file):
    write_file(tmp_path / "notes" / "keep.md")
    write_file(tmp_path / "notes" / "skip.txt")
    write_file(tmp_path / "notes" / "skip.markdown")

    result = run_task(make_task(extensions=[".md"]), tmp_path, settings=Settings())

    assert result.lines == ["- [keep](notes/keep.md) 2024-03-05\n"]


def test_display_name_strips_first_matching_extension(tmp_path, write_file):
    write_file(tmp_path / "notes" / "draft.tar.md")
    write_file(tmp_path / "notes" / "plain.txt")

    result = run_task(make_task(extensions=["md", "txt"]), tmp_path, settings=Settings())

    assert result.lines == [
        "- [draft.tar](notes/draft.tar.md) 2024-03-05\n",
        "- [plain](notes/plain.txt) 2024-03-05\n",
    ]


def test_nested_paths_encode_spaces(tmp_path, write_file):
    write_file(tmp_path / "notes" / "sub dir" / "my note.md")

    result = run_task(make_task(), tmp_path, settings=Settings())

    assert result.lines == ["- [my note](notes/sub%20dir/my%20note.md) 2024-03-05\n"]


def test_output_sorted_across_folders(tmp_path, write_file):
    write_file(tmp_path / "b" / "one.md")
    write_file(tmp_path / "a" / "two.md")

    result = run_task(make_task(folders=["b", "a"]), tmp_path, settings=Settings())

    assert [line.split("(")[1].split(")")[0] for line in result.lines] == ["a/two.md", "b/one.md"]


def test_overlapping_folders_are_not_deduplicated(tmp_path, write_file):
    write_file(tmp_path / "notes" / "sub" / "x.md")

    result = run_task(make_task(folders=["notes", "notes/sub"]), tmp_path, settings=Settings())

    assert result.lines == ["- [x](notes/sub/x.md) 2024-03-05\n"] * 2


def test_template_copied_before_lines(tmp_path, write_file):
    write_file(tmp_path / "notes" / "a.md")
    write_file(tmp_path / "header.md", "# Index")

    result = run_task(make_task(template="header.md"), tmp_path, settings=Settings())

    assert read_output(tmp_path) == "# Index\n- [a](notes/a.md) 2024-03-05\n"
    assert result.template == "header.md"


def test_template_trailing_newline_not_doubled(tmp_path, write_file):
    write_file(tmp_path / "header.md", "# Index\n\n")

    run_task(make_task(template="header.md"), tmp_path, settings=Settings())

    assert read_output(tmp_path) == "# Index\n\n"


def test_missing_template_warns_and_continues(tmp_path, write_file, log_messages):
    write_file(tmp_path / "notes" / "a.md")

    run_task(make_task(template="nope.md"), tmp_path, settings=Settings())

    assert read_output(tmp_path) == "- [a](notes/a.md) 2024-03-05\n"
    assert any(m.startswith("WARNING: Error reading template") for m in log_messages)


def test_custom_format(tmp_path, write_file):
    write_file(tmp_path / "notes" / "a.md")

    run_task(make_task(format="* %s <%s> %s\n"), tmp_path, settings=Settings())

    assert read_output(tmp_path) == "* a <notes/a.md> 2024-03-05\n"


def test_empty_format_falls_back_to_default(tmp_path, write_file):
    write_file(tmp_path / "notes" / "a.md")

    run_task(make_task(format=""), tmp_path, settings=Settings())

    assert read_output(tmp_path) == "- [a](notes/a.md) 2024-03-05\n"


def test_bad_format_is_a_task_error(tmp_path, write_file):
    write_file(tmp_path / "notes" / "a.md")

    with pytest.raises(TaskError):
        run_task(make_task(format="%s only\n"), tmp_path, settings=Settings())

    assert not (tmp_path / "index.md").exists()


def test_missing_folder_warns_and_still_writes(tmp_path, log_messages):
    result = run_task(make_task(folders=["missing"]), tmp_path, settings=Settings())

    assert result.lines == []
    assert read_output(tmp_path) == ""
    assert any("Cannot access path" in m and m.startswith("WARNING") for m in log_messages)


@pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs an unprivileged POSIX user")
def test_unreadable_subfolder_warns_and_still_writes(tmp_path, write_file, log_messages):
    write_file(tmp_path / "notes" / "ok.md")
    locked = tmp_path / "notes" / "locked"
    write_file(locked / "hidden.md")
    locked.chmod(0)

    try:
        result = run_task(make_task(), tmp_path, settings=Settings())
    finally:
        locked.chmod(0o755)

    assert result.lines == ["- [ok](notes/ok.md) 2024-03-05\n"]
    assert any("Cannot access path" in m for m in log_messages)


def test_unwritable_output_is_a_task_error(tmp_path, write_file):
    write_file(tmp_path / "notes" / "a.md")

    with pytest.raises(TaskError):
        run_task(make_task(output_file="no/such/dir/index.md"), tmp_path, settings=Settings())


def test_output_overwritten_and_idempotent(tmp_path, write_file):
    write_file(tmp_path / "notes" / "a.md")
    write_file(tmp_path / "index.md", "stale content that is much longer than the new one\n")

    run_task(make_task(), tmp_path, settings=Settings())
    first = (tmp_path / "index.md").read_bytes()
    run_task(make_task(), tmp_path, settings=Settings())

    assert (tmp_path / "index.md").read_bytes() == first == b"- [a](notes/a.md) 2024-03-05\n"


def test_progress_messages(tmp_path, write_file, log_messages):
    write_file(tmp_path / "notes" / "a.md", "#ia")

    TaskRunner(tmp_path, Settings()).run(make_task(tags=["ia", "ml"], template="t.md"), task_number=3)

    assert "INFO: Processing task 3: index.md (filtering by tags: ia, ml)" in log_messages
    assert "SUCCESS: Created index.md with 1 files (using template: t.md)" in log_messages


def test_render_line_uses_date_format_setting(tmp_path):
    runner = TaskRunner(tmp_path, Settings(date_format="%d/%m/%Y"))
    item = DiscoveredFile(relative_path=os.path.join("notes", "a.md"), modified=0.0)

    line = runner.render_line(make_task(), item)

    assert line.startswith("- [a](notes/a.md) ")
    assert line.count("/") == 3


def test_walk_permission_error_warns_and_still_writes(tmp_path, write_file, log_messages, monkeypatch):
    write_file(tmp_path / "notes" / "ok.md")
    locked = tmp_path / "notes" / "locked"
    real_walk = os.walk

    def walk_with_locked_folder(top, onerror=None, **kwargs):
        onerror(PermissionError(13, "Permission denied", str(locked)))
        yield from real_walk(top, onerror=onerror, **kwargs)

    monkeypatch.setattr(runner_module.os, "walk", walk_with_locked_folder)

    result = run_task(make_task(), tmp_path, settings=Settings())

    assert result.lines == ["- [ok](notes/ok.md) 2024-03-05\n"]
    assert read_output(tmp_path) == "- [ok](notes/ok.md) 2024-03-05\n"
    assert f"WARNING: Cannot access path {locked}: Permission denied. Skipping." in log_messages


@pytest.mark.skipif(sys.platform != "linux", reason="needs a file system that accepts non-UTF-8 names")
def test_non_utf8_file_name_written_as_raw_bytes(tmp_path, write_file):
    write_file(tmp_path / "notes" / "a.md")
    raw_name = os.path.join(os.fsencode(tmp_path / "notes"), b"caf\xe9.md")
    with open(raw_name, "wb"):
        pass
    mtime = os.stat(tmp_path / "notes" / "a.md").st_mtime
    os.utime(raw_name, (mtime, mtime))

    result = run_task(make_task(), tmp_path, settings=Settings())

    assert result.file_count == 2
    assert (tmp_path / "index.md").read_bytes() == (
        b"- [a](notes/a.md) 2024-03-05\n"
        b"- [caf\xe9](notes/caf\xe9.md) 2024-03-05\n"
    )

import io

import pytest

from simplefs import SimpleShell
from simplefs.errors import InvalidName
from simplefs.limits import Limits


def run_lines(shell, text):
    out = io.StringIO()
    shell.run(io.StringIO(text), out)
    return out.getvalue()


def test_end_to_end_transcript(shell):
    text = (
        "create_dir /a\n"
        "create /a/b\n"
        'write /a/b "hi"\n'
        "read /a/b\n"
        "find b\n"
        "delete_r /a\n"
        "find b\n"
        "exit\n"
    )

    assert run_lines(shell, text) == "ok\nok\nok 2\ncontenuto hi\nok /a/b\nok\nno\n"
    assert shell.closed


def test_exit_stops_processing(shell):
    text = "create /a\nexit\ncreate /b\n"

    assert run_lines(shell, text) == "ok\n"
    assert not shell.fs.exists("/b")


def test_blank_line_terminates(shell):
    text = "create /a\n\ncreate /b\n"

    assert run_lines(shell, text) == "ok\n"
    assert shell.closed
    assert not shell.fs.exists("/b")


def test_end_of_input_without_exit(shell):
    assert run_lines(shell, "create_dir /d") == "ok\n"
    assert not shell.closed


def test_unknown_command_is_silent(shell):
    stdout, stderr, code = shell.execute("mkdir /a")

    assert stdout == ""
    assert code == 127
    assert "mkdir" in stderr
    assert shell.fs.count() == 1


def test_create_twice_answers_no(shell):
    assert shell.execute("create /a")[0] == "ok\n"
    stdout, stderr, code = shell.execute("create /a")

    assert stdout == "no\n"
    assert code == 1
    assert "already_exists" in stderr


def test_create_requires_existing_parent(shell):
    assert shell.execute("create /missing/file")[0] == "no\n"
    assert shell.execute("create_dir /")[0] == "no\n"
    assert shell.execute("create")[0] == "no\n"


def test_write_keeps_spaces_and_counts_bytes(shell):
    shell.execute("create /f")

    assert shell.execute('write /f "hello world"')[0] == "ok 11\n"
    assert shell.execute("read /f")[0] == "contenuto hello world\n"
    assert shell.execute('write /f "héllo"')[0] == "ok 6\n"
    assert shell.execute("read /f")[0] == "contenuto héllo\n"


def test_write_replaces_content(shell):
    shell.execute("create /f")
    shell.execute('write /f "a long first value"')
    shell.execute('write /f "b"')

    assert shell.execute("read /f")[0] == "contenuto b\n"


def test_write_failures(shell):
    shell.execute("create_dir /d")
    shell.execute("create /f")

    assert shell.execute('write /d "x"')[0] == "no\n"
    assert shell.execute('write /nope "x"')[0] == "no\n"
    assert shell.execute('write /f ""')[0] == "no\n"
    assert shell.execute("write /f")[0] == "no\n"


def test_read_fresh_file_is_empty(shell):
    shell.execute("create /f")

    assert shell.execute("read /f")[0] == "contenuto \n"


def test_read_directory_answers_no(shell):
    shell.execute("create_dir /d")

    assert shell.execute("read /d")[0] == "no\n"
    assert shell.execute("read /missing")[0] == "no\n"


def test_delete_leaf_only(shell):
    shell.execute("create_dir /d")
    shell.execute("create /d/f")

    assert shell.execute("delete /d")[0] == "no\n"
    assert shell.execute("delete /d/f")[0] == "ok\n"
    assert shell.execute("delete /d")[0] == "ok\n"
    assert shell.execute("delete /d")[0] == "no\n"


def test_delete_r_missing_path(shell):
    assert shell.execute("delete_r /nothing")[0] == "no\n"


def test_find_sorted_output(shell):
    for line in (
        "create_dir /z",
        "create_dir /a",
        "create /z/x",
        "create_dir /a/x",
        "create /x",
        "create /a/x/x",
    ):
        assert shell.execute(line)[0] == "ok\n"

    stdout, _, code = shell.execute("find x")

    assert code == 0
    assert stdout == "ok /a/x\nok /a/x/x\nok /x\nok /z/x\n"


def test_find_without_name(shell):
    assert shell.execute("find")[0] == "no\n"


def test_limits_are_enforced_through_the_protocol():
    shell = SimpleShell(limits=Limits(max_nodes=2, max_namelength=3, max_depth=2))

    assert shell.execute("create_dir /abc")[0] == "ok\n"
    assert shell.execute("create_dir /abcd")[0] == "no\n"
    assert shell.execute("create /b")[0] == "ok\n"
    assert shell.execute("create /c")[0] == "no\n"
    assert shell.execute("create /abc/x")[0] == "no\n"


def test_closed_shell_ignores_input(shell):
    shell.execute("exit")

    stdout, _, code = shell.execute("create /a")

    assert stdout == ""
    assert code == 1
    assert shell.fs.count() == 1


def test_run_batch_collects_lines():
    shell = SimpleShell(fs_tree={"a": {"b": "seed"}})

    output = shell.run_batch(["read /a/b", "find b", "exit", "read /a/b"])

    assert output == ["contenuto seed", "ok /a/b"]


def test_write_unquoted_takes_rest_of_line(shell):
    shell.execute("create /f")

    assert shell.execute("write /f hello world")[0] == "ok 11\n"
    assert shell.execute("read /f")[0] == "contenuto hello world\n"


def test_write_quoted_stops_at_closing_quote(shell):
    shell.execute("create /f")

    assert shell.execute('write /f "hi" trailing words')[0] == "ok 2\n"
    assert shell.execute("read /f")[0] == "contenuto hi\n"


def test_seeded_name_with_whitespace_is_rejected():
    with pytest.raises(InvalidName):
        SimpleShell(fs_tree={"a b": "x"})

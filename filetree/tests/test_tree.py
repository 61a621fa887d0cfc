import pytest

import filetree.node as node_module
from filetree import (
    AlreadyInTreeError,
    BadPathError,
    ConflictingPathError,
    FileTree,
    InitializationError,
    NoSuchPathError,
    NotADirectoryPathError,
    NotAFilePathError,
    StatResult,
    TreeMemoryError,
    check_tree,
)


@pytest.fixture
def ft():
    tree = FileTree()
    tree.init()
    yield tree
    assert check_tree(tree)


@pytest.fixture
def populated(ft):
    ft.insert_dir("/a")
    ft.insert_dir("/a/b")
    ft.insert_file("/a/b/c", b"data")
    ft.insert_file("/a/f", b"x")
    return ft


# ---------------------------------------------------------------------------
# lifecycle


def test_lifecycle():
    tree = FileTree()
    assert not tree.initialized
    assert check_tree(tree)
    tree.init()
    assert tree.initialized and tree.root is None and tree.count == 0
    with pytest.raises(InitializationError):
        tree.init()
    tree.insert_dir("/a")
    tree.destroy()
    assert not tree.initialized and tree.root is None and tree.count == 0
    assert check_tree(tree)
    with pytest.raises(InitializationError):
        tree.destroy()


@pytest.mark.parametrize("call", [
    lambda t: t.insert_dir("/a"),
    lambda t: t.insert_file("/a/b", b""),
    lambda t: t.rm_dir("/a"),
    lambda t: t.rm_file("/a/b"),
    lambda t: t.stat("/a"),
])
def test_mutators_require_init(call):
    tree = FileTree()
    with pytest.raises(InitializationError):
        call(tree)


def test_queries_on_uninitialized_tree_answer_negatively():
    tree = FileTree()
    assert tree.contains_dir("/a") is False
    assert tree.contains_file("/a") is False
    assert tree.get_file_contents("/a") is None
    assert tree.replace_file_contents("/a", b"x") is None
    assert tree.to_string() is None


def test_tree_can_be_reused_after_destroy(populated):
    populated.destroy()
    populated.init()
    assert populated.count == 0
    populated.insert_dir("/z")
    assert populated.contains_dir("/z")
    assert not populated.contains_dir("/a")


# ---------------------------------------------------------------------------
# insertion


@pytest.mark.parametrize("bad", ["", "/", "a/b", "/a//b", "/a/"])
def test_bad_paths(ft, bad):
    with pytest.raises(BadPathError):
        ft.insert_dir(bad)
    with pytest.raises(BadPathError):
        ft.insert_file(bad, b"")
    with pytest.raises(BadPathError):
        ft.rm_dir(bad)
    with pytest.raises(BadPathError):
        ft.rm_file(bad)
    with pytest.raises(BadPathError):
        ft.stat(bad)
    assert ft.contains_dir(bad) is False
    assert ft.get_file_contents(bad) is None


def test_insert_dir_then_contains(ft):
    ft.insert_dir("/a")
    ft.insert_dir("/a/b")
    assert ft.contains_dir("/a/b")
    assert not ft.contains_file("/a/b")
    assert ft.count == 2


def test_insert_file_then_contains(ft):
    ft.insert_dir("/a")
    ft.insert_file("/a/f", b"abc")
    assert ft.contains_file("/a/f")
    assert not ft.contains_dir("/a/f")
    assert ft.get_file_contents("/a/f") == b"abc"
    assert ft.count == 2


def test_insert_file_without_contents_is_empty(ft):
    ft.insert_dir("/a")
    ft.insert_file("/a/f")
    ft.insert_file("/a/g", b"")
    assert ft.get_file_contents("/a/f") == b""
    assert ft.get_file_contents("/a/g") == b""


def test_insert_file_copies_caller_buffer(ft):
    ft.insert_dir("/a")
    data = bytearray(b"abc")
    ft.insert_file("/a/f", data)
    data[:] = b"zzz"
    assert ft.get_file_contents("/a/f") == b"abc"


def test_first_dir_must_be_depth_one(ft):
    with pytest.raises(ConflictingPathError):
        ft.insert_dir("/a/b")
    assert ft.count == 0 and ft.root is None


def test_second_root_conflicts(ft):
    ft.insert_dir("/a")
    with pytest.raises(ConflictingPathError):
        ft.insert_dir("/b")
    with pytest.raises(ConflictingPathError):
        ft.insert_dir("/b/c")
    with pytest.raises(ConflictingPathError):
        ft.insert_file("/b/c", b"")
    assert ft.count == 1


def test_file_cannot_be_root(ft):
    with pytest.raises(ConflictingPathError):
        ft.insert_file("/f", b"x")
    ft.insert_dir("/a")
    with pytest.raises(ConflictingPathError):
        ft.insert_file("/a", b"x")
    assert ft.count == 1


def test_file_into_empty_tree_materializes_root(ft):
    ft.insert_file("/a/f", b"hi")
    assert ft.contains_dir("/a")
    assert ft.contains_file("/a/f")
    assert ft.count == 2
    assert str(ft.root.path) == "/a"


def test_failed_file_insert_into_empty_tree_rolls_back_root(ft):
    with pytest.raises(NoSuchPathError):
        ft.insert_file("/a/b/f", b"hi")
    assert ft.root is None
    assert ft.count == 0


def test_missing_intermediate_directory(ft):
    ft.insert_dir("/a")
    with pytest.raises(NoSuchPathError):
        ft.insert_dir("/a/b/c")
    with pytest.raises(NoSuchPathError):
        ft.insert_file("/a/b/c", b"")
    assert ft.count == 1


def test_intermediate_file_is_not_a_directory(ft):
    ft.insert_dir("/a")
    ft.insert_file("/a/f", b"")
    with pytest.raises(NotADirectoryPathError):
        ft.insert_dir("/a/f/g")
    with pytest.raises(NotADirectoryPathError):
        ft.insert_file("/a/f/g/h", b"")
    assert ft.count == 2


@pytest.mark.parametrize("first,second", [
    ("dir", "dir"), ("dir", "file"), ("file", "dir"), ("file", "file"),
])
def test_duplicate_insert_is_rejected(ft, first, second):
    ft.insert_dir("/a")
    insert = {"dir": ft.insert_dir, "file": lambda p: ft.insert_file(p, b"1")}
    insert[first]("/a/x")
    before = ft.count
    with pytest.raises(AlreadyInTreeError):
        insert[second]("/a/x")
    assert ft.count == before


def test_duplicate_root_dir(ft):
    ft.insert_dir("/a")
    with pytest.raises(AlreadyInTreeError):
        ft.insert_dir("/a")
    assert ft.count == 1


def test_insert_accepts_path_objects(ft):
    from filetree import Path

    ft.insert_dir(Path.parse("/a"))
    assert ft.contains_dir(Path.parse("/a"))


def test_children_inserted_in_sorted_order(ft):
    ft.insert_dir("/a")
    for name in ["q", "c", "x", "b"]:
        ft.insert_dir(f"/a/{name}")
    assert [str(c.path) for c in ft.root.children()] == ["/a/b", "/a/c", "/a/q", "/a/x"]


def test_memory_error_while_storing_contents_rolls_back(ft, monkeypatch):
    def boom(value):
        raise MemoryError

    monkeypatch.setattr(node_module, "_copy_buffer", boom)
    with pytest.raises(TreeMemoryError):
        ft.insert_file("/a/f", b"data")
    assert ft.root is None
    assert ft.count == 0

    monkeypatch.undo()
    ft.insert_dir("/a")
    monkeypatch.setattr(node_module, "_copy_buffer", boom)
    with pytest.raises(TreeMemoryError):
        ft.insert_file("/a/f", b"data")
    assert ft.count == 1
    assert not ft.contains_file("/a/f")


# ---------------------------------------------------------------------------
# removal


def test_remove_leaf_dir_restores_count(ft):
    ft.insert_dir("/a")
    before = ft.count
    ft.insert_dir("/a/b")
    ft.rm_dir("/a/b")
    assert ft.count == before
    assert not ft.contains_dir("/a/b")


def test_remove_dir_removes_subtree(ft):
    ft.insert_dir("/a")
    ft.insert_dir("/a/b")
    ft.insert_file("/a/b/c", b"data")
    ft.rm_dir("/a")
    assert not ft.contains_dir("/a")
    assert not ft.contains_dir("/a/b")
    assert not ft.contains_file("/a/b/c")
    assert ft.count == 0
    assert ft.root is None


def test_remove_inner_dir_keeps_siblings(populated):
    populated.rm_dir("/a/b")
    assert populated.count == 2
    assert populated.contains_file("/a/f")
    assert not populated.contains_file("/a/b/c")


def test_remove_file(populated):
    populated.rm_file("/a/b/c")
    assert populated.count == 3
    assert not populated.contains_file("/a/b/c")
    assert populated.contains_dir("/a/b")


def test_remove_errors(populated):
    with pytest.raises(NoSuchPathError):
        populated.rm_dir("/a/zz")
    with pytest.raises(NoSuchPathError):
        populated.rm_file("/a/zz")
    with pytest.raises(NotADirectoryPathError):
        populated.rm_dir("/a/f")
    with pytest.raises(NotAFilePathError):
        populated.rm_file("/a/b")
    with pytest.raises(ConflictingPathError):
        populated.rm_file("/a")
    with pytest.raises(ConflictingPathError):
        populated.rm_dir("/b")
    with pytest.raises(NotADirectoryPathError):
        populated.rm_file("/a/f/g")
    assert populated.count == 4


def test_remove_from_empty_tree(ft):
    with pytest.raises(NoSuchPathError):
        ft.rm_dir("/a")
    with pytest.raises(NoSuchPathError):
        ft.rm_file("/a/b")


# ---------------------------------------------------------------------------
# contents and stat


def test_replace_returns_previous_contents(ft):
    ft.insert_dir("/a")
    ft.insert_file("/a/f", b"x")
    old = ft.replace_file_contents("/a/f", b"yy")
    assert old == b"x"
    assert ft.get_file_contents("/a/f") == b"yy"
    assert ft.replace_file_contents("/a/f", None) == b"yy"
    assert ft.get_file_contents("/a/f") == b""


def test_replace_failures_return_none(populated):
    assert populated.replace_file_contents("/a/b", b"z") is None
    assert populated.replace_file_contents("/a/missing", b"z") is None
    assert populated.replace_file_contents("/other/f", b"z") is None


def test_replace_with_text_returns_none(populated):
    assert populated.replace_file_contents("/a/f", "yy") is None
    assert populated.get_file_contents("/a/f") == b"x"


def test_replace_keeps_contents_on_memory_error(populated, monkeypatch):
    def boom(value):
        raise MemoryError

    monkeypatch.setattr(node_module, "_copy_buffer", boom)
    assert populated.replace_file_contents("/a/f", b"new") is None
    monkeypatch.undo()
    assert populated.get_file_contents("/a/f") == b"x"


def test_get_contents_of_directory_is_none(populated):
    assert populated.get_file_contents("/a/b") is None


def test_stat_file_and_dir(ft):
    ft.insert_dir("/a")
    ft.insert_file("/a/f", b"12345")
    assert ft.stat("/a/f") == StatResult(is_file=True, size=5)
    assert ft.stat("/a") == StatResult(is_file=False, size=None)
    assert ft.stat("/a").is_file is False


def test_stat_errors(ft):
    with pytest.raises(NoSuchPathError):
        ft.stat("/a")
    ft.insert_dir("/a")
    ft.insert_file("/a/f", b"")
    with pytest.raises(ConflictingPathError):
        ft.stat("/b")
    with pytest.raises(ConflictingPathError):
        ft.stat("/b/a")
    with pytest.raises(NoSuchPathError):
        ft.stat("/a/missing")
    with pytest.raises(NoSuchPathError):
        ft.stat("/a/missing/deeper")
    with pytest.raises(NoSuchPathError):
        ft.stat("/a/f/under-a-file")


def test_contains_through_a_file_is_false(populated):
    assert populated.contains_file("/a/f/x") is False
    assert populated.contains_dir("/a/f/x") is False


# ---------------------------------------------------------------------------
# rendering


def test_to_string_empty_tree(ft):
    assert ft.to_string() is None
    assert str(ft) == ""


def test_to_string_files_before_dirs(ft):
    ft.insert_dir("/a")
    ft.insert_dir("/a/z")
    ft.insert_file("/a/y", b"")
    out = ft.to_string()
    assert out.index("/a/y [file]") < out.index("/a/z [dir]")


def test_to_string_full_layout(ft):
    ft.insert_dir("/r")
    ft.insert_dir("/r/d2")
    ft.insert_dir("/r/d1")
    ft.insert_file("/r/d2/z", b"")
    ft.insert_file("/r/b", b"")
    ft.insert_dir("/r/d1/inner")
    ft.insert_file("/r/d1/a", b"")
    ft.insert_file("/r/zz", b"")
    assert ft.to_string() == (
        "/r [dir]\n"
        "/r/b [file]\n"
        "/r/zz [file]\n"
        "/r/d1 [dir]\n"
        "/r/d1/a [file]\n"
        "/r/d1/inner [dir]\n"
        "/r/d2 [dir]\n"
        "/r/d2/z [file]\n"
    )


# ---------------------------------------------------------------------------
# invariants across a sequence of operations


def test_checker_holds_after_every_operation(ft):
    steps = [
        lambda: ft.insert_dir("/root"),
        lambda: ft.insert_dir("/root/a"),
        lambda: ft.insert_file("/root/a/1", b"one"),
        lambda: ft.insert_file("/root/a/2", b"two"),
        lambda: ft.insert_dir("/root/b"),
        lambda: ft.insert_dir("/root/b/c"),
        lambda: ft.replace_file_contents("/root/a/1", b"uno"),
        lambda: ft.rm_file("/root/a/2"),
        lambda: ft.rm_dir("/root/b"),
        lambda: ft.insert_file("/root/b", b"now a file"),
    ]
    for step in steps:
        step()
        assert check_tree(ft)
    assert ft.count == 4
    assert len(ft) == 4


def test_failed_operations_leave_tree_valid(populated):
    failing = [
        lambda: populated.insert_dir("/a/b"),
        lambda: populated.insert_dir("/a/zz/y"),
        lambda: populated.insert_file("/a/f/g", b""),
        lambda: populated.rm_dir("/a/f"),
        lambda: populated.rm_file("/nope/x"),
    ]
    for call in failing:
        with pytest.raises(Exception):
            call()
        assert check_tree(populated)
        assert populated.count == 4

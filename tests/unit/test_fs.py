from __future__ import annotations

from pathlib import Path

import pytest

from common.base.fs import human_size, tree_size


@pytest.mark.parametrize(
    "size, expected",
    [
        (0, "0.0 B"),
        (1023, "1023.0 B"),
        (1024, "1.0 KB"),
        (1536, "1.5 KB"),
        (5 * 1024 ** 2, "5.0 MB"),
        (3 * 1024 ** 4, "3.0 TB"),
        (2 * 1024 ** 5, "2.0 PB"),
    ],
)
def test_human_size(size: int, expected: str) -> None:
    assert human_size(size) == expected


def test_tree_size(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_bytes(b"x" * 10)
    nested = tmp_path / "sub" / "deeper"
    nested.mkdir(parents=True)
    (nested / "b.bin").write_bytes(b"y" * 32)

    assert tree_size(tmp_path) == 42
    assert tree_size(tmp_path / "a.txt") == 10
    assert tree_size(tmp_path / "sub") == 32
    assert tree_size(tmp_path / "missing") == 0

from __future__ import annotations

from pathlib import Path

import pytest

from diff_patterns.security import PathBlockedError, resolve_root_path


def test_symlink_escape_is_blocked(tmp_path: Path) -> None:
    outside = tmp_path.parent / "outside-target"
    outside.mkdir(exist_ok=True)
    (outside / "leak.diff").write_text("secret", encoding="utf-8")
    (tmp_path / "link").symlink_to(outside, target_is_directory=True)

    with pytest.raises(PathBlockedError) as error:
        resolve_root_path(root=tmp_path, candidate="link/leak.diff")

    assert error.value.reason == "Path is outside the configured root."

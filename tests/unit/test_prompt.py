import io

import pytest

from iron_bin.services.prompt import confirm


@pytest.mark.parametrize(
    ("answer", "expected"),
    [("y\n", True), ("Yes\n", True), ("n\n", False), ("\n", False), ("", False)],
)
def test_confirm(answer: str, expected: bool) -> None:
    stderr = io.StringIO()
    assert confirm("empty trash?", stdin=io.StringIO(answer), stderr=stderr) is expected
    assert stderr.getvalue() == "empty trash? [y/N] "

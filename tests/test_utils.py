import pytest

from mediavault.errors import InvalidFilename
from mediavault.utils import ensure_safe_filename, is_safe_filename


@pytest.mark.parametrize("name", ["../../etc/passwd", "a/b.mp4", "a\\b.mp4", "..", "clip..mp4", ""])
def test_unsafe_names_are_rejected(name):
    assert not is_safe_filename(name)
    with pytest.raises(InvalidFilename):
        ensure_safe_filename(name)


def test_stored_name_is_accepted():
    assert ensure_safe_filename("1700000000000-clip.mp4") == "1700000000000-clip.mp4"

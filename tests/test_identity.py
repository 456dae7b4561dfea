from datetime import datetime, timezone

from mediavault import identity
from mediavault.identity import MillisClock, decode, display_name_from_upload, encode


def test_encode_uses_millisecond_prefix():
    assert encode("clip.mp4", 1700000000000) == "1700000000000-clip.mp4"
    when = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
    assert encode("clip.mp4", when) == "1700000000000-clip.mp4"


def test_decode_strips_only_the_timestamp():
    assert decode("1700000000000-clip.mp4") == "clip.mp4"
    assert decode("1700000000000-2024-trip.mp4") == "2024-trip.mp4"
    assert decode("clip.mp4") == "clip.mp4"
    assert decode("abc-clip.mp4") == "abc-clip.mp4"


def test_display_name_keeps_last_path_component():
    assert display_name_from_upload("clip.mp4") == "clip.mp4"
    assert display_name_from_upload("C:\\fakepath\\clip.mp4") == "clip.mp4"
    assert display_name_from_upload("some/dir/clip.mp4") == "clip.mp4"
    assert display_name_from_upload(None) == ""


def test_clock_never_repeats_within_a_millisecond():
    clock = MillisClock(source=lambda: 1700000000.0)
    values = [clock.next() for _ in range(5)]
    assert values == [1700000000000 + i for i in range(5)]


def test_clock_does_not_go_backwards():
    ticks = iter([1700000000.5, 1700000000.0])
    clock = MillisClock(source=lambda: next(ticks))
    first = clock.next()
    assert clock.next() == first + 1


def test_sequential_names_are_distinct():
    a = identity.next_stored_name("clip.mp4")
    b = identity.next_stored_name("clip.mp4")
    assert a != b
    assert decode(a) == decode(b) == "clip.mp4"

import pytest

from resumelink.services.short_id import ALPHABET, generate_short_id


def test_default_length_and_alphabet():
    sid = generate_short_id()
    assert len(sid) == 10
    assert set(sid) <= set(ALPHABET)


def test_alphabet_is_url_safe():
    assert len(ALPHABET) == 64
    assert "/" not in ALPHABET and "?" not in ALPHABET


def test_custom_length():
    assert len(generate_short_id(21)) == 21


def test_ids_do_not_repeat():
    assert len({generate_short_id() for _ in range(500)}) == 500


@pytest.mark.parametrize("length", [0, -3])
def test_rejects_non_positive_length(length):
    with pytest.raises(ValueError):
        generate_short_id(length)

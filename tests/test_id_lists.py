"""Tests for newline separated user id lists."""
from localvoicemod.moderation.id_lists import add_id, format_id_list, parse_id_list, remove_id

ID_A = 123456789012345678
ID_B = 223456789012345678


def test_parse_filters_invalid_entries_silently():
    text = f"{ID_A}\nnot-an-id\n12345\n  {ID_B}  \n\n"
    assert parse_id_list(text) == [ID_A, ID_B]


def test_parse_handles_crlf_and_duplicates():
    text = f"{ID_B}\r\n{ID_A}\r\n{ID_B}"
    assert parse_id_list(text) == [ID_B, ID_A]


def test_parse_empty():
    assert parse_id_list("") == []
    assert parse_id_list(None) == []


def test_add_twice_keeps_one_entry():
    text, added = add_id("", ID_A)
    assert added
    text, added = add_id(text, ID_A)
    assert not added
    assert parse_id_list(text) == [ID_A]
    assert text == str(ID_A)


def test_add_rejects_malformed_id():
    text, added = add_id(str(ID_A), 42)
    assert not added
    assert parse_id_list(text) == [ID_A]


def test_remove():
    text = format_id_list([ID_A, ID_B])
    text, removed = remove_id(text, ID_A)
    assert removed
    assert parse_id_list(text) == [ID_B]
    text, removed = remove_id(text, ID_A)
    assert not removed

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from rolestrategy.api.encoding import encode_bool, encode_form, join_names, set_optional


def test_encode_bool_uses_literal_words():
    assert encode_bool(True) == "true"
    assert encode_bool(False) == "false"


def test_join_names_uses_bare_comma():
    assert join_names(["dev", "qa", "ops"]) == "dev,qa,ops"
    assert join_names(("only",)) == "only"
    assert join_names([]) == ""


def test_join_names_keeps_prejoined_string():
    assert join_names("a,b") == "a,b"


def test_join_names_does_not_escape_embedded_commas():
    # "a,b" and "c" become indistinguishable from three names.
    assert join_names(["a,b", "c"]) == "a,b,c"


def test_set_optional_omits_empty_values():
    params = {}

    set_optional(params, "pattern", "")
    set_optional(params, "template", None)
    set_optional(params, "other", "value")

    assert params == {"other": "value"}


def test_encode_form_keeps_insertion_order_and_escapes():
    body = encode_form({"type": "projectRoles", "pattern": "team-a/.*", "roleName": "a b"})

    assert body == "type=projectRoles&pattern=team-a%2F.%2A&roleName=a+b"

from scopelog import FormattedState
from scopelog.state import ORIGINAL_FORMAT_KEY, is_structured


def test_renders_template():
    state = FormattedState("Log in scope, {step}", 2)
    assert str(state) == "Log in scope, 2"


def test_items_in_order_with_original_format():
    state = FormattedState("{a} then {b}", 1, "two")
    assert list(state.items()) == [("a", 1), ("b", "two"), (ORIGINAL_FORMAT_KEY, "{a} then {b}")]


def test_no_args_keeps_template_verbatim():
    state = FormattedState("literal {{x}}")
    assert str(state) == "literal {{x}}"
    assert dict(state) == {ORIGINAL_FORMAT_KEY: "literal {{x}}"}


def test_escaped_braces_with_args():
    assert str(FormattedState("{{id}} = {id}", 5)) == "{id} = 5"


def test_none_renders_as_null():
    assert str(FormattedState("value: {v}", None)) == "value: (null)"


def test_format_spec():
    assert str(FormattedState("took {elapsed:.2f}s", 1.5)) == "took 1.50s"
    assert str(FormattedState("bad {x:.2f}", "text")) == "bad text"


def test_missing_values_keep_hole():
    state = FormattedState("{a} and {b}", 1)
    assert str(state) == "1 and {b}"
    assert "b" not in state


def test_is_structured():
    assert is_structured(FormattedState("x"))
    assert is_structured({"a": 1})
    assert not is_structured("text")
    assert not is_structured([("a", 1)])

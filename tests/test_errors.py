from stormrank.errors import DataLoadError, ParseError, SchemaError, StormRankError


def test_error_codes_and_hints():
    for cls in (DataLoadError, ParseError, SchemaError):
        assert issubclass(cls, StormRankError)
        assert cls.code.startswith("E-")
        assert cls.title
        assert cls.hint


def test_parse_error_is_value_error():
    assert issubclass(ParseError, ValueError)


def test_error_message_names_row_and_column():
    err = ParseError("Invalid value 'x'", stage="select", row=12, column="INJURIES")
    assert str(err) == "Invalid value 'x' (row 12, column INJURIES)"
    assert err.stage == "select"
    assert str(SchemaError("Missing required columns: ['EVTYPE']", stage="select")) == (
        "Missing required columns: ['EVTYPE']"
    )

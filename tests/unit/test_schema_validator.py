from dropmetrics.ingestion.schema_validator import ColumnMap, normalize_header, resolve_columns


def test_resolve_columns_case_and_whitespace_insensitive():
    headers = ["Date", " sell price ", "BUY  PRICE", "Profit", "roi", "ITEM"]
    columns = resolve_columns(headers)
    assert columns == ColumnMap(
        sell_price=" sell price ",
        buy_price="BUY  PRICE",
        profit="Profit",
        roi="roi",
        date="Date",
    )
    assert columns.is_usable
    assert columns.missing_required() == []


def test_optional_columns_may_be_absent():
    columns = resolve_columns(["SELL PRICE", "BUY PRICE", "PROFIT"])
    assert columns.is_usable
    assert columns.roi is None and columns.date is None


def test_missing_required_reported():
    columns = resolve_columns(["SELL PRICE", "BUY PRICE", "ROI", "DATE"])
    assert not columns.is_usable
    assert columns.missing_required() == ["PROFIT"]
    assert resolve_columns([]).missing_required() == ["SELL PRICE", "BUY PRICE", "PROFIT"]


def test_first_duplicate_header_wins():
    columns = resolve_columns(["PROFIT", "profit", "SELL PRICE", "BUY PRICE"])
    assert columns.profit == "PROFIT"


def test_normalize_header():
    assert normalize_header("  sell \t price ") == "SELL PRICE"
    assert resolve_columns(["SELL PRICE"]).as_dict()["sell_price"] == "SELL PRICE"

from pathlib import Path

import pytest

from zonemap.common.errors import StageError
from zonemap.common.models import PostcodeRecord
from zonemap.pipeline.codepoint import read_postcode_source


def _write_source(tmp_path: Path, lines: list[str]) -> Path:
    path = tmp_path / "codepoint.csv"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_read_uses_positional_columns_and_prefix(tmp_path: Path):
    path = _write_source(
        tmp_path,
        [
            '"LA3 2FW",10,343000,460000,"E92000001"',
            '"LA4 1AA",10,343000,460000,"E92000001"',
            '"LA3 1AB",10,343000,460000,"E92000001"',
        ],
    )

    result = read_postcode_source(path, "la3 2")

    assert result.records == [PostcodeRecord(postcode="LA3 2FW", easting=343000.0, northing=460000.0)]
    assert result.stats.outside_prefix == 2


def test_read_tolerates_ragged_and_badly_quoted_rows(tmp_path: Path):
    path = _write_source(
        tmp_path,
        [
            '"LA3 2FW",10,343000,460000,"E92000001","E19000001","E18000002"',
            "la32fx,10,nan,460000",
            '"LA3 2FY",10,,460000',
            "LA4 1AA,10,343000,460000",
            "LA32AB,10",
            '"LA3 2AC,10,343100,460100',
            "",
            'LA3 2AD,10,3431"00,460200',
            ",10,1,2",
            "  LA3 2FZ  , 10 , 343200 , 460300 ",
            '"LA3 2GA", 10, "343300", "460400"',
        ],
    )

    result = read_postcode_source(path, "LA32")

    assert [record.postcode for record in result.records] == ["LA3 2FW", "LA3 2AC", "LA3 2FZ", "LA3 2GA"]
    assert result.records[2] == PostcodeRecord(postcode="LA3 2FZ", easting=343200.0, northing=460300.0)
    stats = result.stats
    assert stats.rows_read == 10
    assert stats.malformed_rows == 2
    assert stats.outside_prefix == 1
    assert stats.invalid_coordinates == 3
    assert stats.rows_kept == 4
    assert stats.dropped == 5


def test_read_rejects_infinite_coordinates(tmp_path: Path):
    path = _write_source(tmp_path, ["LA3 2FW,10,inf,460000", "LA3 2FX,10,343000,-Infinity"])

    result = read_postcode_source(path, "LA32")

    assert result.records == []
    assert result.stats.invalid_coordinates == 2


def test_read_conserves_row_counts_for_prefix(tmp_path: Path):
    lines = [f"LA3 2{chr(65 + i)}A,10,{343000 + i},460000" for i in range(10)]
    lines += ["LA3 2ZZ,10,x,460000", "PR1 1AA,10,350000,430000"]
    path = _write_source(tmp_path, lines)

    result = read_postcode_source(path, "LA32")

    matching_prefix = 11
    assert len(result.records) == matching_prefix - result.stats.invalid_coordinates
    assert all(record.postcode.replace(" ", "").startswith("LA32") for record in result.records)


def test_read_missing_source_is_stage_error(tmp_path: Path):
    with pytest.raises(StageError):
        read_postcode_source(tmp_path / "nope.csv", "LA32")


def test_read_unquotes_fields_after_separator_space(tmp_path: Path):
    path = _write_source(tmp_path, ['"LA3 2FW", 10, "343000", "460000"'])

    result = read_postcode_source(path, "LA32")

    assert result.records == [PostcodeRecord(postcode="LA3 2FW", easting=343000.0, northing=460000.0)]
    assert result.stats.invalid_coordinates == 0


def test_read_rejects_underscore_digit_groups_but_accepts_exponents(tmp_path: Path):
    path = _write_source(tmp_path, ["LA3 2FW,10,343_000,460000", "LA3 2FX,10,3.43e5,4.6e5"])

    result = read_postcode_source(path, "LA32")

    assert result.records == [PostcodeRecord(postcode="LA3 2FX", easting=343000.0, northing=460000.0)]
    assert result.stats.invalid_coordinates == 1


def test_read_directory_source_is_stage_error(tmp_path: Path):
    with pytest.raises(StageError):
        read_postcode_source(tmp_path, "LA32")

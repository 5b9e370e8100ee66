"""Tests for reading SWAT+ text outputs."""

import pandas as pd
import pytest

from pyswatplus.core.exceptions import ModelOutputError
from pyswatplus.models.swatplus.output_definition import define_output, format_output_definitions
from pyswatplus.models.swatplus.output_reader import (
    build_dates,
    extract_variables,
    output_file_name,
    read_output_table,
)

pytestmark = [pytest.mark.unit, pytest.mark.quick]

DAILY_ROWS = [
    (1, 1, 1, 2003, 1, 1, 'cha001', 1.5),
    (1, 1, 1, 2003, 2, 2, 'cha002', 2.5),
    (2, 1, 2, 2003, 1, 1, 'cha001', 1.7),
    (2, 1, 2, 2003, 2, 2, 'cha002', 2.7),
]


@pytest.fixture
def daily_output(tmp_path, write_output_file):
    write_output_file(tmp_path / 'channel_sd_day.txt', DAILY_ROWS)
    return tmp_path


@pytest.mark.parametrize("interval, name", [
    ('d', 'channel_sd_day.txt'),
    ('m', 'channel_sd_mon.txt'),
    ('y', 'channel_sd_yr.txt'),
    ('a', 'channel_sd_aa.txt'),
])
def test_output_file_name(interval, name):
    assert output_file_name('channel_sd', interval) == name


class TestReadOutputTable:

    def test_header_and_units_line_skipped(self, daily_output):
        table = read_output_table(daily_output / 'channel_sd_day.txt')
        assert list(table.columns) == ['jday', 'mon', 'day', 'yr', 'unit', 'gis_id', 'name', 'flo_out']
        assert len(table) == 4
        assert table['flo_out'].iloc[1] == pytest.approx(2.5)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ModelOutputError, match="not found"):
            read_output_table(tmp_path / 'channel_sd_day.txt')


class TestBuildDates:

    def test_daily(self):
        table = pd.DataFrame({'jday': [1, 60], 'mon': [1, 2], 'yr': [2004, 2004]})
        assert build_dates(table, 'd').tolist() == [pd.Timestamp('2004-01-01'), pd.Timestamp('2004-02-29')]

    def test_monthly(self):
        table = pd.DataFrame({'jday': [31, 59], 'mon': [1, 2], 'yr': [2003, 2003]})
        assert build_dates(table, 'm').tolist() == [pd.Timestamp('2003-01-01'), pd.Timestamp('2003-02-01')]

    def test_yearly(self):
        table = pd.DataFrame({'jday': [365], 'mon': [12], 'yr': [2003]})
        assert build_dates(table, 'y').tolist() == [pd.Timestamp('2003-01-01')]

    def test_no_year_column(self):
        with pytest.raises(ModelOutputError):
            build_dates(pd.DataFrame({'jday': [1]}), 'd')


class TestExtractVariables:

    def test_units_are_split(self, daily_output):
        table = format_output_definitions({'q': define_output('channel_sd', 'flo_out', '1:2')})
        result = extract_variables(daily_output, table, 'd')

        assert set(result) == {'q_1', 'q_2'}
        assert result['q_2']['value'].tolist() == [2.5, 2.7]
        assert result['q_1']['date'].tolist() == [pd.Timestamp('2003-01-01'), pd.Timestamp('2003-01-02')]

    def test_without_date(self, daily_output):
        table = format_output_definitions({'q': define_output('channel_sd', 'flo_out', 1)})
        result = extract_variables(daily_output, table, 'd', add_date=False)
        assert list(result['q'].columns) == ['value']

    def test_missing_variable(self, daily_output):
        table = format_output_definitions({'q': define_output('channel_sd', 'sed_out', 1)})
        with pytest.raises(ModelOutputError, match="sed_out"):
            extract_variables(daily_output, table, 'd')

    def test_missing_unit(self, daily_output):
        table = format_output_definitions({'q': define_output('channel_sd', 'flo_out', 9)})
        with pytest.raises(ModelOutputError, match="Unit 9"):
            extract_variables(daily_output, table, 'd')

    def test_missing_file_for_interval(self, daily_output):
        table = format_output_definitions({'q': define_output('channel_sd', 'flo_out', 1)})
        with pytest.raises(ModelOutputError, match="channel_sd_mon.txt"):
            extract_variables(daily_output, table, 'm')

    def test_table_without_unit_column(self, tmp_path, write_output_file):
        write_output_file(tmp_path / 'basin_wb_day.txt', [(1, 1, 1, 2003, 0.2)],
                          header=('jday', 'mon', 'day', 'yr', 'precip'))
        table = format_output_definitions({'p': define_output('basin_wb', 'precip', 1)})
        with pytest.raises(ModelOutputError, match="'unit' column"):
            extract_variables(tmp_path, table, 'd')

"""Tests for output definitions."""

import numpy as np
import pytest

from pyswatplus.core.exceptions import OutputDefinitionError
from pyswatplus.models.swatplus.output_definition import (
    OUTPUT_TABLE_COLUMNS,
    OutputDefinition,
    define_output,
    format_output_definitions,
)

pytestmark = [pytest.mark.unit, pytest.mark.quick]


class TestDefineOutput:

    def test_single_unit(self):
        assert define_output('channel_sd', 'flo_out', 1) == OutputDefinition('channel_sd', 'flo_out', (1,))

    def test_unit_range(self):
        assert define_output('hru_wb', 'et', '1:3,7').unit == (1, 2, 3, 7)

    @pytest.mark.parametrize("file", ['channel_sd_day.txt', 'channel_sd_mon', 'channel_sd.txt'])
    def test_interval_suffix_removed(self, file):
        assert define_output(file, 'flo_out').file == 'channel_sd'

    def test_empty_variable(self):
        with pytest.raises(OutputDefinitionError, match="variable"):
            define_output('channel_sd', ' ')

    def test_empty_file(self):
        with pytest.raises(OutputDefinitionError, match="file"):
            define_output('', 'flo_out')

    def test_duplicated_units(self):
        with pytest.raises(OutputDefinitionError, match="Duplicated"):
            define_output('hru_wb', 'et', [1, 2, 2])

    def test_duplicated_units_in_range_text(self):
        with pytest.raises(OutputDefinitionError, match="Duplicated"):
            define_output('hru_wb', 'et', '1:3,3')

    @pytest.mark.parametrize("unit", [np.int64(3), 3.0, [np.int32(3)]])
    def test_numeric_unit_types(self, unit):
        assert define_output('channel_sd', 'flo_out', unit).unit == (3,)

    def test_non_iterable_unit(self):
        with pytest.raises(OutputDefinitionError, match="Invalid units"):
            define_output('channel_sd', 'flo_out', None)

    def test_non_positive_unit(self):
        with pytest.raises(OutputDefinitionError, match="positive"):
            define_output('hru_wb', 'et', 0)

    def test_invalid_unit_text(self):
        with pytest.raises(OutputDefinitionError, match="Invalid units"):
            define_output('hru_wb', 'et', 'a:b')


class TestFormatOutputDefinitions:

    def test_single_definition_labelled_by_variable(self):
        table = format_output_definitions(define_output('channel_sd', 'flo_out', 1))
        assert list(table.columns) == OUTPUT_TABLE_COLUMNS
        assert table['name'].tolist() == ['flo_out']

    def test_multi_unit_names(self):
        table = format_output_definitions({
            'q_sim': define_output('channel_sd', 'flo_out', 1),
            'et': define_output('hru_wb', 'et', '1:3'),
        })
        assert table['name'].tolist() == ['q_sim', 'et_1', 'et_2', 'et_3']
        assert table.loc[table['label'] == 'et', 'unit'].tolist() == [1, 2, 3]

    def test_empty_mapping(self):
        with pytest.raises(OutputDefinitionError, match="At least one"):
            format_output_definitions({})

    def test_raw_dict_rejected(self):
        with pytest.raises(OutputDefinitionError, match="define_output"):
            format_output_definitions({'q': {'file': 'channel_sd', 'variable': 'flo_out'}})

    def test_clashing_names(self):
        with pytest.raises(OutputDefinitionError, match="unique"):
            format_output_definitions({
                'et': define_output('hru_wb', 'et', '1:2'),
                'et_1': define_output('basin_wb', 'et', 1),
            })

"""Tests for parameter table parsing."""

import pandas as pd
import pytest

from pyswatplus.core.exceptions import ParameterDefinitionError
from pyswatplus.models.swatplus.parameters import (
    DEFINITION_COLUMNS,
    check_parameters_exist,
    format_parameters,
    parse_parameter_name,
    read_cal_parms,
)

pytestmark = [pytest.mark.unit, pytest.mark.quick]


class TestParseParameterName:

    def test_minimal(self):
        definition = parse_parameter_name('cn2.hru | change = abschg')
        assert definition['par_name'] == 'cn2'
        assert definition['parameter'] == 'cn2'
        assert definition['file_name'] == 'hru'
        assert definition['change'] == 'abschg'
        assert definition['unit'] is None
        assert definition['conditions'] == []

    def test_custom_name(self):
        definition = parse_parameter_name('cn2_forest::cn2.hru | change = pctchg')
        assert definition['par_name'] == 'cn2_forest'
        assert definition['parameter'] == 'cn2'

    def test_units_and_ranges(self):
        definition = parse_parameter_name(
            'k.sol | change = relchg | unit = c(1:3, 8) | lyr = 1:2 | year = 2003:2005 | day = 90'
        )
        assert definition['unit'] == (1, 2, 3, 8)
        assert definition['lyr'] == (1, 2)
        assert definition['year'] == (2003, 2005)
        assert definition['day'] == (90, 90)

    def test_string_conditions(self):
        definition = parse_parameter_name("cn2.hru | change = abschg | hsg = 'A', 'B'")
        assert definition['conditions'] == [('hsg', '=', 0.0, 'A'), ('hsg', '=', 0.0, 'B')]

    def test_numeric_conditions(self):
        definition = parse_parameter_name('cn2.hru | change = abschg | slope = >0.05, <= 0.2')
        assert definition['conditions'] == [('slope', '>', 0.05, 'null'), ('slope', '<=', 0.2, 'null')]

    def test_change_type_is_case_insensitive(self):
        assert parse_parameter_name('esco.hru | change = AbsVal')['change'] == 'absval'

    @pytest.mark.parametrize("name, message", [
        ('cn2 | change = abschg', 'parameter.object'),
        ('cn2.hru', 'No change type'),
        ('cn2.hru | change = scale', 'must be one of'),
        ('cn2.hru | change = abschg | soil = A', 'Unknown condition'),
        ('cn2.hru | change = abschg | unit', "key = value"),
        ('cn2.hru | change = abschg | lyr = 3:1', 'ends before'),
        ('cn2.hru | change = abschg | lyr = 1,2', 'single value'),
        ('cn2.hru | change = abschg | slope = steep', 'operator'),
    ])
    def test_invalid_definitions(self, name, message):
        with pytest.raises(ParameterDefinitionError, match=message):
            parse_parameter_name(name)


class TestFormatParameters:

    def test_none_gives_empty_set(self):
        parameter_set = format_parameters(None)
        assert parameter_set.is_empty
        assert parameter_set.n_runs == 0
        assert list(parameter_set.definition.columns) == DEFINITION_COLUMNS

    def test_mapping(self):
        parameter_set = format_parameters({
            'cn2.hru | change = abschg': [-5, 0, 5],
            'esco.hru | change = absval': [0.1, 0.5, 0.9],
        })
        assert parameter_set.n_runs == 3
        assert list(parameter_set.values.columns) == ['cn2', 'esco']
        assert list(parameter_set.values.index) == [1, 2, 3]
        assert parameter_set.values.index.name == 'run'

    def test_scalars_are_broadcast(self):
        parameter_set = format_parameters({
            'cn2.hru | change = abschg': [-5, 5],
            'surlag.bsn | change = absval': 2.0,
        })
        assert parameter_set.values['surlag'].tolist() == [2.0, 2.0]

    def test_dataframe(self):
        table = pd.DataFrame({'cn2.hru | change = abschg': [1.0, 2.0]}, index=[10, 20])
        parameter_set = format_parameters(table)
        assert list(parameter_set.values.index) == [1, 2]

    def test_unequal_lengths(self):
        with pytest.raises(ParameterDefinitionError, match="same number"):
            format_parameters({'cn2.hru | change = abschg': [1, 2], 'esco.hru | change = absval': [1, 2, 3]})

    def test_duplicated_names(self):
        with pytest.raises(ParameterDefinitionError, match="unique"):
            format_parameters({
                'cn2.hru | change = abschg | unit = 1': [1],
                'cn2.hru | change = abschg | unit = 2': [2],
            })

    def test_non_numeric_values(self):
        with pytest.raises(ParameterDefinitionError, match="numeric"):
            format_parameters({'cn2.hru | change = abschg': ['low', 'high']})

    def test_missing_values(self):
        with pytest.raises(ParameterDefinitionError, match="missing"):
            format_parameters({'cn2.hru | change = abschg': [1.0, None]})

    def test_subset_keeps_run_numbers(self):
        parameter_set = format_parameters({'cn2.hru | change = abschg': [-5, 0, 5]})
        subset = parameter_set.subset([1, 3])
        assert list(subset.values.index) == [1, 3]
        assert subset.values['cn2'].tolist() == [-5, 5]


class TestCalParms:

    def test_read_cal_parms(self, swat_project):
        catalogue = read_cal_parms(swat_project)
        assert ('cn2', 'hru') in set(zip(catalogue['parameter'], catalogue['file_name']))

    def test_missing_catalogue(self, tmp_path):
        assert read_cal_parms(tmp_path) is None

    def test_known_parameters_pass(self, swat_project):
        definition = format_parameters({'cn2.hru | change = abschg': [1]}).definition
        check_parameters_exist(definition, swat_project)

    def test_unknown_parameter(self, swat_project):
        definition = format_parameters({'cn2.sol | change = abschg': [1]}).definition
        with pytest.raises(ParameterDefinitionError, match="cn2.sol"):
            check_parameters_exist(definition, swat_project)

    def test_check_skipped_without_catalogue(self, tmp_path):
        definition = format_parameters({'anything.hru | change = abschg': [1]}).definition
        check_parameters_exist(definition, tmp_path)

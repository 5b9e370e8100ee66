"""Unit tests for the pySWATplus CLI argument parser."""

import argparse

import pytest

from pyswatplus.cli.argument_parser import CLIParser, positive_int
from pyswatplus.cli.commands import DemoCommands, PlotCommands, RunCommands

pytestmark = [pytest.mark.unit, pytest.mark.cli, pytest.mark.quick]


class TestParserInitialization:

    def test_parser_creation(self):
        parser = CLIParser()
        assert parser.parser is not None

    def test_command_required(self):
        with pytest.raises(SystemExit):
            CLIParser().parse_args([])

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            CLIParser().parse_args(['--version'])
        assert exc.value.code == 0
        assert 'pySWATplus' in capsys.readouterr().out


class TestGlobalOptions:

    def test_config_before_command(self):
        args = CLIParser().parse_args(['--config', 'run.yaml', 'run'])
        assert args.config == 'run.yaml'

    def test_config_after_command(self):
        args = CLIParser().parse_args(['run', '--config', 'run.yaml', '--debug'])
        assert args.config == 'run.yaml'
        assert args.debug is True

    def test_options_absent_by_default(self):
        args = CLIParser().parse_args(['scan', 'swat_run.nc'])
        assert not hasattr(args, 'config')
        assert not hasattr(args, 'debug')


class TestDemoCommand:

    def test_demo(self):
        args = CLIParser().parse_args(['demo', 'project', '--path', 'demo', '--version', '60.5.7'])
        assert args.dataset == 'project'
        assert args.path == 'demo'
        assert args.version == '60.5.7'
        assert args.func == DemoCommands.load

    def test_alias_accepted(self):
        assert CLIParser().parse_args(['demo', 'sub']).dataset == 'sub'

    def test_unknown_dataset(self):
        with pytest.raises(SystemExit):
            CLIParser().parse_args(['demo', 'weather'])


class TestRunCommands:

    def test_run(self):
        args = CLIParser().parse_args(['run', '--n-thread', '4', '--save-file', 'cn2.nc'])
        assert args.n_thread == 4
        assert args.save_file == 'cn2.nc'
        assert args.func == RunCommands.run

    def test_run_rejects_zero_threads(self):
        with pytest.raises(SystemExit):
            CLIParser().parse_args(['run', '--n-thread', '0'])

    def test_scan(self):
        args = CLIParser().parse_args(['scan', 'swat_run.nc'])
        assert args.file == 'swat_run.nc'
        assert args.func == RunCommands.scan


class TestPlotCommands:

    def test_timeseries(self):
        args = CLIParser().parse_args([
            'plot', 'timeseries', 'swat_run.nc', '--variable', 'q_sim',
            '--observation', 'obs.csv', '--run', '1', '3', '--output', 'q.html',
        ])
        assert args.plot_type == 'timeseries'
        assert args.run == [1, 3]
        assert args.func == PlotCommands.timeseries

    def test_timeseries_requires_variable(self):
        with pytest.raises(SystemExit):
            CLIParser().parse_args(['plot', 'timeseries', 'swat_run.nc', '--output', 'q.html'])

    def test_water_balance(self):
        args = CLIParser().parse_args([
            'plot', 'water-balance', 'swat_run.nc', '--components', 'et', 'perc', '--output', 'wb.png',
        ])
        assert args.components == ['et', 'perc']
        assert args.run is None
        assert args.func == PlotCommands.water_balance


class TestPositiveInt:

    def test_valid(self):
        assert positive_int('3') == 3

    def test_invalid(self):
        with pytest.raises(argparse.ArgumentTypeError):
            positive_int('0')

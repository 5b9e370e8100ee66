"""
Unit tests for the demo data loader.

Downloads are served by a mocked requests session.
"""

import io
import zipfile
from unittest.mock import MagicMock, patch

import pandas as pd
import pytest
import requests

from pyswatplus.core.config import build_config
from pyswatplus.core.exceptions import DataAcquisitionError, ValidationError
from pyswatplus.data.demo import DEMO_DATASETS, DemoDataLoader, load_demo

pytestmark = [pytest.mark.unit]


def _response(content: bytes, status: int = 200):
    response = MagicMock()
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    response.iter_content.return_value = [content]
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return response


def _project_zip() -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w') as zf:
        zf.writestr('txtinout/file.cio', 'file.cio: demo\n')
        zf.writestr('txtinout/time.sim', 'time.sim: demo\n')
    return buffer.getvalue()


@pytest.fixture
def demo_config(tmp_path):
    return build_config({
        'DEMO_DATA_URL': 'https://example.org/swatdata/',
        'DEMO_CACHE_DIR': str(tmp_path / 'cache'),
        'DEMO_RETRY_DELAY': 0,
        'DEMO_MAX_RETRIES': 2,
    })


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


class TestDownload:

    def test_url(self, demo_config, session):
        loader = DemoDataLoader(config=demo_config, session=session)
        assert loader.url_for('hru.zip', '60.5.7') == 'https://example.org/swatdata/swatplus_rev60.5.7/hru.zip'

    def test_download_cached(self, demo_config, session):
        session.get.return_value = _response(b'date,q\n')
        loader = DemoDataLoader(config=demo_config, session=session)

        first = loader.download('observation.csv', '60.5.7')
        second = loader.download('observation.csv', '60.5.7')

        assert first == second
        assert first.read_bytes() == b'date,q\n'
        assert session.get.call_count == 1
        assert not first.with_name('observation.csv.part').exists()

    def test_retries_then_succeeds(self, demo_config, session):
        session.get.side_effect = [requests.ConnectionError('reset'), _response(b'ok')]
        loader = DemoDataLoader(config=demo_config, session=session)
        with patch('pyswatplus.data.demo.time.sleep') as mock_sleep:
            target = loader.download('river.zip', '60.5.7')
        assert target.read_bytes() == b'ok'
        mock_sleep.assert_called_once_with(0)

    def test_gives_up_after_max_retries(self, demo_config, session):
        session.get.return_value = _response(b'', status=404)
        loader = DemoDataLoader(config=demo_config, session=session)
        with pytest.raises(DataAcquisitionError, match="after 2 attempts"):
            loader.download('hru.zip', '60.5.7')
        assert session.get.call_count == 2


class TestLoad:

    def test_project_extracted(self, demo_config, session, tmp_path):
        session.get.return_value = _response(_project_zip())
        project = DemoDataLoader(config=demo_config, session=session).load(
            'project', path=tmp_path / 'demo', version='60.5.7')

        assert project == tmp_path / 'demo' / 'swatplus_rev6057_demo' / 'txtinout'
        assert (project / 'file.cio').exists()

    def test_project_reused(self, demo_config, session, tmp_path):
        session.get.return_value = _response(_project_zip())
        loader = DemoDataLoader(config=demo_config, session=session)
        loader.load('project', path=tmp_path, version='60.5.7')
        loader.load('project', path=tmp_path, version='60.5.7')
        assert session.get.call_count == 1

    def test_corrupt_archive(self, demo_config, session, tmp_path):
        session.get.return_value = _response(b'not a zip file')
        loader = DemoDataLoader(config=demo_config, session=session)
        with pytest.raises(DataAcquisitionError, match="corrupt"):
            loader.load('project', path=tmp_path, version='60.5.7')

    def test_project_needs_path(self, demo_config, session):
        with pytest.raises(ValidationError, match="path"):
            DemoDataLoader(config=demo_config, session=session).load('project')

    def test_observation(self, demo_config, session):
        csv = b"date,flo_out\n2003-01-02,1.5\n2003-01-01,2.5\n"
        session.get.return_value = _response(csv)
        obs = DemoDataLoader(config=demo_config, session=session).load('obs')

        assert list(obs.columns) == ['date', 'discharge']
        assert obs['date'].iloc[0] == pd.Timestamp('2003-01-01')
        assert obs['discharge'].tolist() == [2.5, 1.5]

    def test_layer(self, demo_config, session):
        session.get.return_value = _response(b'zip bytes')
        loader = DemoDataLoader(config=demo_config, session=session)
        with patch('pyswatplus.data.demo.gpd.read_file', return_value='layer') as mock_read:
            assert loader.load('sub') == 'layer'
        assert mock_read.call_args[0][0].startswith('zip://')
        assert mock_read.call_args[0][0].endswith(DEMO_DATASETS['subbasin'])

    def test_unknown_dataset(self, demo_config, session):
        with pytest.raises(DataAcquisitionError, match="Unknown demo dataset"):
            DemoDataLoader(config=demo_config, session=session).load('weather')

    def test_default_config(self):
        loader = DemoDataLoader(session=MagicMock())
        assert loader.demo_config.max_retries == 3

    def test_load_demo_delegates(self, demo_config, tmp_path):
        with patch('pyswatplus.data.demo.DemoDataLoader') as mock_loader:
            mock_loader.return_value.load.return_value = tmp_path
            assert load_demo('project', path=tmp_path, config=demo_config) == tmp_path
        mock_loader.assert_called_once_with(config=demo_config)
        mock_loader.return_value.load.assert_called_once_with('project', path=tmp_path, version=None)

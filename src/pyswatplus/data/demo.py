# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Demo data for the SWAT+ example catchment.

The demo set consists of a SWAT+ project (TxtInOut), daily discharge
observations at the catchment outlet and the HRU, subbasin and river
vector layers of the project. Files are downloaded once from
``DEMO_DATA_URL`` into ``DEMO_CACHE_DIR/<version>/`` and reused from there.

Layout of the demo repository::

    <DEMO_DATA_URL>/swatplus_rev<version>/project.zip
                                         /observation.csv
                                         /hru.zip
                                         /subbasin.zip
                                         /river.zip
"""

import time
import zipfile
from pathlib import Path
from typing import Optional, Union

import geopandas as gpd
import pandas as pd
import requests

from pyswatplus.core.config.models import DemoConfig
from pyswatplus.core.constants import SWATplusFiles
from pyswatplus.core.exceptions import DataAcquisitionError, ValidationError
from pyswatplus.core.mixins import ConfigMixin, LoggingMixin

# dataset name -> file in the demo repository
DEMO_DATASETS = {
    'project': 'project.zip',
    'observation': 'observation.csv',
    'hru': 'hru.zip',
    'subbasin': 'subbasin.zip',
    'river': 'river.zip',
}

DATASET_ALIASES = {'sub': 'subbasin', 'obs': 'observation', 'riv': 'river'}


class DemoDataLoader(LoggingMixin, ConfigMixin):
    """
    Download and read the demo datasets.

    Args:
        config: Optional PySWATplusConfig; its ``demo`` section sets URL,
            version, cache folder and retry behaviour
        session: Optional requests session (one is created otherwise)
    """

    def __init__(self, config=None, session: Optional[requests.Session] = None):
        self.config = config
        self.demo_config: DemoConfig = self._get_config_value(lambda: self.config.demo, default=DemoConfig())
        self.session = session or requests.Session()

    def url_for(self, file: str, version: str) -> str:
        return f"{self.demo_config.url}/swatplus_rev{version}/{file}"

    def download(self, file: str, version: str) -> Path:
        """
        Return the cached copy of *file*, downloading it if needed.

        The file is streamed to ``<name>.part`` and renamed when complete, so
        an interrupted download never leaves a truncated cache entry.

        Raises:
            DataAcquisitionError: If all download attempts fail
        """
        cache_dir = self.ensure_dir(self.demo_config.cache_dir / version)
        target = cache_dir / file
        if target.exists():
            self.logger.debug(f"Using cached demo file {target}")
            return target

        url = self.url_for(file, version)
        part = target.with_name(target.name + '.part')
        last_error: Optional[Exception] = None

        for attempt in range(1, self.demo_config.max_retries + 1):
            try:
                self.logger.info(f"Downloading {url} (attempt {attempt}/{self.demo_config.max_retries})")
                with self.session.get(url, stream=True, timeout=self.demo_config.timeout) as resp:
                    resp.raise_for_status()
                    with open(part, 'wb') as f:
                        for chunk in resp.iter_content(chunk_size=1 << 20):
                            if chunk:
                                f.write(chunk)
                part.replace(target)
                self.logger.info(f"Saved demo file to {target}")
                return target
            except (requests.RequestException, OSError) as e:
                last_error = e
                part.unlink(missing_ok=True)
                self.logger.warning(f"Download of {url} failed: {e}")
                if attempt < self.demo_config.max_retries:
                    time.sleep(self.demo_config.retry_delay)

        raise DataAcquisitionError(
            f"Failed to download {url} after {self.demo_config.max_retries} attempts: {last_error}"
        )

    # -------------------------------------------------------------------------
    # Readers
    # -------------------------------------------------------------------------

    def load_project(self, path: Union[str, Path], version: str) -> Path:
        """Extract the demo project below *path* and return the TxtInOut folder."""
        path = self.ensure_dir(Path(path).expanduser())
        target = path / f"swatplus_rev{version.replace('.', '')}_demo"

        extracted = target.exists() and any(target.rglob(SWATplusFiles.FILE_CIO))
        if not extracted:
            archive = self.download(DEMO_DATASETS['project'], version)
            try:
                with zipfile.ZipFile(archive, 'r') as zf:
                    zf.extractall(target)
            except zipfile.BadZipFile as e:
                archive.unlink(missing_ok=True)
                raise DataAcquisitionError(f"Demo project archive {archive} is corrupt") from e
        else:
            self.logger.info(f"Demo project already available in {target}")

        cio_files = sorted(target.rglob(SWATplusFiles.FILE_CIO))
        if not cio_files:
            raise DataAcquisitionError(f"No {SWATplusFiles.FILE_CIO} found in demo project {target}")
        return cio_files[0].parent

    def load_observation(self, version: str) -> pd.DataFrame:
        """Daily discharge observations as DataFrame(date, discharge)."""
        csv_file = self.download(DEMO_DATASETS['observation'], version)
        try:
            raw = pd.read_csv(csv_file)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise DataAcquisitionError(f"Cannot read demo observations {csv_file}: {e}") from e
        if raw.shape[1] < 2:
            raise DataAcquisitionError(f"Demo observations {csv_file} need a date and a discharge column")

        obs = raw.iloc[:, :2].copy()
        obs.columns = ['date', 'discharge']
        obs['date'] = pd.to_datetime(obs['date'])
        obs['discharge'] = pd.to_numeric(obs['discharge'], errors='coerce')
        return obs.sort_values('date').reset_index(drop=True)

    def load_layer(self, dataset: str, version: str) -> gpd.GeoDataFrame:
        """Vector layer (hru, subbasin, river) read from the zipped shapefile."""
        archive = self.download(DEMO_DATASETS[dataset], version)
        try:
            return gpd.read_file(f"zip://{archive}")
        except Exception as e:  # noqa: BLE001 - driver specific GDAL errors
            raise DataAcquisitionError(f"Cannot read demo layer {archive}: {e}") from e

    def load(self, dataset: str, path: Optional[Union[str, Path]] = None, version: Optional[str] = None):
        name = DATASET_ALIASES.get(str(dataset).lower(), str(dataset).lower())
        if name not in DEMO_DATASETS:
            raise DataAcquisitionError(
                f"Unknown demo dataset '{dataset}'. Valid datasets: {', '.join(DEMO_DATASETS)}"
            )
        version = version or self.demo_config.version

        if name == 'project':
            if path is None:
                raise ValidationError("load_demo('project') needs a path to extract the project to")
            return self.load_project(path, version)
        if name == 'observation':
            return self.load_observation(version)
        return self.load_layer(name, version)


def load_demo(
    dataset: str,
    path: Optional[Union[str, Path]] = None,
    version: Optional[str] = None,
    config=None,
):
    """
    Load a demo dataset.

    Args:
        dataset: 'project', 'observation', 'hru', 'subbasin' (or 'sub') or 'river'
        path: Folder the project is extracted to (required for 'project')
        version: SWAT+ revision of the demo set (default DEMO_VERSION)
        config: Optional PySWATplusConfig

    Returns:
        Path to the project folder, a DataFrame(date, discharge) of
        observations or a GeoDataFrame for the vector layers

    Raises:
        DataAcquisitionError: Unknown dataset or failed download
        ValidationError: 'project' requested without a path

    Example:
        >>> project = load_demo('project', path='/tmp/demo')
        >>> q_obs = load_demo('observation')
        >>> hru = load_demo('hru')
    """
    return DemoDataLoader(config=config).load(dataset, path=path, version=version)

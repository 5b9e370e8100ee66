"""
SWAT+ project fixtures.

Builds a small synthetic TxtInOut folder and a stand-in SWAT+ executable
(a Python script) that reads time.sim, print.prt, file.cio and
calibration.cal the way SWAT+ does and writes text outputs.

Stand-in outputs: for every printed object and units 1..3,
``flo_out = 10 * unit + month + shift`` where ``shift`` is the value of
the first calibration.cal parameter (0 without calibration). A shift of
-999 makes the executable fail with exit code 1.
"""

import os
import stat
import sys
import textwrap
from pathlib import Path

import pytest

FILE_CIO = """\
file.cio: written by SWAT+ editor v2.3.3
simulation        time.sim          print.prt         object.prt        object.cnt        null
basin             codes.bsn         parameters.bsn
chg               cal_parms.cal     null              null              null              null
"""

TIME_SIM = """\
time.sim: written by SWAT+ editor v2.3.3
 day_start  yrc_start   day_end   yrc_end      step
         0       2002         0      2003         0
"""

PRINT_PRT = """\
print.prt: written by SWAT+ editor v2.3.3
nyskip      day_start  yrc_start  day_end   yrc_end   interval
       1          0          0        0         0          1
aa_int_cnt
       0
csvout     dbout    cdfout
       n          n         n
soilout    mgtout   hydcon    fdcout
       n          n         n        n
objects     daily   monthly    yearly   avann
basin_wb        n         n         y       n
channel_sd      y         n         n       n
hru_wb          n         n         y       n
"""

CAL_PARMS = """\
cal_parms.cal: written by SWAT+ editor v2.3.3
 4
NAME           OBJ_TYP       ABS_MIN       ABS_MAX  UNITS
cn2            hru           35.0000       95.0000  null
esco           hru            0.0000        1.0000  null
surlag         bsn            0.0500       24.0000  days
k              sol            0.0000     2000.0000  mm/hr
"""

FAKE_SWATPLUS = '''\
import datetime as dt
from pathlib import Path


def ints(line):
    return [int(float(v)) for v in line.split()]


day_start, yrc_start, day_end, yrc_end = ints(Path('time.sim').read_text().splitlines()[2])[:4]
start = dt.date(yrc_start, 1, 1) + dt.timedelta(days=max(day_start, 1) - 1)
if day_end:
    end = dt.date(yrc_end, 1, 1) + dt.timedelta(days=day_end - 1)
else:
    end = dt.date(yrc_end, 12, 31)

prt = Path('print.prt').read_text().splitlines()
nyskip, print_day, print_year = ints(prt[2])[:3]
print_start = dt.date(start.year + nyskip, 1, 1) if nyskip else start
if print_year:
    print_start = dt.date(print_year, 1, 1) + dt.timedelta(days=max(print_day, 1) - 1)

shift = 0.0
chg = [line.split() for line in Path('file.cio').read_text().splitlines() if line.startswith('chg')][0]
if chg[2] == 'calibration.cal':
    cal = Path('calibration.cal').read_text().splitlines()
    shift = float(cal[3].split()[2])
if shift == -999:
    print('Error: parameter out of range')
    raise SystemExit(1)

first = next(i for i, line in enumerate(prt) if line.split()[:1] == ['objects']) + 1
objects = {}
for line in prt[first:]:
    tokens = line.split()
    if len(tokens) == 5:
        objects[tokens[0]] = tokens[1:]

suffixes = ['day', 'mon', 'yr', 'aa']
header = ['jday', 'mon', 'day', 'yr', 'unit', 'gis_id', 'name', 'flo_out', 'precip', 'et']
days = []
d = print_start
while d <= end:
    days.append(d)
    d += dt.timedelta(days=1)

for obj, flags in objects.items():
    for k, flag in enumerate(flags):
        if flag != 'y':
            continue
        if k == 0:
            dates = days
        elif k == 1:
            dates = sorted({x.replace(day=1) for x in days})
        else:
            dates = sorted({x.replace(month=1, day=1) for x in days})
            if k == 3:
                dates = dates[-1:]
        rows = []
        for x in dates:
            for unit in (1, 2, 3):
                rows.append(
                    f"{x.timetuple().tm_yday:>8}{x.month:>8}{x.day:>8}{x.year:>8}{unit:>8}{unit:>8}"
                    f"{obj[:3] + str(unit).zfill(3):>10}"
                    f"{10 * unit + x.month + shift:>14.3f}{2.0 + unit:>14.3f}{1.0 * unit:>14.3f}"
                )
        with open(f"{obj}_{suffixes[k]}.txt", 'w') as f:
            f.write(f"{obj}: stand-in SWAT+ output\\n")
            f.write(''.join(f"{h:>10}" for h in header) + '\\n')
            f.write(' ' * 58 + 'm^3/s          mm          mm\\n')
            f.write('\\n'.join(rows) + '\\n')

print('Execution successfully completed')
'''


def write_project(path: Path) -> Path:
    """Write the synthetic TxtInOut files into *path*."""
    path.mkdir(parents=True, exist_ok=True)
    (path / 'file.cio').write_text(FILE_CIO)
    (path / 'time.sim').write_text(TIME_SIM)
    (path / 'print.prt').write_text(PRINT_PRT)
    (path / 'cal_parms.cal').write_text(CAL_PARMS)
    (path / 'hru-data.hru').write_text("hru-data.hru: placeholder\n")
    return path


def write_fake_executable(path: Path) -> Path:
    """Write the stand-in executable script and make it executable."""
    path.write_text(f"#!{sys.executable}\n" + FAKE_SWATPLUS)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def swat_project(tmp_path):
    """Synthetic SWAT+ project folder (2002-2003, one warm-up year)."""
    return write_project(tmp_path / 'TxtInOut')


@pytest.fixture
def fake_swat_exe(tmp_path):
    """Stand-in SWAT+ executable outside the project folder."""
    if os.name == 'nt':
        pytest.skip("stand-in executable relies on a shebang line")
    bin_dir = tmp_path / 'bin'
    bin_dir.mkdir()
    return write_fake_executable(bin_dir / 'swatplus_fake')


@pytest.fixture
def print_prt_text():
    return PRINT_PRT


@pytest.fixture
def write_output_file():
    """Factory writing a SWAT+ style output table."""

    def _write(path: Path, rows, header=('jday', 'mon', 'day', 'yr', 'unit', 'gis_id', 'name', 'flo_out')):
        lines = ["channel_sd_day.txt: test output",
                 ' '.join(header),
                 ' ' * 40 + 'm^3/s']
        lines += [' '.join(str(v) for v in row) for row in rows]
        path.write_text('\n'.join(lines) + '\n')
        return path

    return _write


@pytest.fixture
def cal_parms_text():
    return textwrap.dedent(CAL_PARMS)

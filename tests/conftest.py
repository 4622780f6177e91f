import sys
from pathlib import Path

import pandas as pd
import pytest

# Ensure `venues` and `api` are importable when running pytest from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from venues import config, data  # noqa: E402


SCENARIO_ROWS = [
    {
        "nombre_normalizado": "Café Uno",
        "tipo": "Cafetería",
        "calificacion": "4,5/5",
        "num_opiniones": "120 opiniones",
        "situacion_caminos_de_santiago": "Portugués",
    },
    {
        "nombre_normalizado": "Hotel Dos",
        "tipo": "Hotel",
        "calificacion": "3,0/5",
        "num_opiniones": "5",
        "situacion_caminos_de_santiago": "",
    },
    {
        "nombre_normalizado": "",
        "Latitud": "42,1",
        "Longitud": "-8,6",
    },
]


@pytest.fixture(autouse=True)
def clear_caches():
    config.get_settings.cache_clear()
    data._load_dashboard_data_cached.cache_clear()
    yield
    config.get_settings.cache_clear()
    data._load_dashboard_data_cached.cache_clear()


@pytest.fixture
def scenario_rows():
    return [dict(r) for r in SCENARIO_ROWS]


@pytest.fixture
def write_workbook(tmp_path):
    def _write(rows, *, sheet_name="Hoja1", name="pontevedra.xlsx", extra_sheets=None):
        path = tmp_path / name
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for extra in extra_sheets or []:
                pd.DataFrame({"x": [1]}).to_excel(writer, sheet_name=extra, index=False)
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, index=False)
        return path

    return _write


@pytest.fixture
def scenario_workbook(write_workbook, scenario_rows):
    return write_workbook(scenario_rows)

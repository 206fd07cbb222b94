# tests/conftest.py
import sys
from pathlib import Path

import matplotlib

# графики проверяем без дисплея
matplotlib.use("Agg")

# корень проекта в sys.path, чтобы работал импорт money_exchange / money_charts
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

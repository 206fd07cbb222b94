#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Exchange Money — конвертер валют по статическим курсам:
- GUI: tkinter (вкладки Обмен / Журнал / Графики)
- Курсы: локальный файл rates.csv (CODE,RATE)
- История: history.csv (FROM,TO,AMOUNT,RESULT,TIMESTAMP), переписывается после каждой конвертации
- Графики: matplotlib + pandas (курсы столбцами, история по валюте линией)

Установка зависимостей:
  pip install pandas matplotlib

Запуск:
  python main.py [--rates rates.csv] [--history history.csv] [--log-level DEBUG]
"""

# =========================
# НАСТРАИВАЕМЫЕ ПЕРЕМЕННЫЕ
# =========================

# --- Файлы данных ---
RATES_CSV_PATH = "rates.csv"
HISTORY_CSV_PATH = "history.csv"

# --- Логи ---
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# --- UI ---
APP_TITLE = "Exchange Money"
WINDOW_SIZE = "900x620"
RESULT_PLACEHOLDER = "Result"

# --- Графики ---
CHART_FIGSIZE = (8.8, 4.6)
CHART_DPI = 100

# =========================
# ИМПОРТЫ
# =========================

import argparse
import logging

import tkinter as tk
from tkinter import ttk, messagebox

from matplotlib.figure import Figure
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg

from money_charts import draw_history_chart, draw_rates_chart
from money_exchange import Converter, HistoryLog, InvalidCurrencyCode, RateTable, convert_and_record

logger = logging.getLogger(__name__)


# =========================
# УТИЛИТЫ
# =========================

def setup_logging(level=LOG_LEVEL):
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper() if isinstance(level, str) else level)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=APP_TITLE)
    parser.add_argument("--rates", default=RATES_CSV_PATH, help="файл курсов CODE,RATE")
    parser.add_argument("--history", default=HISTORY_CSV_PATH, help="файл истории конвертаций")
    parser.add_argument("--log-level", default=LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], type=str.upper)
    return parser.parse_args(argv)


# =========================
# GUI
# =========================

class ExchangeMoneyApp(tk.Tk):
    def __init__(self, rate_table: RateTable, history: HistoryLog, history_path: str):
        super().__init__()
        self.title(APP_TITLE)
        self.geometry(WINDOW_SIZE)

        # Данные сессии (передаются снаружи)
        self.rate_table = rate_table
        self.converter = Converter(rate_table)
        self.history = history
        self.history_path = history_path

        codes = rate_table.codes()

        # UI state
        self.amount_var = tk.StringVar(value="")
        self.selected_from = tk.StringVar(value=codes[0] if codes else "")
        self.selected_to = tk.StringVar(value=codes[1] if len(codes) > 1 else (codes[0] if codes else ""))
        self.result_var = tk.StringVar(value=RESULT_PLACEHOLDER)
        self.status_var = tk.StringVar(value="")

        # Графики
        self.chart_code = tk.StringVar(value=codes[0] if codes else "")

        self._build_ui()
        self._report_startup()

    # ----- UI -----

    def _build_ui(self):
        tabs = ttk.Notebook(self)
        tabs.pack(fill="both", expand=True, padx=8, pady=8)

        pages = (
            ("Обмен", self._build_converter_tab),
            ("Журнал", self._build_history_tab),
            ("Графики", self._build_chart_tab),
        )
        for title, build in pages:
            page = ttk.Frame(tabs)
            tabs.add(page, text=title)
            build(page)

        ttk.Separator(self).pack(fill="x", padx=8)
        ttk.Label(self, textvariable=self.status_var, anchor="w").pack(fill="x", padx=8, pady=(2, 8))

    def _build_converter_tab(self, root):
        codes = self.rate_table.codes()

        form = ttk.LabelFrame(root, text="Обмен денег")
        form.pack(fill="x", padx=5, pady=10)
        form.columnconfigure(1, weight=1)

        ttk.Label(form, text="Сколько меняем:").grid(row=0, column=0, padx=6, pady=4, sticky="w")
        ttk.Entry(form, textvariable=self.amount_var).grid(row=0, column=1, columnspan=2, padx=6, pady=4, sticky="ew")

        ttk.Label(form, text="Отдаю:").grid(row=1, column=0, padx=6, pady=4, sticky="w")
        ttk.Combobox(form, values=codes, textvariable=self.selected_from, state="readonly").grid(row=1, column=1, padx=6, pady=4, sticky="ew")
        ttk.Button(form, text="⇅", width=3, command=self._swap_currencies).grid(row=1, column=2, rowspan=2, padx=6)

        ttk.Label(form, text="Получаю:").grid(row=2, column=0, padx=6, pady=4, sticky="w")
        ttk.Combobox(form, values=codes, textvariable=self.selected_to, state="readonly").grid(row=2, column=1, padx=6, pady=4, sticky="ew")

        ttk.Button(form, text="Обменять", command=self.do_convert).grid(row=3, column=0, columnspan=3, padx=6, pady=(8, 6), sticky="ew")

        ttk.Label(root, textvariable=self.result_var, font=("Segoe UI", 16, "bold")).pack(anchor="center", pady=16)

    def _build_history_tab(self, root):
        top = ttk.Frame(root)
        top.pack(fill="x", padx=5, pady=5)
        ttk.Button(top, text="Обновить", command=self._reload_history_list).pack(side="left")

        self.history_list = tk.Listbox(root, height=20, font=("Consolas", 10))
        self.history_list.pack(fill="both", expand=True, padx=5, pady=5)

        self._reload_history_list()

    def _build_chart_tab(self, root):
        top = ttk.Frame(root)
        top.pack(fill="x", padx=5, pady=5)

        ttk.Button(top, text="Курсы валют", command=self.draw_rates).pack(side="left")

        ttk.Label(top, text="Валюта:").pack(side="left", padx=(20, 0))
        ttk.Combobox(top, values=self.rate_table.codes(), textvariable=self.chart_code, width=10, state="readonly").pack(side="left", padx=4)
        ttk.Button(top, text="История по валюте", command=self.draw_history).pack(side="left", padx=4)

        self.figure = Figure(figsize=CHART_FIGSIZE, dpi=CHART_DPI)
        self.canvas = FigureCanvasTkAgg(self.figure, master=root)
        self.canvas.get_tk_widget().pack(fill="both", expand=True, padx=5, pady=8)

    # ----- ЛОГИКА -----

    def _set_status(self, text: str):
        self.status_var.set(text)

    def _report_startup(self):
        if self.rate_table.load_error:
            self._set_status(f"{self.rate_table.load_error}. Курсы недоступны.")
        elif self.history.load_error:
            self._set_status(f"{self.history.load_error}. История начата заново.")
        else:
            self._set_status(f"Загружено валют: {len(self.rate_table)}, записей истории: {len(self.history)}")

    def _swap_currencies(self):
        a, b = self.selected_from.get(), self.selected_to.get()
        self.selected_from.set(b)
        self.selected_to.set(a)

    # ----- Конвертация и история -----

    def do_convert(self):
        from_code = self.selected_from.get()
        to_code = self.selected_to.get()
        try:
            record, saved = convert_and_record(self.converter, self.history, self.history_path,
                                               from_code, to_code, self.amount_var.get())
        except InvalidCurrencyCode as e:
            messagebox.showerror("Неизвестная валюта", str(e))
            return
        except ValueError as e:
            messagebox.showerror("Проверьте сумму", str(e))
            return

        self.result_var.set(f"{record.amount:.2f} {from_code} = {record.result:.2f} {to_code}")
        logger.debug("Converted: %s", self.history.render_line(record))
        if saved:
            self._set_status(f"История записана: {self.history_path}")
        else:
            self._set_status(f"История не записана в {self.history_path}, изменения только в памяти")
        self._reload_history_list()

    def _reload_history_list(self):
        self.history_list.delete(0, "end")
        if not len(self.history):
            self.history_list.insert("end", "No history available")
            return
        for rec in self.history:
            self.history_list.insert("end", self.history.render_line(rec))

    # ----- Графики -----

    def draw_rates(self):
        draw_rates_chart(self.figure, self.rate_table)
        self.canvas.draw()

    def draw_history(self):
        code = self.chart_code.get()
        if not code:
            messagebox.showinfo("Графики", "Select currency")
            return
        draw_history_chart(self.figure, self.history, code)
        self.canvas.draw()


# =========================
# ТОЧКА ВХОДА
# =========================

def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level)

    rate_table = RateTable.load(args.rates)
    history = HistoryLog.load(args.history)

    app = ExchangeMoneyApp(rate_table, history, args.history)
    app.mainloop()


if __name__ == "__main__":
    main()

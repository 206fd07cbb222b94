# -*- coding: utf-8 -*-

"""
Ядро конвертера валют (без GUI):
- Курсы: плоский файл CODE,RATE (RateTable)
- Конвертация: amount * rate(from) / rate(to) (Converter)
- История: плоский файл FROM,TO,AMOUNT,RESULT,TIMESTAMP (HistoryLog)

Формат файлов совместим с уже существующими rates.csv / history.csv.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

logger = logging.getLogger(__name__)


# =========================
# ОШИБКИ
# =========================

class InvalidCurrencyCode(ValueError):
    """Код валюты отсутствует в таблице курсов (ошибка ввода, не повторять)."""

    def __init__(self, code):
        super().__init__(f"Invalid currency code: {code}")
        self.code = code


# =========================
# УТИЛИТЫ
# =========================

def now_seconds() -> datetime:
    # до секунд: иначе ISO-строка в файле не совпадёт с исходной меткой
    return datetime.now().replace(microsecond=0)


def parse_timestamp(text: str) -> datetime:
    """
    ISO-8601 local date-time из файла истории.
    Дробная часть секунд приводится к 6 цифрам: старые файлы бывают
    с 7 и 9 знаками, а fromisoformat до 3.11 принимает только 3 или 6.
    """
    head, dot, frac = text.strip().partition(".")
    if dot:
        if not frac.isdigit():
            raise ValueError(f"Invalid timestamp: {text!r}")
        return datetime.fromisoformat(f"{head}.{frac[:6].ljust(6, '0')}")
    return datetime.fromisoformat(head)


def parse_amount(text: str) -> float:
    """
    Проверка суммы, введённой пользователем.
    Принимает "10.5" и "10,5". Бросает ValueError с текстом для диалога.
    """
    amount_str = (text or "").strip().replace(",", ".")
    if not amount_str:
        raise ValueError("Please enter an amount")
    try:
        amount = float(amount_str)
    except ValueError:
        raise ValueError("Invalid amount") from None
    if not math.isfinite(amount):
        raise ValueError("Invalid amount")
    if amount <= 0:
        raise ValueError("Amount must be positive")
    return amount


# =========================
# КУРСЫ
# =========================

@dataclass(frozen=True)
class Rate:
    code: str
    rate: float  # единиц базовой валюты за 1 единицу этой валюты


def parse_rate_line(line: str):
    """Строка CODE,RATE -> Rate или None, если строка битая."""
    parts = line.rstrip("\r\n").split(",")
    if len(parts) != 2:
        return None
    code = parts[0].strip()
    if not code:
        return None
    try:
        rate = float(parts[1].strip())
    except ValueError:
        return None
    if not math.isfinite(rate) or rate <= 0:
        return None
    return Rate(code, rate)


class RateTable:
    """
    Таблица курсов: код -> Rate.
    Порядок вставки сохраняется и используется как порядок в списках выбора.
    После загрузки таблица только читается.
    """

    def __init__(self, rates=None):
        self._rates = {}
        self.load_error = None
        for r in rates or ():
            self._rates[r.code] = r

    @classmethod
    def load(cls, path) -> "RateTable":
        """
        Загружает курсы из файла. Битые строки пропускаются молча,
        недоступный файл даёт пустую таблицу с load_error (без исключения).
        """
        table = cls()
        skipped = 0
        try:
            with open(path, "r", encoding="utf-8") as f:
                for line in f:
                    rate = parse_rate_line(line)
                    if rate is None:
                        skipped += 1
                        continue
                    # дубликат: побеждает последнее значение
                    table._rates[rate.code] = rate
        except OSError as e:
            table._rates.clear()
            table.load_error = f"Error loading rates: {e}"
            logger.warning("Rates file %s is unreadable: %s", path, e)
            return table

        if skipped:
            logger.debug("Skipped %d malformed rate line(s) in %s", skipped, path)
        logger.info("Loaded %d currencies from %s", len(table._rates), path)
        return table

    def get(self, code: str):
        return self._rates.get(code)

    def all(self):
        return tuple(self._rates.values())

    def codes(self):
        return list(self._rates.keys())

    def as_mapping(self):
        """Неизменяемое представление внутреннего словаря (для графиков)."""
        return MappingProxyType(self._rates)

    def __len__(self):
        return len(self._rates)

    def __contains__(self, code):
        return code in self._rates

    def __iter__(self):
        return iter(self._rates.values())


# =========================
# КОНВЕРТАЦИЯ
# =========================

class Converter:
    def __init__(self, rate_table: RateTable):
        self.rate_table = rate_table

    def convert(self, from_code: str, to_code: str, amount: float) -> float:
        """
        Конвертация через общую базу: amount * rate(from) / rate(to).
        Без округления и без короткого пути для from == to.
        Сумму проверяет вызывающий код (parse_amount).
        """
        src = self.rate_table.get(from_code)
        if src is None:
            raise InvalidCurrencyCode(from_code)
        dst = self.rate_table.get(to_code)
        if dst is None:
            raise InvalidCurrencyCode(to_code)
        base_amount = amount * src.rate
        return base_amount / dst.rate


# =========================
# ИСТОРИЯ
# =========================

DISPLAY_TS_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class ConversionRecord:
    from_code: str
    to_code: str
    amount: float
    result: float
    timestamp: datetime = field(default_factory=now_seconds)

    def to_csv(self) -> str:
        return (f"{self.from_code},{self.to_code},"
                f"{self.amount:.2f},{self.result:.2f},{self.timestamp.isoformat()}")

    @classmethod
    def from_csv(cls, line: str):
        """Строка истории -> ConversionRecord или None, если строка битая."""
        parts = line.rstrip("\r\n").split(",")
        if len(parts) != 5:
            return None
        try:
            amount = float(parts[2])
            result = float(parts[3])
            ts = parse_timestamp(parts[4])
        except ValueError:
            return None
        return cls(parts[0], parts[1], amount, result, ts)


class HistoryLog:
    """
    Упорядоченная (хронологическая) история конвертаций.
    В памяти только дописывается; на диск каждый раз переписывается целиком.
    """

    def __init__(self, records=None):
        self._records = list(records or ())
        self.load_error = None

    @classmethod
    def load(cls, path) -> "HistoryLog":
        log = cls()
        skipped = 0
        try:
            with open(path, "r", encoding="utf-8") as f:
                for line in f:
                    rec = ConversionRecord.from_csv(line)
                    if rec is None:
                        skipped += 1
                        continue
                    log._records.append(rec)
        except FileNotFoundError:
            # первый запуск: истории ещё нет
            logger.debug("No existing history found at %s", path)
            return log
        except OSError as e:
            log._records.clear()
            log.load_error = f"Error loading history: {e}"
            logger.warning("History file %s is unreadable: %s", path, e)
            return log

        if skipped:
            logger.debug("Skipped %d malformed history line(s) in %s", skipped, path)
        logger.info("Loaded %d history record(s) from %s", len(log._records), path)
        return log

    @property
    def records(self):
        return tuple(self._records)

    def append(self, record: ConversionRecord):
        self._records.append(record)

    def record_conversion(self, from_code, to_code, amount, result) -> ConversionRecord:
        record = ConversionRecord(from_code, to_code, amount, result)
        self.append(record)
        return record

    def persist(self, path) -> bool:
        """
        Полностью переписывает файл истории.
        Ошибка записи не критична: пишем в лог, возвращаем False,
        история в памяти остаётся как есть.
        """
        try:
            with open(path, "w", encoding="utf-8", newline="\n") as f:
                for rec in self._records:
                    f.write(rec.to_csv())
                    f.write("\n")
        except OSError as e:
            logger.warning("Error saving history to %s: %s", path, e)
            return False
        return True

    def filter(self, code: str):
        return [r for r in self._records if r.from_code == code or r.to_code == code]

    @staticmethod
    def render_line(record: ConversionRecord) -> str:
        return (f"[{record.timestamp.strftime(DISPLAY_TS_FORMAT)}] "
                f"{record.amount:.2f} {record.from_code} -> "
                f"{record.result:.2f} {record.to_code}")

    def render_all(self) -> str:
        return "\n".join(self.render_line(r) for r in self._records)

    def __len__(self):
        return len(self._records)

    def __iter__(self):
        return iter(self._records)


# =========================
# СЦЕНАРИЙ "КОНВЕРТИРОВАТЬ"
# =========================

def convert_and_record(converter: Converter, history: HistoryLog, history_path,
                       from_code: str, to_code: str, amount_text: str):
    """
    Одно нажатие кнопки: проверка суммы -> конвертация -> запись в историю -> файл.
    Ошибки ввода (ValueError, InvalidCurrencyCode) пробрасываются до записи,
    поэтому история и файл при них не меняются.
    Возвращает (record, saved).
    """
    amount = parse_amount(amount_text)
    result = converter.convert(from_code, to_code, amount)
    record = history.record_conversion(from_code, to_code, amount, result)
    saved = history.persist(history_path)
    return record, saved

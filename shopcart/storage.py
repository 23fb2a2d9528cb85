import json
import logging
import os
from typing import Any, Dict, Protocol, Tuple

from .domain import Coupon, Product
from .errors import StorageError
from .serialization import coupons_from_list, products_from_list

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Хранилище «ключ -> JSON-совместимое значение», последняя запись побеждает"""

    def get(self, name: str, default: Any = None) -> Any: ...

    def set(self, name: str, value: Any) -> None: ...


class MemoryStore:
    """Хранилище в памяти (тесты, сессия Streamlit без файла)"""

    def __init__(self, initial: Dict[str, Any] = None):
        self._data = dict(initial or {})

    def get(self, name: str, default: Any = None) -> Any:
        return self._data.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._data[name] = value


class JsonFileStore:
    """
    Один JSON-документ на диске, ключи верхнего уровня: имена коллекций.
    Каждая запись перезаписывает файл целиком.
    """

    def __init__(self, path: str):
        self.path = path
        self._data = self._read()

    def _read(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            logger.info("Store file %s not found, starting empty", self.path)
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(self.path, str(e)) from e
        if not isinstance(data, dict):
            raise StorageError(self.path, "top-level value is not an object")
        return data

    def get(self, name: str, default: Any = None) -> Any:
        return self._data.get(name, default)

    def set(self, name: str, value: Any) -> None:
        # память обновляется только после успешной записи файла
        data = {**self._data, name: value}
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)
        self._data = data
        logger.debug("Stored key %s in %s", name, self.path)


def load_seed(path: str) -> Tuple[Tuple[Product, ...], Tuple[Coupon, ...]]:
    """Загружает seed.json: начальный каталог и купоны"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise StorageError(path, str(e)) from e

    products = products_from_list(data.get("products", []))
    coupons = coupons_from_list(data.get("coupons", []))
    logger.info(
        "Loaded seed %s: %d products, %d coupons", path, len(products), len(coupons)
    )
    return products, coupons

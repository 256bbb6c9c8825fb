"""
Local gym catalog.

The built-in catalog of Boulders gyms prepared for the business units API,
plus JSON import/export and a small address parser.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from .errors import CatalogError
from .models import Record

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "boulders-gyms-api-data.json"

_COMPANY = {"id": 1, "name": "Boulders Denmark"}
_INVOICE_NAME = "Boulders Denmark A/S"


def _gym(
    gym_id: int,
    name: str,
    street: str,
    city: str,
    postal_code: str,
    latitude: float,
    longitude: float,
    region_id: int,
    region_name: str,
) -> Record:
    return {
        "id": gym_id,
        "name": name,
        "company": dict(_COMPANY),
        "companyNameForInvoice": _INVOICE_NAME,
        "address": {
            "street": street,
            "city": city,
            "postalCode": postal_code,
            "country": "Denmark",
            "latitude": latitude,
            "longitude": longitude,
        },
        "location": "DK",
        "region": {"id": region_id, "name": region_name},
        "currency": "DKK",
        "releaseSuspensionProduct": {},
        "settings": {},
        "hasRegisterUnitForInternet": True,
    }


GYM_CATALOG: tuple[Record, ...] = (
    _gym(1, "Boulders Copenhagen", "Vesterbrogade 149", "København V", "1620",
         55.6761, 12.5683, 1, "Copenhagen Region"),
    _gym(2, "Boulders Aarhus", "Søren Frichs Vej 42", "Åbyhøj", "8230",
         56.1572, 10.2107, 2, "Central Jutland Region"),
    _gym(3, "Boulders Odense", "Hjallesevej 91", "Odense M", "5230",
         55.4038, 10.4024, 3, "Funen Region"),
    _gym(4, "Boulders Aalborg", "Hobrovej 333", "Aalborg SV", "9200",
         57.0488, 9.9217, 4, "North Jutland Region"),
    _gym(5, "Boulders Esbjerg", "Gammel Vardevej 2", "Esbjerg", "6700",
         55.4703, 8.4549, 5, "South Denmark Region"),
    _gym(6, "Boulders Herning", "Industrivej 15", "Herning", "7400",
         56.1393, 8.9756, 2, "Central Jutland Region"),
    _gym(7, "Boulders Kolding", "Vestre Ringvej 36", "Kolding", "6000",
         55.4904, 9.4722, 5, "South Denmark Region"),
    _gym(8, "Boulders Randers", "Industrivej 8", "Randers C", "8900",
         56.4606, 10.0363, 6, "East Jutland Region"),
    _gym(9, "Boulders Vejle", "Vejlevej 25", "Vejle", "7100",
         55.7093, 9.5357, 5, "South Denmark Region"),
    _gym(10, "Boulders Viborg", "Industrivej 12", "Viborg", "8800",
         56.4531, 9.4021, 7, "Central Jutland Region"),
)


def default_catalog() -> list[Record]:
    """A fresh, mutable copy of the built-in catalog."""
    return copy.deepcopy(list(GYM_CATALOG))


def load_catalog(path: Union[str, Path]) -> list[Record]:
    """Load a catalog from a JSON array of records."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Invalid JSON file {path}: {e}") from e
    except OSError as e:
        raise CatalogError(f"Failed to read catalog {path}: {e}") from e

    if not isinstance(data, list):
        raise CatalogError(f"{path}: expected an array of records, got {type(data).__name__}")

    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise CatalogError(f"{path}[{i}]: expected an object, got {type(item).__name__}")

    logger.info(f"Loaded {len(data)} gyms from {path}")
    return data


def export_catalog(records: list[Record], path: Union[str, Path, None] = None) -> Path:
    """Write records to a pretty-printed JSON file; returns the path written."""
    path = Path(path or DEFAULT_EXPORT_NAME)
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        raise CatalogError(f"Failed to write catalog {path}: {e}") from e

    logger.info(f"Exported {len(records)} gyms to {path}")
    return path


def resolve_catalog(path: Optional[Union[str, Path]] = None) -> list[Record]:
    """Catalog from ``path`` when given, otherwise the built-in one."""
    if path:
        return load_catalog(path)
    return default_catalog()


def parse_address(text: str, country: str = "Denmark") -> dict[str, Any]:
    """
    Parse ``"Street 1, 1620 City Name"`` into a structured address.

    Text without a ``", "`` separator is kept whole as the street.
    """
    parts = text.split(", ")
    if len(parts) >= 2:
        postal_code, _, city = parts[1].partition(" ")
        return {
            "street": parts[0],
            "city": city,
            "postalCode": postal_code,
            "country": country,
        }
    return {
        "street": text,
        "city": "",
        "postalCode": "",
        "country": country,
    }

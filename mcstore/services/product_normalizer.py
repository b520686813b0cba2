# mcstore/services/product_normalizer.py
from typing import Any, Dict


def _to_number(value: Any) -> float:
    try:
        return float(value) if value else 0.0
    except (TypeError, ValueError):
        return 0.0


def normalize_product(record: Dict[str, Any] | None) -> Dict[str, Any] | None:
    """
    Rekordy w bazie maja rozne nazwy pol (title/images/image), frontend chce
    name, image_url i jedna cene do wyswietlenia.

    Promocja aktywna tylko gdy 0 < promo_price < price.
    """
    if record is None:
        return None

    name = record.get("name") or record.get("title") or "Unnamed Product"

    images = record.get("images")
    image_url = (
        record.get("image_url")
        or (images[0] if isinstance(images, list) and images else None)
        or record.get("image")
        or None
    )

    price = _to_number(record.get("price"))
    promo = _to_number(record.get("promo_price"))
    has_promo = 0 < promo < price

    return {
        **record,
        "name": name,
        "image_url": image_url,
        "display_price": promo if has_promo else price,
        "original_price": price if has_promo else None,
    }

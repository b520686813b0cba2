import pytest

from mcstore.services.product_normalizer import normalize_product
from mcstore.services.product_service import ProductService


@pytest.mark.parametrize(
    "record, display, original",
    [
        ({"id": 1, "price": 12000, "promo_price": 10000}, 10000.0, 12000.0),
        ({"id": 1, "price": 12000, "promo_price": 12000}, 12000.0, None),
        ({"id": 1, "price": 12000, "promo_price": 15000}, 12000.0, None),
        ({"id": 1, "price": 12000, "promo_price": 0}, 12000.0, None),
        ({"id": 1, "price": "9500", "promo_price": None}, 9500.0, None),
        ({"id": 1, "price": "not-a-number"}, 0.0, None),
    ],
)
def test_display_price_uses_promo_only_when_active(record, display, original):
    p = normalize_product(record)
    assert p["display_price"] == display
    assert p["original_price"] == original


def test_name_and_image_fallbacks():
    assert normalize_product({"id": 1, "title": "Kettle", "images": ["k.jpg", "k2.jpg"]})["name"] == "Kettle"
    assert normalize_product({"id": 1, "images": ["k.jpg"]})["image_url"] == "k.jpg"
    assert normalize_product({"id": 1, "images": [], "image": "legacy.png"})["image_url"] == "legacy.png"

    bare = normalize_product({"id": 1})
    assert bare["name"] == "Unnamed Product"
    assert bare["image_url"] is None


def test_normalize_none_and_preserves_other_fields():
    assert normalize_product(None) is None
    assert normalize_product({"id": 3, "category": "Audio", "stock": 4})["category"] == "Audio"


def test_normalize_is_idempotent():
    raw = {"id": 9, "title": "Fan", "images": ["f.jpg"], "price": 5000, "promo_price": 4500}
    once = normalize_product(raw)
    assert normalize_product(once) == once


def test_list_products_filters_active_and_normalizes(backend):
    backend.seed(
        "products",
        {"id": 1, "title": "Blender", "category": "Kitchen", "is_active": True, "price": 20000, "is_featured": True},
        {"id": 2, "name": "Mixer", "category": "Kitchen", "is_active": True, "price": 15000},
        {"id": 3, "name": "Old Toaster", "category": "Kitchen", "is_active": False, "price": 9000},
        {"id": 4, "name": "Earbuds", "category": "Audio", "is_active": True, "price": 12000},
    )
    service = ProductService(backend)

    names = {p["name"] for p in service.get_products_by_category("Kitchen")}
    assert names == {"Blender", "Mixer"}
    assert [p["id"] for p in service.get_featured_products()] == [1]
    assert [p["name"] for p in service.search_products("BUDS")] == ["Earbuds"]
    assert service.get_categories() == ["Audio", "Kitchen"]
    assert service.get_product_by_id(1)["name"] == "Blender"
    assert service.get_product_by_id(99) is None


def test_product_reads_degrade_on_failure(backend):
    backend.fail("GET", "products")
    service = ProductService(backend)

    result = service.fetch_products()
    assert result.ok is False
    assert result.data == []
    assert service.get_categories() == []
    assert service.get_product_by_id(1) is None


def test_empty_catalog_is_ok_not_failure(backend):
    result = ProductService(backend).fetch_products()
    assert result.ok is True
    assert result.data == []

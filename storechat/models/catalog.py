import json
import logging
from pathlib import Path

from pydantic import ConfigDict, TypeAdapter, ValidationError

from storechat.errors import CatalogError
from storechat.models.messages import WireModel

logger = logging.getLogger(__name__)


class Product(WireModel):
    id: str
    title: str
    description: str
    price: float
    original_price: float | None = None
    image_url: str
    rating: float
    in_stock: bool = True
    shipping: str
    category: str

    model_config = ConfigDict(frozen=True)


PLACEHOLDER_IMAGES = {
    "headphones": "https://placehold.co/400x300/6c5ce7/white?text=Premium+Headphones",
    "earbuds": "https://placehold.co/400x300/1abc9c/white?text=Wireless+Earbuds",
    "speaker": "https://placehold.co/400x300/e74c3c/white?text=Bluetooth+Speaker",
    "watch": "https://placehold.co/400x300/3498db/white?text=Smart+Watch",
    "charger": "https://placehold.co/400x300/f39c12/white?text=Fast+Charger",
}

DEFAULT_PRODUCTS = (
    Product(
        id="prod_headphones",
        title="Premium Wireless Headphones",
        description="Experience crystal clear sound with our latest noise-cancelling technology. "
        "Features 30-hour battery life and premium comfort.",
        price=199.99,
        original_price=249.99,
        image_url=PLACEHOLDER_IMAGES["headphones"],
        rating=4.7,
        shipping="Free 2-day shipping",
        category="headphones",
    ),
    Product(
        id="prod_earbuds",
        title="Wireless Earbuds Pro",
        description="Compact and comfortable wireless earbuds with great sound quality. "
        "Water resistant with 8-hour battery life.",
        price=79.99,
        original_price=99.99,
        image_url=PLACEHOLDER_IMAGES["earbuds"],
        rating=4.5,
        shipping="Free shipping",
        category="headphones",
    ),
    Product(
        id="prod_speaker",
        title="Portable Bluetooth Speaker",
        description="Powerful 360° sound with deep bass. Waterproof design for beach and pool parties. "
        "20-hour battery life.",
        price=129.99,
        image_url=PLACEHOLDER_IMAGES["speaker"],
        rating=4.3,
        shipping="Free shipping",
        category="speakers",
    ),
    Product(
        id="prod_watch",
        title="Smart Fitness Watch",
        description="Track your workouts, heart rate, and sleep patterns. Water resistant with 7-day battery life.",
        price=149.99,
        original_price=179.99,
        image_url=PLACEHOLDER_IMAGES["watch"],
        rating=4.6,
        shipping="Arrives tomorrow",
        category="accessories",
    ),
    Product(
        id="prod_charger",
        title="Fast Charging Power Bank",
        description="20,000mAh capacity with fast charging support for all your devices. "
        "Charge up to 4 devices simultaneously.",
        price=49.99,
        image_url=PLACEHOLDER_IMAGES["charger"],
        rating=4.2,
        shipping="Free shipping",
        category="accessories",
    ),
)


class Catalog:
    """Read-only product table. Order is preserved from the source list."""

    def __init__(self, products):
        self._products = tuple(products)
        if not self._products:
            raise CatalogError("Catalog is empty")
        self._by_id = {}
        for product in self._products:
            if product.id in self._by_id:
                raise CatalogError(f"Duplicate product id: {product.id}")
            self._by_id[product.id] = product

    def __iter__(self):
        return iter(self._products)

    def __len__(self) -> int:
        return len(self._products)

    @property
    def products(self) -> tuple[Product, ...]:
        return self._products

    def first(self) -> Product:
        return self._products[0]

    def get(self, product_id: str) -> Product | None:
        return self._by_id.get(product_id)

    def in_category(self, category: str) -> list[Product]:
        return [p for p in self._products if p.category == category]

    def in_price_range(self, low: float, high: float) -> list[Product]:
        """Products with low <= price < high."""
        return [p for p in self._products if low <= p.price < high]


_product_list_adapter = TypeAdapter(list[Product])


def load_catalog(path: str | None = None) -> Catalog:
    """Build the catalog from a JSON file, or the built-in products when no path is given."""
    if not path:
        return Catalog(DEFAULT_PRODUCTS)

    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise CatalogError(f"Cannot read catalog file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog file {path} is not valid JSON: {e}") from e

    try:
        products = _product_list_adapter.validate_python(raw)
    except ValidationError as e:
        raise CatalogError(f"Catalog file {path} has invalid products: {e}") from e

    logger.info("Loaded %d products from %s", len(products), path)
    return Catalog(products)

"""
Parse widget action strings into typed commands.

The widget sends button values such as ``category_speakers`` or
``buy_prod_watch``. They are parsed once here so the responder never
inspects string prefixes itself.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class ShowPriceRanges:
    pass


@dataclass(frozen=True)
class Category:
    name: str


@dataclass(frozen=True)
class PriceRange:
    bucket: str
    low: float
    high: float
    description: str


@dataclass(frozen=True)
class Buy:
    product_id: str


@dataclass(frozen=True)
class AddToCart:
    product_id: str


@dataclass(frozen=True)
class ShowCategories:
    pass


@dataclass(frozen=True)
class FeaturedProducts:
    pass


@dataclass(frozen=True)
class Unrecognized:
    raw: str


Action = (
    ShowPriceRanges | Category | PriceRange | Buy | AddToCart
    | ShowCategories | FeaturedProducts | Unrecognized
)

PRICE_BUCKETS = {
    "under_100": PriceRange("under_100", 0, 100, "under $100"),
    "100_200": PriceRange("100_200", 100, 200, "between $100 and $200"),
    "over_200": PriceRange("over_200", 200, float("inf"), "over $200"),
}


def _after_prefix(raw: str, prefix: str) -> str:
    return raw[len(prefix):]


def parse_action(raw: str) -> Action:
    """Map a raw action value to its command. Prefixes are tried in dispatch order."""
    if raw == "show_price_ranges":
        return ShowPriceRanges()
    if raw.startswith("category_"):
        return Category(_after_prefix(raw, "category_"))
    if raw.startswith("price_"):
        bucket = PRICE_BUCKETS.get(_after_prefix(raw, "price_"))
        return bucket if bucket is not None else Unrecognized(raw)
    # product ids contain underscores themselves, so keep everything after the prefix
    if raw.startswith("buy_"):
        return Buy(_after_prefix(raw, "buy_"))
    if raw.startswith("cart_"):
        return AddToCart(_after_prefix(raw, "cart_"))
    if raw in ("show_products", "show_categories"):
        return ShowCategories()
    if raw == "featured_products":
        return FeaturedProducts()
    return Unrecognized(raw)


def action_value(action: Action) -> str:
    """Inverse of parse_action for everything except Unrecognized passthrough."""
    match action:
        case ShowPriceRanges():
            return "show_price_ranges"
        case Category(name=name):
            return f"category_{name}"
        case PriceRange(bucket=bucket):
            return f"price_{bucket}"
        case Buy(product_id=product_id):
            return f"buy_{product_id}"
        case AddToCart(product_id=product_id):
            return f"cart_{product_id}"
        case ShowCategories():
            return "show_categories"
        case FeaturedProducts():
            return "featured_products"
        case Unrecognized(raw=raw):
            return raw

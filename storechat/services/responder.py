"""
Rule-based response engine.

Turns one inbound widget turn (a button action or a free-text message) into
the ordered list of chat messages the widget should render. Every turn is
stateless: the only inputs are the request, the read-only catalog and the
random source used for the featured product and greeting.
"""
import logging
import random

from storechat.models.catalog import Catalog, Product
from storechat.models.messages import (
    ActionMessage,
    ActionOption,
    ProductAction,
    ProductMessage,
    TextMessage,
)
from storechat.services.actions import (
    AddToCart,
    Buy,
    Category,
    FeaturedProducts,
    PRICE_BUCKETS,
    PriceRange,
    ShowCategories,
    ShowPriceRanges,
    Unrecognized,
    action_value,
    parse_action,
)

logger = logging.getLogger(__name__)

MAX_PRODUCTS_PER_REPLY = 3

GREETINGS = (
    "Welcome to our store! I'm here to help you find the perfect product.",
    "Hello! How can I help you today?",
    "Hi there! What can I do for you?",
    "Good day! Do you need any assistance?",
    "Hey! Feel free to ask me anything.",
    "Welcome! How's your day going?",
    "Hi! I'm here if you need any support.",
)

CATEGORY_CHOICES = (
    ("Headphones", Category("headphones")),
    ("Speakers", Category("speakers")),
    ("Accessories", Category("accessories")),
)

# Checked in order; the first keyword group found in the lower-cased text wins.
KEYWORD_ROUTES = (
    (("headphone", "earphone", "earbuds"), Category("headphones")),
    (("speaker",), Category("speakers")),
    (("accessory", "accessories"), Category("accessories")),
    (("cheap", "affordable", "budget"), PRICE_BUCKETS["under_100"]),
    (("premium", "high end", "expensive"), PRICE_BUCKETS["over_200"]),
)


def product_to_message(product: Product) -> ProductMessage:
    """Project a catalog product onto a product card with Buy / Cart / Details actions."""
    return ProductMessage(
        title=product.title,
        description=product.description,
        price=product.price,
        original_price=product.original_price,
        image_url=product.image_url,
        rating=product.rating,
        in_stock=product.in_stock,
        shipping=product.shipping,
        actions=[
            ProductAction(label="Buy Now", value=f"buy_{product.id}", url=f"/products/{product.id}"),
            ProductAction(label="Add to Cart", value=f"cart_{product.id}"),
            ProductAction(
                label="View Details",
                value=f"details_{product.id}",
                url=f"/products/{product.id}?view=details",
            ),
        ],
    )


def _text(content: str) -> TextMessage:
    return TextMessage(content=content)


def _options(question: str, choices) -> ActionMessage:
    return ActionMessage(
        question=question,
        options=[ActionOption(label=label, value=value) for label, value in choices],
    )


def _category_options(question: str) -> ActionMessage:
    return _options(question, [(label, action_value(action)) for label, action in CATEGORY_CHOICES])


class ResponseEngine:
    def __init__(self, catalog: Catalog, rng: random.Random | None = None):
        self.catalog = catalog
        self.rng = rng or random.Random()

    # -- Entry points --

    def welcome(self) -> list:
        """Opening sequence shown when the widget first loads."""
        return [
            _text(self.rng.choice(GREETINGS)),
            _category_options("What are you looking for today?"),
            _text("Here's one of our best sellers:"),
            product_to_message(self.catalog.first()),
        ]

    def respond(self, action: str | None = None, message: str | None = None) -> list:
        """Reply to one turn. ``action`` takes precedence over ``message``."""
        if action:
            return self.handle_action(action)
        if message:
            return self.handle_text(message)
        logger.debug("Empty turn, sending default reply")
        return self._default_reply()

    def handle_action(self, raw: str) -> list:
        action = parse_action(raw)
        logger.debug("Action %r parsed as %r", raw, action)

        match action:
            case ShowPriceRanges():
                return self._price_ranges()
            case Category(name=name):
                return self._category(name)
            case PriceRange():
                return self._price_range(action)
            case Buy(product_id=product_id):
                return self._buy(product_id)
            case AddToCart(product_id=product_id):
                return self._add_to_cart(product_id)
            case ShowCategories():
                return self._categories()
            case FeaturedProducts():
                return self._featured()
            case Unrecognized():
                return self._default_reply()

    def handle_text(self, message: str) -> list:
        text = message.lower()
        for keywords, action in KEYWORD_ROUTES:
            if any(keyword in text for keyword in keywords):
                logger.debug("Free text matched %s", action)
                return self.handle_action(action_value(action))

        return [
            _text(f'I received your message: "{message}". How can I help you further?'),
            _options("Would you like to:", [
                ("Browse Products", "show_categories"),
                ("Shop by Price", "show_price_ranges"),
                ("See Featured Items", "featured_products"),
            ]),
        ]

    # -- Replies --

    def _price_ranges(self) -> list:
        return [
            _text("What's your budget?"),
            _options("Price range:", [
                ("Under $100", "price_under_100"),
                ("$100 - $200", "price_100_200"),
                ("Over $200", "price_over_200"),
            ]),
        ]

    def _product_list(self, intro: str, products: list[Product]) -> list:
        return [_text(intro)] + [
            product_to_message(p) for p in products[:MAX_PRODUCTS_PER_REPLY]
        ]

    def _category(self, name: str) -> list:
        products = self.catalog.in_category(name)
        if not products:
            return [_text(f"Sorry, we couldn't find any products in the {name} category.")]
        return self._product_list(f"Here are our best {name}:", products)

    def _price_range(self, bucket: PriceRange) -> list:
        products = self.catalog.in_price_range(bucket.low, bucket.high)
        if not products:
            return [_text("Sorry, we couldn't find any products in this price range.")]
        return self._product_list(f"Here are our products {bucket.description}:", products)

    def _buy(self, product_id: str) -> list:
        product = self.catalog.get(product_id)
        if product is None:
            return [_missing_product()]
        return [
            _text(f"Great choice! You're about to purchase the {product.title}."),
            _options("Would you like to add extended warranty?", [
                ("Yes, add warranty", f"warranty_{product.id}"),
                ("No, thanks", f"checkout_{product.id}"),
            ]),
        ]

    def _add_to_cart(self, product_id: str) -> list:
        product = self.catalog.get(product_id)
        if product is None:
            return [_missing_product()]
        return [
            _text(f"{product.title} has been added to your cart!"),
            _options("What would you like to do next?", [
                ("Checkout", "view_cart"),
                ("Continue Shopping", "show_categories"),
            ]),
        ]

    def _categories(self) -> list:
        return [
            _text("Here are our product categories:"),
            _category_options("What are you interested in?"),
        ]

    def _featured(self) -> list:
        product = self.rng.choice(self.catalog.products)
        return [
            _text("Check out this featured product:"),
            product_to_message(product),
        ]

    def _default_reply(self) -> list:
        return [
            _text("I'm here to help! What would you like to know?"),
            _options("Would you like to:", [
                ("Browse Products", "show_categories"),
                ("See Featured Items", "featured_products"),
                ("Shop by Price", "show_price_ranges"),
            ]),
        ]


def _missing_product() -> TextMessage:
    return _text("Sorry, we couldn't find that product.")

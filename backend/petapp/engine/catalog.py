"""
Shop catalog and Koin pricing — static data, no DB access.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class KoinPackage:
    koins: int
    product_id: str
    price: float        # EUR


@dataclass(frozen=True)
class XpBoost:
    id: str
    name: str
    xp_amount: int
    price: int
    emoji: str


@dataclass(frozen=True)
class AccessoryItem:
    id: str
    name: str
    type: str           # 'hat' | 'sunglasses' | 'shoes'
    price: int
    main_color: str
    emoji: str
    description: str
    popular: bool = False


@dataclass(frozen=True)
class BackgroundItem:
    id: str
    name: str
    description: str
    url: str
    price: int
    emoji: str
    category: str
    popular: bool = False


KOIN_PACKAGES: list[KoinPackage] = [
    KoinPackage(10,   "prod_TJrIjoHwTKwg9c", 0.5),
    KoinPackage(50,   "prod_TJrJHiNKtOkEXR", 1),
    KoinPackage(500,  "prod_TJrJT9hFwWozod", 2),
    KoinPackage(1000, "prod_TJrKh3jSiA5EQ5", 3),
    KoinPackage(5000, "prod_TJrLUfvqFCZx8l", 10),
]

PACKAGE_BY_PRODUCT: dict[str, KoinPackage] = {p.product_id: p for p in KOIN_PACKAGES}

XP_BOOSTS: list[XpBoost] = [
    XpBoost("xp-small",  "Snack",   25,  10, "🍪"),
    XpBoost("xp-medium", "Meal",    50,  20, "🍱"),
    XpBoost("xp-large",  "Feast",   100, 35, "🍗"),
    XpBoost("xp-mega",   "Banquet", 250, 80, "🎂"),
]

XP_BOOST_BY_ID: dict[str, XpBoost] = {b.id: b for b in XP_BOOSTS}

ACCESSORIES: list[AccessoryItem] = [
    # Hats
    AccessoryItem("hat-beret",      "Beret",          "hat",        18, "#2B2B2B", "🎨", "Artistic style at its finest"),
    AccessoryItem("hat-viking",     "Viking helmet",  "hat",        60, "#A9A9A9", "🛡️", "For creatures ready to conquer", popular=True),
    AccessoryItem("hat-pirate",     "Pirate hat",     "hat",        45, "#000000", "🏴‍☠️", "Ahoy! Ready for adventure?"),
    AccessoryItem("hat-santa",      "Santa hat",      "hat",        25, "#D60000", "🎅", "Holiday spirit all year long", popular=True),
    AccessoryItem("hat-top-hat",    "Top hat",        "hat",        50, "#1C1C1C", "🎩", "Absolute elegance"),
    AccessoryItem("hat-robot",      "Robot helmet",   "hat",        90, "#00BFFF", "🤖", "Cutting-edge tech built in", popular=True),
    # Sunglasses and masks
    AccessoryItem("glasses-round",  "Round glasses",  "sunglasses", 20, "#4F4F4F", "👓", "A timeless classic"),
    AccessoryItem("glasses-cyber",  "Cyber visor",    "sunglasses", 40, "#00FFFF", "🕶️", "Futuristic high tech", popular=True),
    AccessoryItem("glasses-rainbow", "Rainbow glasses", "sunglasses", 28, "#FF69B4", "🌈", "See life in colour", popular=True),
    AccessoryItem("mask-oni",       "Oni mask",       "sunglasses", 45, "#B22222", "👹", "The power of a Japanese demon"),
    AccessoryItem("mask-gold",      "Golden mask",    "sunglasses", 60, "#FFD700", "🥇", "Shines bright", popular=True),
    # Shoes
    AccessoryItem("shoes-sandals",  "Summer sandals", "shoes",      15, "#F4A460", "🩴", "Light and beach-ready"),
    AccessoryItem("shoes-armored",  "Armored boots",  "shoes",      55, "#708090", "🥾", "Ready for any battle"),
    AccessoryItem("shoes-slippers", "Cozy slippers",  "shoes",      18, "#F5DEB3", "🥿", "Comfort first", popular=True),
    AccessoryItem("shoes-winged",   "Winged sandals", "shoes",      60, "#E6E6FA", "🪽", "Hermes' speed at your feet", popular=True),
]

ACCESSORY_BY_ID: dict[str, AccessoryItem] = {a.id: a for a in ACCESSORIES}

BACKGROUNDS: list[BackgroundItem] = [
    BackgroundItem("beach",            "Sunny beach",       "Warm sand and the sound of waves",     "/backgrounds/beach-my-monster.jpg",            120, "🏖️", "nature",    popular=True),
    BackgroundItem("castle",           "Medieval castle",   "A majestic castle full of history",    "/backgrounds/castle-my-monster.jpg",           220, "🏯", "fantasy"),
    BackgroundItem("cyber-city",       "Cyber city",        "Neon, holograms and future tech",      "/backgrounds/cyber-city-my-monster.avif",      280, "🌃", "scifi",     popular=True),
    BackgroundItem("volcano",          "Erupting volcano",  "Heat and lava in a dramatic landscape", "/backgrounds/volcano-my-monster.webp",         200, "🌋", "nature"),
    BackgroundItem("enchanted-forest", "Enchanted forest",  "A magical place where nature lives",   "/backgrounds/enchanted-forest-my-monster.jpg", 180, "🌳", "fantasy",   popular=True),
    BackgroundItem("moonbase",         "Moon base",         "Explore the moon and its mysteries",   "/backgrounds/moonbase-my-monster.webp",        300, "🌕", "scifi"),
    BackgroundItem("victorian-city",   "Victorian city",    "Cobbled streets and fine architecture", "/backgrounds/victorian-city-my-monster.jpg",  260, "🏙️", "steampunk", popular=True),
]

BACKGROUND_BY_ID: dict[str, BackgroundItem] = {b.id: b for b in BACKGROUNDS}

BACKGROUND_CATEGORIES = {"nature", "fantasy", "scifi", "steampunk"}


def accessories_by_type(accessory_type: str | None = None) -> list[AccessoryItem]:
    if not accessory_type:
        return list(ACCESSORIES)
    return [a for a in ACCESSORIES if a.type == accessory_type]


def backgrounds_by_category(category: str | None = None) -> list[BackgroundItem]:
    if not category or category == "all":
        return list(BACKGROUNDS)
    return [b for b in BACKGROUNDS if b.category == category]

"""Static vocabulary for turning provider labels into grocery products.

Providers answer in English (Google, Hugging Face, proxies) or Russian
(LLM backends, text on packaging). Everything is mapped to Russian
canonical names and one of the categories below.
"""

from __future__ import annotations

# English label → canonical Russian product name
TRANSLATIONS: dict[str, str] = {
    # Фрукты
    "apple": "яблоко", "banana": "банан", "orange": "апельсин",
    "lemon": "лимон", "pear": "груша", "grape": "виноград",
    "peach": "персик", "plum": "слива", "cherry": "вишня",
    "strawberry": "клубника", "blueberry": "черника", "raspberry": "малина",
    "pineapple": "ананас", "mango": "манго", "kiwi": "киви",
    "watermelon": "арбуз", "melon": "дыня", "apricot": "абрикос",
    "pomegranate": "гранат", "tangerine": "мандарин", "lime": "лайм",
    "grapefruit": "грейпфрут",
    # Овощи
    "tomato": "помидор", "cucumber": "огурец", "carrot": "морковь",
    "onion": "лук", "potato": "картофель", "cabbage": "капуста",
    "pepper": "перец", "bell pepper": "болгарский перец", "garlic": "чеснок",
    "lettuce": "салат", "spinach": "шпинат", "broccoli": "брокколи",
    "cauliflower": "цветная капуста", "zucchini": "кабачок",
    "eggplant": "баклажан", "pumpkin": "тыква", "corn": "кукуруза",
    "bean": "фасоль", "pea": "горох", "celery": "сельдерей",
    "beet": "свекла", "radish": "редис", "ginger": "имбирь",
    "dill": "укроп", "parsley": "петрушка",
    # Молочные продукты
    "milk": "молоко", "cheese": "сыр", "yogurt": "йогурт",
    "butter": "масло сливочное", "cream": "сливки", "sour cream": "сметана",
    "cottage cheese": "творог", "kefir": "кефир",
    "yogurt drink": "питьевой йогурт", "egg": "яйцо",
    # Мясо и птица
    "chicken": "курица", "beef": "говядина", "pork": "свинина",
    "turkey": "индейка", "duck": "утка", "lamb": "баранина",
    "sausage": "колбаса", "salami": "салями", "ham": "ветчина",
    "bacon": "бекон", "minced meat": "фарш", "meatball": "фрикаделька",
    "steak": "стейк",
    # Рыба и морепродукты
    "fish": "рыба", "salmon": "лосось", "tuna": "тунец",
    "trout": "форель", "cod": "треска", "herring": "сельдь",
    "shrimp": "креветки", "prawn": "креветки", "crab": "краб",
    "lobster": "омар", "mussel": "мидии", "oyster": "устрицы",
    "squid": "кальмар", "octopus": "осьминог", "caviar": "икра",
    # Бакалея
    "bread": "хлеб", "rice": "рис", "pasta": "макароны",
    "flour": "мука", "sugar": "сахар", "salt": "соль",
    "oil": "масло растительное", "vinegar": "уксус", "honey": "мед",
    "jam": "варенье", "cereal": "хлопья", "oatmeal": "овсянка",
    "buckwheat": "гречка", "millet": "пшено", "barley": "перловка",
    # Сладости
    "chocolate": "шоколад", "cookie": "печенье", "cracker": "крекер",
    "cake": "торт", "pie": "пирог", "candy": "конфеты",
    "croissant": "круассан", "donut": "пончик", "pancake": "блин",
    # Напитки
    "water": "вода", "juice": "сок", "tea": "чай",
    "coffee": "кофе", "soda": "газировка", "lemonade": "лимонад",
    "wine": "вино", "beer": "пиво", "vodka": "водка",
    # Прочее
    "nut": "орех", "almond": "миндаль", "walnut": "грецкий орех",
    "peanut": "арахис", "hazelnut": "фундук",
    "spice": "специя", "herb": "зелень", "sauce": "соус",
    "ketchup": "кетчуп", "mayonnaise": "майонез", "mustard": "горчица",
    "ice cream": "мороженое", "pizza": "пицца", "sandwich": "сэндвич",
    "burger": "бургер", "soup": "суп", "salad": "салат",
    "dumplings": "пельмени",
}

# Category → representative canonical name substrings (checked in order)
CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "frozen": [
        "мороженое", "пельмени", "вареники", "замороженн", "полуфабрикат",
        "сорбет", "ice cream",
    ],
    "canned": [
        "консерв", "тушенка", "варенье", "джем", "томатная паста", "оливки",
        "маслины", "сгущенное молоко", "лечо",
    ],
    "fruits": [
        "яблоко", "банан", "апельсин", "лимон", "груша", "виноград", "персик",
        "абрикос", "слива", "киви", "манго", "ананас", "клубника", "малина",
        "черника", "вишня", "арбуз", "дыня", "гранат", "мандарин", "лайм",
        "грейпфрут", "фрукты",
        "apple", "banana", "orange", "lemon", "pear", "grape", "peach",
        "mango", "pineapple", "berry", "melon",
    ],
    "vegetables": [
        "помидор", "огурец", "морковь", "картофель", "капуста", "перец",
        "баклажан", "кабачок", "тыква", "свекла", "редис", "чеснок", "имбирь",
        "шпинат", "салат", "петрушка", "укроп", "брокколи", "сельдерей",
        "кукуруза", "фасоль", "горох", "лук", "овощи", "зелень",
        "tomato", "cucumber", "carrot", "potato", "cabbage", "onion",
        "garlic", "broccoli", "lettuce", "zucchini", "eggplant", "vegetable",
    ],
    "dairy": [
        "молоко", "сыр", "йогурт", "сметана", "творог", "кефир",
        "масло сливочное", "ряженка", "простокваша", "сливки", "моцарелла",
        "брынза", "яйц", "яйцо",
        "milk", "cheese", "yogurt", "butter", "cream", "egg",
    ],
    "meat": [
        "курица", "куриц", "говядина", "свинина", "индейка", "утка", "гусь",
        "кролик", "телятина", "баранина", "колбаса", "сосиски", "ветчина",
        "бекон", "сало", "фарш", "котлеты", "шашлык", "стейк", "салями",
        "фрикаделька", "мясо",
        "chicken", "beef", "pork", "turkey", "sausage", "ham", "bacon",
        "steak", "meat",
    ],
    "fish": [
        "рыба", "лосось", "тунец", "селедка", "сельдь", "скумбрия", "треска",
        "форель", "креветки", "кальмар", "мидии", "устрицы", "краб", "икра",
        "омар", "осьминог",
        "fish", "salmon", "tuna", "shrimp", "crab", "seafood",
    ],
    "bakery": [
        "хлеб", "булка", "булочка", "багет", "круассан", "батон", "лаваш",
        "bread", "bun", "bagel", "croissant",
    ],
    "sweets": [
        "шоколад", "печенье", "торт", "пирожное", "конфеты", "вафли",
        "пряники", "зефир", "мармелад", "халва", "кекс", "пончик", "пирог",
        "блин", "крекер",
        "chocolate", "cookie", "cake", "candy", "donut", "pie",
    ],
    "beverages": [
        "вода", "сок", "чай", "кофе", "газировка", "лимонад", "квас",
        "компот", "морс", "какао", "вино", "пиво", "водка", "смузи",
        "water", "juice", "tea", "coffee", "soda", "wine", "beer",
    ],
    "groceries": [
        "рис", "макароны", "мука", "сахар", "соль", "масло растительное",
        "гречка", "крупа", "овсянка", "хлопья", "пшено", "перловка",
        "чечевица", "нут", "орех", "миндаль", "арахис", "фундук", "мед",
        "уксус", "соус", "кетчуп", "майонез", "горчица", "специя",
        "rice", "pasta", "flour", "sugar", "salt", "honey", "sauce",
    ],
}

CATEGORY_DISPLAY_NAMES: dict[str, str] = {
    "fruits": "Фрукты",
    "vegetables": "Овощи",
    "dairy": "Молочные продукты",
    "meat": "Мясо и птица",
    "fish": "Рыба и морепродукты",
    "bakery": "Хлеб и выпечка",
    "sweets": "Сладости",
    "beverages": "Напитки",
    "frozen": "Замороженные продукты",
    "canned": "Консервы",
    "groceries": "Бакалея",
    "other": "Другое",
}

# Substrings that mark a label as food-related
FOOD_KEYWORDS: list[str] = [
    "food", "fruit", "vegetable", "drink", "meat", "dairy", "grain", "bakery",
    "seafood", "nut", "spice", "herb", "sauce", "condiment", "beverage",
    "snack", "sweet", "dessert", "canned", "frozen", "fresh", "produce",
    "еда", "фрукт", "овощ", "напиток", "мясо", "молочн", "зерно", "выпечка",
    "морепродукт", "орех", "специя", "соус", "приправа", "закуска",
    "сладост", "десерт", "консерв", "заморож", "свеж",
]

# Whole words that make a label food-related on their own
FOOD_WORDS: list[str] = sorted({*TRANSLATIONS.keys(), *TRANSLATIONS.values()})

# Whole words that disqualify a label outright
NON_FOOD_TERMS: list[str] = [
    "furniture", "appliance", "electronics", "device", "tool", "equipment",
    "machine", "clothing", "shoe", "accessory", "jewelry", "watch",
    "building", "house", "room", "wall", "floor", "ceiling", "window", "door",
    "vehicle", "car", "bike", "motorcycle", "airplane", "boat", "ship",
    "animal", "pet", "dog", "cat", "bird", "insect", "tree", "flower",
    "person", "people", "human", "face", "hand", "eye", "hair", "body",
    "text", "word", "letter", "number", "symbol", "sign", "logo", "brand",
    "мебель", "техника", "электроника", "устройство", "инструмент",
    "оборудование", "машина", "одежда", "обувь", "часы", "сумка",
    "здание", "дом", "комната", "стена", "пол", "потолок", "окно", "дверь",
    "автомобиль", "велосипед", "животное", "собака", "кошка", "птица",
    "человек", "люди", "лицо", "рука", "текст", "логотип", "бренд",
]

# Whole words/phrases too vague to be a product name
GENERIC_TERMS: list[str] = [
    "food", "foods", "meal", "dish", "product", "products", "ingredient",
    "item", "stuff", "thing", "produce", "grocery", "groceries", "natural foods",
    "whole food", "local food", "staple food", "recipe", "cuisine",
    "еда", "блюдо", "продукт", "продукты", "ингредиент", "предмет", "вещь",
    "продукция", "бакалея", "товар",
    "container", "packaging", "box", "bottle", "can", "jar", "bag", "wrapper",
    "package", "packet", "carton", "tube", "tin", "pot", "vessel",
    "контейнер", "упаковка", "коробка", "бутылка", "банка", "баночка", "пакет",
    "обертка", "тара", "емкость",
    "utensil", "tableware", "kitchenware", "cookware", "cutlery", "plate",
    "bowl", "посуда", "тарелка", "миска",
    "object", "element", "component", "part", "piece", "portion",
    "объект", "элемент", "часть", "кусок", "порция",
    "unknown", "miscellaneous", "various", "assorted", "mixed",
    "неизвестный", "разное", "ассорти",
]

# Substrings of names specific enough to be a shelf product
SPECIFIC_FOODS: list[str] = sorted(
    {
        *TRANSLATIONS.keys(),
        *TRANSLATIONS.values(),
        *(
            kw
            for keywords in CATEGORY_KEYWORDS.values()
            for kw in keywords
        ),
    }
)

# Descriptive words that make a line of on-package text worth a closer look
FOOD_INDICATORS: list[str] = [
    "round", "oval", "long", "thin", "thick", "small", "large", "fresh",
    "ripe", "raw", "cooked",
    "круглый", "овальный", "длинный", "тонкий", "толстый", "маленький",
    "большой", "свежий", "свежее", "спелый", "сырой", "готовый",
    "red", "green", "yellow", "orange", "brown", "white", "pink", "purple",
    "красный", "зеленый", "желтый", "оранжевый", "коричневый", "белый",
    "розовый", "фиолетовый",
    "smooth", "soft", "hard", "crunchy", "juicy",
    "гладкий", "мягкий", "твердый", "хрустящий", "сочный",
]

# Cross-language pairs that name the same product
SYNONYM_PAIRS: list[tuple[str, str]] = [
    ("яблоко", "apple"), ("апельсин", "orange"), ("банан", "banana"),
    ("лимон", "lemon"), ("помидор", "tomato"), ("помидор", "томат"),
    ("огурец", "cucumber"), ("морковь", "carrot"), ("лук", "onion"),
    ("картофель", "potato"), ("картофель", "картошка"),
    ("капуста", "cabbage"), ("перец", "pepper"), ("баклажан", "eggplant"),
    ("молоко", "milk"), ("сыр", "cheese"), ("йогурт", "yogurt"),
    ("сметана", "sour cream"), ("курица", "chicken"), ("говядина", "beef"),
    ("свинина", "pork"), ("рыба", "fish"), ("хлеб", "bread"), ("рис", "rice"),
    ("макароны", "pasta"), ("сахар", "sugar"), ("яйцо", "egg"),
    ("яйцо", "яйца"), ("креветки", "shrimp"), ("креветки", "prawn"),
    ("сельдь", "селедка"), ("сельдь", "herring"),
]

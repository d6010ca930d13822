from pocket_ledger.models import DEFAULT_CATEGORY_ID, Category

CATEGORIES: tuple[Category, ...] = (
    Category(id="salaire", name="Salaire", icon="work", color="#4CAF50"),
    Category(id="freelance", name="Freelance", icon="laptop", color="#2196F3"),
    Category(id="investissement", name="Investissement", icon="trending-up", color="#9C27B0"),
    Category(id="cadeau", name="Cadeau", icon="card-giftcard", color="#FF9800"),
    Category(id="nourriture", name="Nourriture", icon="restaurant", color="#FF5722"),
    Category(id="transport", name="Transport", icon="directions-car", color="#607D8B"),
    Category(id="logement", name="Logement", icon="home", color="#795548"),
    Category(id="loisirs", name="Loisirs", icon="sports-esports", color="#E91E63"),
    Category(id="sante", name="Santé", icon="local-hospital", color="#00BCD4"),
    Category(id=DEFAULT_CATEGORY_ID, name="Autre", icon="add-circle-outline", color="#9E9E9E"),
)

_BY_ID = {category.id: category for category in CATEGORIES}


def list_categories() -> tuple[Category, ...]:
    return CATEGORIES


def get_category(category_id: str | None) -> Category:
    """Look up a category; unknown or empty ids resolve to the default one."""
    key = (category_id or "").strip().lower()
    return _BY_ID.get(key, _BY_ID[DEFAULT_CATEGORY_ID])

"""Values seeded into a fresh store."""

from ledger.models.records import AppSettings, Category, TransactionKind


def default_categories() -> list[Category]:
    """The starter set of expense and income categories."""
    expense = TransactionKind.EXPENSE
    income = TransactionKind.INCOME
    return [
        Category(id="1", name="Food & Dining", kind=expense, color="#ef4444", icon="UtensilsCrossed"),
        Category(id="2", name="Transportation", kind=expense, color="#f97316", icon="Car"),
        Category(id="3", name="Shopping", kind=expense, color="#eab308", icon="ShoppingBag"),
        Category(id="4", name="Entertainment", kind=expense, color="#a855f7", icon="Gamepad2"),
        Category(id="5", name="Bills & Utilities", kind=expense, color="#06b6d4", icon="Receipt"),
        Category(id="6", name="Healthcare", kind=expense, color="#ec4899", icon="Heart"),
        Category(id="7", name="Salary", kind=income, color="#22c55e", icon="Banknote"),
        Category(id="8", name="Freelance", kind=income, color="#10b981", icon="Briefcase"),
        Category(id="9", name="Investments", kind=income, color="#059669", icon="TrendingUp"),
        Category(id="10", name="Other Income", kind=income, color="#16a34a", icon="PlusCircle"),
    ]


def default_app_settings() -> AppSettings:
    return AppSettings()

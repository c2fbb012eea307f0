APP_NAME = "Corre"
APP_WIDTH = 1100
APP_HEIGHT = 760
DB_FILE = "corre.db"

DATE_FORMAT = "%Y-%m-%d"
# Transactions are stored at noon so a local date never drifts across midnight
TRANSACTION_TIME = "12:00:00"

# Dataset names in the key-value store
DATASET_TRANSACTIONS = "transactions"
DATASET_FIXED_EXPENSES = "fixedExpenses"
DATASET_CREDIT_CARDS = "creditCards"
DATASET_GOAL_SETTINGS = "goalSettings"

TRANSACTION_TYPES = ("income", "expense")
RECURRENCE_TYPES = ("monthly", "installments", "single")

RECURRENCE_LABELS = {
    "monthly": "Monthly",
    "installments": "Installments",
    "single": "One-off",
}

FUEL_KEYWORDS = ("combustível", "gasolina", "etanol", "diesel", "abastec", "posto")

DELIVERY_APPS = ["iFood", "99", "Rappi", "Lalamove", "Uber", "Loggi", "Borborema", "Particular"]
EXPENSE_CATEGORIES = ["Combustível", "Manutenção", "Alimentação", "Aluguel", "Financiamento", "Multa", "Outros"]
FIXED_CATEGORIES = ["Aluguel", "Financiamento", "Internet", "Alimentação", "Luz", "Água", "Cartão"]

CARD_COLORS = ["#3b82f6", "#ef4444", "#10b981", "#f59e0b", "#8b5cf6", "#ec4899", "#0f172a"]

DEFAULT_SETTINGS = [
    ("appearance_mode", "system"),
    ("currency_symbol", "R$"),
    ("date_format", "DD/MM/YYYY"),
]

COLOR_INCOME = "#4CAF50"
COLOR_EXPENSE = "#F44336"
COLOR_INFO = "#2196F3"
COLOR_WARNING = "#FF9800"
COLOR_SAVINGS = "#f59e0b"

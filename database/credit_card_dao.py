from database.collection_dao import CollectionDAO
from models.credit_card import CreditCard
from utils.constants import DATASET_CREDIT_CARDS


class CreditCardDAO(CollectionDAO):
    dataset = DATASET_CREDIT_CARDS
    model = CreditCard

    def get_by_name(self, name: str) -> CreditCard | None:
        key = name.strip().lower()
        return next((c for c in self._load() if c.name.strip().lower() == key), None)

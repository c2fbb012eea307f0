import logging

from database.db_manager import DatabaseManager

logger = logging.getLogger(__name__)

# What a malformed stored or imported row can raise from `from_dict`
ROW_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


class CollectionDAO:
    """A dataset holding a list of records keyed by `id`.

    The dataset is read once, kept in memory, and written back whole after
    every mutation. Records are immutable; updates replace by id. Rows that
    no longer parse are logged and left out.
    """

    dataset: str = ""
    model: type

    def __init__(self, db: DatabaseManager):
        self._db = db
        self._items: list | None = None

    def _load(self) -> list:
        if self._items is None:
            raw = self._db.load_dataset(self.dataset, [])
            self._items = self._parse_rows(raw if isinstance(raw, list) else [])
        return self._items

    def _parse_rows(self, rows: list) -> list:
        items = []
        for row in rows:
            try:
                items.append(self.model.from_dict(row))
            except ROW_ERRORS:
                logger.warning({
                    "event": "load_dataset",
                    "dataset": self.dataset,
                    "status": "skipped_row",
                    "row": repr(row)[:80],
                })
        return items

    def _save(self):
        self._db.save_dataset(self.dataset, [item.to_dict() for item in self._load()])

    def reload(self):
        self._items = None

    def get_all(self) -> list:
        return list(self._load())

    def get_by_id(self, item_id: str):
        return next((i for i in self._load() if i.id == item_id), None)

    def create(self, item):
        self._items = self._load() + [item]
        self._save()
        return item

    def update(self, item):
        items = self._load()
        if not any(i.id == item.id for i in items):
            raise ValueError(f"No record with id {item.id}.")
        self._items = [item if i.id == item.id else i for i in items]
        self._save()
        return item

    def delete(self, item_id: str):
        self._items = [i for i in self._load() if i.id != item_id]
        self._save()

    def replace_all(self, items: list):
        self._items = list(items)
        self._save()

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable, Generic, Optional, TypeVar

from salesdash.domain.errors import AuthenticationError, ValidationError

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CollectionMessages:
    load: str
    save: str
    delete: str


PRODUCT_MESSAGES = CollectionMessages(
    load="Error al cargar los productos",
    save="Error al guardar el producto",
    delete="Error al eliminar el producto",
)
SALE_MESSAGES = CollectionMessages(
    load="Error al cargar las ventas",
    save="Error al guardar la venta",
    delete="Error al eliminar la venta",
)


class RecordCollection(Generic[T]):
    """In-memory list of one record type, reconciled after each write.

    ``items`` changes only once the backend call has returned successfully;
    failures leave it untouched and set ``error`` to a user-facing message.
    Deletes go through ``request_delete`` then ``confirm_delete``.
    """

    def __init__(
        self,
        fetch_all: Callable[[], list[T]],
        create: Optional[Callable[[Any], T]] = None,
        update: Optional[Callable[[int, Any], T]] = None,
        delete: Optional[Callable[[int], None]] = None,
        messages: CollectionMessages = PRODUCT_MESSAGES,
        key: Callable[[T], int] = lambda record: record.id,  # type: ignore[attr-defined]
        fetch_one: Optional[Callable[[int], T]] = None,
    ):
        self._fetch_all = fetch_all
        self._fetch_one = fetch_one
        self._create = create
        self._update = update
        self._delete = delete
        self.messages = messages
        self.key = key

        self.items: list[T] = []
        self.error: Optional[str] = None
        self.is_loading = False
        self.pending_delete_id: Optional[int] = None

    def _fail(self, message: str, exc: Exception) -> None:
        self.error = message
        log.exception("%s: %s", message, exc)

    def _run(self, message: str, call: Callable[[], Any]) -> tuple[bool, Any]:
        self.is_loading = True
        try:
            return True, call()
        except ValidationError:
            raise
        except AuthenticationError as e:
            self._fail(message, e)
            raise
        except Exception as e:
            self._fail(message, e)
            return False, None
        finally:
            self.is_loading = False

    def load(self) -> bool:
        self.error = None
        ok, rows = self._run(self.messages.load, self._fetch_all)
        if ok:
            self.items = list(rows)
        return ok

    def replace(self, items: list[T]) -> None:
        self.items = list(items)
        self.error = None

    def find(self, record_id: int) -> Optional[T]:
        for record in self.items:
            if self.key(record) == record_id:
                return record
        return None

    def reload(self, record_id: int) -> Optional[T]:
        """Fetch one record again and swap it into ``items``."""
        if self._fetch_one is None:
            raise NotImplementedError("reload is not supported for this collection")
        self.error = None
        ok, record = self._run(self.messages.load, lambda: self._fetch_one(record_id))
        if not ok:
            return None
        self.items = [record if self.key(it) == record_id else it for it in self.items]
        return record

    def create(self, payload: Any) -> Optional[T]:
        if self._create is None:
            raise NotImplementedError("create is not supported for this collection")
        self.error = None
        ok, record = self._run(self.messages.save, lambda: self._create(payload))
        if not ok:
            return None
        self.items = [*self.items, record]
        return record

    def update(self, record_id: int, payload: Any) -> Optional[T]:
        if self._update is None:
            raise NotImplementedError("update is not supported for this collection")
        self.error = None
        ok, record = self._run(self.messages.save, lambda: self._update(record_id, payload))
        if not ok:
            return None
        self.items = [record if self.key(it) == record_id else it for it in self.items]
        return record

    def request_delete(self, record_id: int) -> None:
        self.pending_delete_id = record_id

    def cancel_delete(self) -> None:
        self.pending_delete_id = None

    def confirm_delete(self) -> bool:
        if self._delete is None:
            raise NotImplementedError("delete is not supported for this collection")
        record_id = self.pending_delete_id
        if record_id is None:
            return False
        self.error = None
        ok, _ = self._run(self.messages.delete, lambda: self._delete(record_id))
        if not ok:
            return False
        self.items = [it for it in self.items if self.key(it) != record_id]
        self.pending_delete_id = None
        return True

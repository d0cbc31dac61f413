"""Error taxonomy for menu ingestion."""


class IngestionError(Exception):
    """Base class for errors raised by the ingestion core."""


class ValidationError(IngestionError):
    """A scraped record field is malformed or out of range."""

    def __init__(self, field: str, constraint: str) -> None:
        super().__init__(f"{field}: {constraint}")
        self.field = field
        self.constraint = constraint


class NotFoundError(IngestionError):
    """A referenced entity does not exist."""

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(f"{entity} '{key}' not found")
        self.entity = entity
        self.key = key


class ConflictError(IngestionError):
    """A concurrent writer created the same entity first."""

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(f"{entity} '{key}' already exists")
        self.entity = entity
        self.key = key


class StorageError(IngestionError):
    """The persistence layer failed."""

    def __init__(
        self,
        detail: str,
        *,
        step: str | None = None,
        food_name: str | None = None,
    ) -> None:
        self.detail = detail
        self.step = step
        self.food_name = food_name
        super().__init__(self._render())

    def with_context(self, step: str, food_name: str | None) -> "StorageError":
        """Return a copy annotated with the failing step and food."""
        return StorageError(
            self.detail,
            step=self.step or step,
            food_name=self.food_name or food_name,
        )

    def _render(self) -> str:
        context = [
            f"{key}={value}"
            for key, value in (("step", self.step), ("food", self.food_name))
            if value
        ]
        if not context:
            return self.detail
        return f"{self.detail} ({', '.join(context)})"

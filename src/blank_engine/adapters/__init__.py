"""Host adapters for the blank defect engine."""

__all__: list[str] = []

"""Custom exceptions for the document context."""

from typing import Optional


class InvalidDocumentError(ValueError):
    """
    Exception raised when serialized résumé data does not match the document schema.

    Attributes:
        message: Error description
        path: Dotted location of the offending value (e.g., "modules[2].items[0].name")
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class ModuleShapeError(TypeError):
    """
    Exception raised when an item does not match its module's type.

    Skills modules hold only skill items; every other module type holds only
    résumé items. Mixing the two is a programming error.
    """

    def __init__(self, module_id: str, module_type: str, item_kind: str):
        self.module_id = module_id
        self.module_type = module_type
        self.item_kind = item_kind
        super().__init__(
            f"Module '{module_id}' of type '{module_type}' cannot hold a {item_kind}"
        )

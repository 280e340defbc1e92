"""
Exceptions raised by noodle_persistence.

All of them derive from NoodlePersistenceError, itself a RuntimeError, and
carry a ``context`` dict naming what they concern (collection, region,
configuration key...). ``str()`` renders the message followed by that context.
"""

from typing import Any, Dict, List, Optional


def _merge_context(context: Optional[Dict[str, Any]], **fields: Any) -> Dict[str, Any]:
    # Unset fields are left out of the rendered context
    merged = dict(context or {})
    merged.update({key: value for key, value in fields.items() if value is not None})
    return merged


class NoodlePersistenceError(RuntimeError):
    """
    Root of the persistence error hierarchy.

    Attributes:
        message: Error message without the context suffix
        context: What the error concerns
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})

    def __str__(self) -> str:
        if not self.context:
            return self.message
        rendered = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} (context: {rendered})"


class InitializationError(NoodlePersistenceError):
    """MongoDB could not be reached, or collections could not be prepared."""

    def __init__(
        self,
        message: str,
        mongo_uri: Optional[str] = None,
        db_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, _merge_context(context, mongo_uri=mongo_uri, db_name=db_name))
        self.mongo_uri = mongo_uri
        self.db_name = db_name


class ConfigurationError(NoodlePersistenceError):
    """
    A configuration value is missing or out of range.

    ``config_value`` is recorded even when falsy (a pool size of 0).
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message, _merge_context(context, config_key=config_key, config_value=config_value)
        )
        self.config_key = config_key
        self.config_value = config_value


class MappingError(NoodlePersistenceError):
    """
    A document mapping disagrees with its record type, or a stored document
    cannot be decoded into it.
    """

    def __init__(
        self,
        message: str,
        document_type: Optional[str] = None,
        attribute: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message, _merge_context(context, document_type=document_type, attribute=attribute)
        )
        self.document_type = document_type
        self.attribute = attribute


class RepositoryError(NoodlePersistenceError):
    """
    The driver failed a repository or region operation.

    The collection (or region) name is rendered under the ``collection`` key.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        collection_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message, _merge_context(context, operation=operation, collection=collection_name)
        )
        self.operation = operation
        self.collection_name = collection_name


class IndexManagementError(NoodlePersistenceError):
    """A declared secondary index could not be created."""

    def __init__(
        self,
        message: str,
        index_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, _merge_context(context, index_name=index_name))
        self.index_name = index_name


class SeedValidationError(NoodlePersistenceError):
    """Seed data does not match the menu item schema; lists every bad path."""

    def __init__(
        self,
        message: str,
        error_paths: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, _merge_context(context, error_paths=error_paths or None))
        self.error_paths = error_paths

"""
Explicit Document Mapping

Maps plain record types to MongoDB documents through a declaration object
instead of introspection: each record names its collection, its primary key,
the document key of every persisted attribute and the secondary indexes to
maintain.

Example:
    @dataclass(frozen=True)
    class Ingredient(MappedDocument):
        name: str
        description: str | None = None

        __mapping__: ClassVar[DocumentMapping] = DocumentMapping(
            collection="",
            id_attribute=None,
            fields=(FieldMapping("name"), FieldMapping("description")),
        )

    @dataclass
    class MenuItem(MappedDocument):
        id: str | None = None
        name: str = ""
        ingredients: set[Ingredient] = field(default_factory=set)

        __mapping__: ClassVar[DocumentMapping] = DocumentMapping(
            collection="menu",
            fields=(
                FieldMapping("name", key="itemName"),
                FieldMapping.embedded("ingredients", Ingredient, many=True, container=set),
            ),
            indexes=(IndexSpec.ascending("itemName"),),
        )
"""

import dataclasses
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, ClassVar, TypeVar

from bson import Decimal128, ObjectId

from ..exceptions import MappingError

D = TypeVar("D", bound="MappedDocument")


@dataclass(frozen=True)
class FieldMapping:
    """
    One persisted attribute of a mapped record.

    Attributes:
        attribute: Attribute name on the record
        key: Document key the value is stored under (defaults to attribute)
        encode: Optional conversion applied before storing a non-None value
        decode: Optional conversion applied after loading a non-None value
    """

    attribute: str
    key: str | None = None
    encode: Callable[[Any], Any] | None = None
    decode: Callable[[Any], Any] | None = None

    @property
    def document_key(self) -> str:
        return self.key or self.attribute

    def to_value(self, value: Any) -> Any:
        if value is None or self.encode is None:
            return value
        return self.encode(value)

    def from_value(self, value: Any) -> Any:
        if value is None or self.decode is None:
            return value
        return self.decode(value)

    @classmethod
    def embedded(
        cls,
        attribute: str,
        document_type: type["MappedDocument"],
        key: str | None = None,
        many: bool = False,
        container: Callable[[Iterable[Any]], Any] = list,
    ) -> "FieldMapping":
        """
        Map an attribute holding one or many embedded mapped records.

        Args:
            attribute: Attribute name on the record
            document_type: MappedDocument subclass of the embedded value(s)
            key: Document key (defaults to attribute)
            many: Whether the attribute holds a collection of records
            container: Collection type rebuilt on load when many=True
        """
        if many:
            return cls(
                attribute,
                key=key,
                encode=lambda values: [value.to_document() for value in values],
                decode=lambda docs: container(document_type.from_document(doc) for doc in docs),
            )
        return cls(
            attribute,
            key=key,
            encode=lambda value: value.to_document(),
            decode=document_type.from_document,
        )

    @classmethod
    def decimal(cls, attribute: str, key: str | None = None) -> "FieldMapping":
        """Map a Decimal attribute to BSON Decimal128."""
        return cls(attribute, key=key, encode=Decimal128, decode=_to_decimal)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal128):
        return value.to_decimal()
    return Decimal(str(value))


@dataclass(frozen=True)
class IndexSpec:
    """
    Secondary index declaration, expressed in document keys.

    Attributes:
        keys: Sequence of (document_key, direction) pairs
        name: Index name (defaults to MongoDB's "<key>_<direction>" naming)
        unique: Whether the index enforces uniqueness
        sparse: Whether documents missing the key are left out of the index
    """

    keys: tuple[tuple[str, Any], ...]
    name: str | None = None
    unique: bool = False
    sparse: bool = False

    @property
    def index_name(self) -> str:
        if self.name:
            return self.name
        return "_".join(f"{key}_{direction}" for key, direction in self.keys)

    def options(self) -> dict[str, Any]:
        """Keyword options for create_index()."""
        options: dict[str, Any] = {"name": self.index_name}
        if self.unique:
            options["unique"] = True
        if self.sparse:
            options["sparse"] = True
        return options

    @classmethod
    def ascending(cls, key: str, **kwargs: Any) -> "IndexSpec":
        return cls(keys=((key, 1),), **kwargs)


@dataclass(frozen=True)
class DocumentMapping:
    """
    Declaration of how a record type is stored.

    Attributes:
        collection: Collection (or region) name; empty for embedded records
        fields: Persisted attributes other than the primary key
        id_attribute: Attribute stored as ``_id``; None for embedded records
        object_id: Convert 24-hex string keys to ObjectId when storing
        indexes: Secondary indexes maintained on the collection
    """

    collection: str
    fields: tuple[FieldMapping, ...] = ()
    id_attribute: str | None = "id"
    object_id: bool = True
    indexes: tuple[IndexSpec, ...] = ()

    def key_for(self, attribute: str) -> str:
        """
        Get the document key an attribute is stored under.

        Raises:
            MappingError: If the attribute is not part of the mapping
        """
        if attribute == self.id_attribute:
            return "_id"
        for field_mapping in self.fields:
            if field_mapping.attribute == attribute:
                return field_mapping.document_key
        raise MappingError(
            f"Attribute '{attribute}' is not mapped",
            attribute=attribute,
            context={"collection": self.collection},
        )

    def validate(self, document_type: type) -> None:
        """
        Check the declaration against the record type.

        Raises:
            MappingError: On unknown attributes, duplicate document keys or
                indexes over keys the mapping never writes
        """
        type_name = document_type.__name__
        known = {f.name for f in dataclasses.fields(document_type)}

        declared = [f.attribute for f in self.fields]
        if self.id_attribute:
            declared.append(self.id_attribute)
        for attribute in declared:
            if attribute not in known:
                raise MappingError(
                    f"Mapped attribute '{attribute}' does not exist on {type_name}",
                    document_type=type_name,
                    attribute=attribute,
                )

        document_keys = [f.document_key for f in self.fields]
        duplicates = {k for k in document_keys if document_keys.count(k) > 1}
        if duplicates or "_id" in document_keys:
            raise MappingError(
                f"Document keys must be unique on {type_name}",
                document_type=type_name,
                context={"duplicates": sorted(duplicates | ({"_id"} & set(document_keys)))},
            )

        writable = set(document_keys) | {"_id"}
        for index in self.indexes:
            for key, _direction in index.keys:
                if key.split(".", 1)[0] not in writable:
                    raise MappingError(
                        f"Index '{index.index_name}' references unmapped key '{key}'",
                        document_type=type_name,
                        context={"index": index.index_name},
                    )

    def encode_id(self, value: Any) -> Any:
        if self.object_id and isinstance(value, str) and ObjectId.is_valid(value):
            return ObjectId(value)
        return value

    def decode_id(self, value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        return value

    def to_document(self, record: Any) -> dict[str, Any]:
        """Encode a record. None values, including an unset key, are omitted."""
        document: dict[str, Any] = {}
        if self.id_attribute:
            identifier = getattr(record, self.id_attribute)
            if identifier is not None:
                document["_id"] = self.encode_id(identifier)
        for field_mapping in self.fields:
            value = getattr(record, field_mapping.attribute)
            if value is not None:
                document[field_mapping.document_key] = field_mapping.to_value(value)
        return document

    def from_document(self, document_type: type[D], document: dict[str, Any] | None) -> D | None:
        """
        Decode a document. Keys the mapping does not declare are ignored and
        missing keys fall back to the record's defaults.
        """
        if document is None:
            return None

        values: dict[str, Any] = {}
        if self.id_attribute and "_id" in document:
            values[self.id_attribute] = self.decode_id(document["_id"])
        for field_mapping in self.fields:
            if field_mapping.document_key in document:
                values[field_mapping.attribute] = field_mapping.from_value(
                    document[field_mapping.document_key]
                )

        try:
            return document_type(**values)
        except TypeError as e:
            raise MappingError(
                f"Cannot build {document_type.__name__} from document: {e}",
                document_type=document_type.__name__,
                context={"collection": self.collection},
            ) from e


class MappedDocument:
    """
    Base class for records carrying a ``__mapping__`` declaration.
    """

    __mapping__: ClassVar[DocumentMapping]

    def to_document(self) -> dict[str, Any]:
        return type(self).__mapping__.to_document(self)

    @classmethod
    def from_document(cls: type[D], document: dict[str, Any] | None) -> D | None:
        return cls.__mapping__.from_document(cls, document)

    @classmethod
    def document_key(cls, attribute: str) -> str:
        return cls.__mapping__.key_for(attribute)

    @property
    def key(self) -> Any:
        """Primary key value of this record."""
        id_attribute = type(self).__mapping__.id_attribute
        return getattr(self, id_attribute) if id_attribute else None

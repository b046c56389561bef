import logging
from typing import (
    Any,
    AsyncGenerator,
    Callable,
    ClassVar,
    Dict,
    List,
    Optional,
    Tuple,
    Union,
)

from google.cloud.firestore_v1 import ArrayUnion, AsyncClient
from google.cloud.firestore_v1.base_query import FieldFilter
from google.cloud.firestore_v1.field_path import FieldPath

from .enums import BatchOperation, FirestoreOperators
from .firestore_client import FirestoreDB
from .firestore_fields import FirestoreField
from .pydantic_compat import (
    BaseModel,
    ConfigDict,
    Field,
    PydanticVersion,
    get_model_config,
    get_model_fields,
    ValidationError,
    model_construct_compat,
    model_dump_compat,
)

FieldType = Union[str, FirestoreField]
FilterType = Tuple[FieldType, Union[FirestoreOperators, str], Any]
# Evaluated in process against the raw document dict
MatchType = Callable[[Dict[str, Any]], bool]

logger = logging.getLogger(__name__)


class BaseFirestoreModel(BaseModel):
    """
    Base ODM for Firestore with asynchronous operations.
    """

    # --------------------------------------------------------------------------
    # Default field (document ID)
    # --------------------------------------------------------------------------
    id: Optional[str] = Field(default=None)

    # --------------------------------------------------------------------------
    # Injected FirestoreDB instance
    # --------------------------------------------------------------------------
    _db: ClassVar[Optional[FirestoreDB]] = None

    # --------------------------------------------------------------------------
    # Collection definition
    # --------------------------------------------------------------------------
    class Settings:
        name: str = "BaseCollection"  # Override in subclasses
        immutable_fields: frozenset = frozenset()  # never written by update()

    if PydanticVersion >= 2:
        model_config = ConfigDict(**get_model_config())
    else:
        class Config:
            allow_population_by_field_name = True

    @classmethod
    def initialize_fields(cls) -> None:
        for field_name, field_info in get_model_fields(cls).items():
            alias = (
                FieldPath.document_id() if field_name == "id"
                else (field_info.alias or field_name)
            )
            setattr(cls, field_name, FirestoreField(alias))

    @classmethod
    def initialize_db(cls, db: FirestoreDB):
        """
        Inject the FirestoreDB instance to be used for all operations.
        """
        cls._db = db

    @classmethod
    def _client(cls) -> AsyncClient:
        if not cls._db:
            raise RuntimeError("Database must be initialized before using the model.")
        return cls._db.client

    @classmethod
    def get_collection_name(cls) -> str:
        if hasattr(cls, "Settings") and hasattr(cls.Settings, "name"):
            return cls.Settings.name
        return cls.__name__

    @property
    def collection_name(self) -> str:
        return self.get_collection_name()

    @classmethod
    def immutable_fields(cls) -> frozenset:
        return frozenset(getattr(cls.Settings, "immutable_fields", ()))

    @classmethod
    def from_snapshot(cls, doc_id: str, data: Dict[str, Any]) -> "BaseFirestoreModel":
        data = dict(data)
        data["id"] = doc_id
        return cls(**data)

    # --------------------------------------------------------------------------
    # CRUD operations: create/update/delete
    # --------------------------------------------------------------------------
    async def save(self, exclude_none=True, by_alias=True, exclude_unset=False) -> "BaseFirestoreModel":
        """
        Create the document in Firestore.

        Raises ``RuntimeError`` if a document with the same explicit id exists.
        """
        db_client = self._client()

        data_to_save = model_dump_compat(
            self,
            exclude={"id"},
            exclude_unset=exclude_unset,
            exclude_none=exclude_none,
            by_alias=by_alias,
        )
        collection_ref = db_client.collection(self.collection_name)

        if not self.id:
            doc_ref = collection_ref.document()
            self.id = doc_ref.id
        else:
            doc_ref = collection_ref.document(self.id)
            if (await doc_ref.get()).exists:
                raise RuntimeError("Error creating object: provided ID already exists.")

        await doc_ref.set(data_to_save)
        return self

    async def update(
        self,
        include: Optional[set] = None,
        exclude_none=True,
        by_alias=True,
        exclude_unset=False,
    ) -> "BaseFirestoreModel":
        """
        Write the model's mutable fields to the existing document.

        Fields listed in ``Settings.immutable_fields`` are never sent, even
        when named in ``include``.
        """
        db_client = self._client()

        if not self.id:
            raise ValueError("Cannot update a document without an ID.")

        doc_ref = db_client.collection(self.collection_name).document(self.id)

        updates = model_dump_compat(
            self,
            exclude={"id"} | set(self.immutable_fields()),
            include=include,
            exclude_unset=exclude_unset,
            exclude_none=exclude_none,
            by_alias=by_alias,
        )

        logger.debug(f"Update: {self.collection_name} - id={self.id}, updates={updates}")
        if updates:
            await doc_ref.update(updates)
        return self

    async def append_to_array(self, field_name: str, *values: Any) -> "BaseFirestoreModel":
        """
        Append ``values`` to an array field in the stored document with
        ``ArrayUnion`` and mirror the change on this instance.

        Values are dumped to plain maps first when they are models.
        ``ArrayUnion`` drops a value whose stored form equals an element
        already in the array, so appending an identical map twice keeps one
        copy; the local mirror applies the same comparison to stored forms.
        """
        db_client = self._client()

        if not self.id:
            raise ValueError("Cannot append to a document without an ID.")

        stored = [
            model_dump_compat(v, by_alias=True) if isinstance(v, BaseModel) else v
            for v in values
        ]
        doc_ref = db_client.collection(self.collection_name).document(self.id)
        await doc_ref.update({field_name: ArrayUnion(stored)})

        current = list(getattr(self, field_name) or [])
        present = [
            model_dump_compat(v, by_alias=True) if isinstance(v, BaseModel) else v
            for v in current
        ]
        for value, stored_value in zip(values, stored):
            if stored_value not in present:
                present.append(stored_value)
                current.append(value)
        setattr(self, field_name, current)
        return self

    async def delete(self) -> None:
        """
        Delete the document from Firestore.
        """
        db_client = self._client()

        if not self.id:
            raise ValueError("Cannot delete a document without an ID.")

        doc_ref = db_client.collection(self.collection_name).document(self.id)
        await doc_ref.delete()

    # --------------------------------------------------------------------------
    # Reads
    # --------------------------------------------------------------------------
    @classmethod
    async def get(cls, doc_id: str) -> Optional["BaseFirestoreModel"]:
        """
        Retrieve a document by its ID, or ``None`` when it does not exist.
        """
        db_client = cls._client()

        doc_ref = db_client.collection(cls.get_collection_name()).document(doc_id)
        doc_snap = await doc_ref.get()

        if doc_snap.exists:
            return cls.from_snapshot(doc_snap.id, doc_snap.to_dict())
        return None

    @classmethod
    async def exists(cls, doc_id: str) -> bool:
        db_client = cls._client()

        doc_ref = db_client.collection(cls.get_collection_name()).document(doc_id)
        doc_snap = await doc_ref.get()
        return doc_snap.exists

    @classmethod
    async def count(cls, filters: Optional[List[FilterType]] = None) -> int:
        """
        Return the number of documents matching the given filters.
        """
        db_client = cls._client()

        query = cls._build_query(db_client, filters=filters or [])
        try:
            count_snapshot = await query.count().get()
            return count_snapshot[0][0].value
        except AttributeError:
            logger.warning("Firestore: Performing count by fetching all items with empty select")
            docs = await query.select([]).get()
            return len(docs)

    @classmethod
    async def find(
        cls,
        filters: Optional[List[FilterType]] = None,
        match: Optional[MatchType] = None,
        limit: Optional[int] = None,
        lenient: bool = False,
    ) -> AsyncGenerator["BaseFirestoreModel", None]:
        """
        Yield documents matching ``filters``, in the store's default order.

        ``filters`` run in Firestore. ``match``, when given, is called with
        each raw document dict and drops the ones it rejects; use it for
        conditions Firestore cannot express. ``limit`` is applied by the
        store and so only combines with ``filters``, not with ``match``.

        With ``lenient`` a document that fails validation is yielded
        unvalidated, exactly as stored, instead of aborting the stream.
        """
        db_client = cls._client()

        if limit is not None and match is not None:
            raise ValueError("limit cannot be combined with an in-process match.")

        query = cls._build_query(db_client, filters=filters or [])
        if limit is not None:
            query = query.limit(limit)

        async for doc in query.stream():
            data = doc.to_dict()
            if match is not None and not match(data):
                continue
            data["id"] = doc.id
            try:
                obj = cls(**data)
            except ValidationError as exc:
                if not lenient:
                    raise
                logger.warning(f"{cls.get_collection_name()}/{doc.id} does not match {cls.__name__}: {exc}")
                obj = model_construct_compat(cls, **data)
            yield obj

    @classmethod
    async def find_one(
        cls,
        filters: Optional[List[FilterType]] = None,
    ) -> Optional["BaseFirestoreModel"]:
        """
        Return the first document matching filters, or None if no match.
        """
        async for obj in cls.find(filters=filters, limit=1):
            return obj
        return None

    @classmethod
    def _build_query(
        cls,
        db_client: AsyncClient,
        filters: List[FilterType],
    ):
        query = db_client.collection(cls.get_collection_name())

        for (field_name, op, value) in filters:
            query = query.where(filter=FieldFilter(str(field_name), str(op), value))

        return query

    # --------------------------------------------------------------------------
    # Batch operations
    # --------------------------------------------------------------------------
    @classmethod
    async def batch_write(cls, operations: List[Tuple[BatchOperation, "BaseFirestoreModel"]]):
        """
        Execute atomic batch operations (create, update, delete).
        """
        db_client = cls._client()
        batch = db_client.batch()

        for op, model_instance in operations:
            collection_ref = db_client.collection(model_instance.collection_name)

            if not model_instance.id and op != BatchOperation.CREATE:
                raise ValueError(f"Cannot {op} without an ID assigned on {model_instance}.")

            doc_ref = (
                collection_ref.document(model_instance.id)
                if model_instance.id
                else collection_ref.document()
            )

            if op == BatchOperation.CREATE:
                if not model_instance.id:
                    model_instance.id = doc_ref.id
                batch.set(doc_ref, model_dump_compat(model_instance, exclude={"id"}, exclude_none=True, by_alias=True))

            elif op == BatchOperation.UPDATE:
                exclude = {"id"} | set(model_instance.immutable_fields())
                batch.update(doc_ref, model_dump_compat(model_instance, exclude=exclude, exclude_none=True, by_alias=True))

            elif op == BatchOperation.DELETE:
                batch.delete(doc_ref)

        await batch.commit()

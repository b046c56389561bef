import os
import logging
from typing import Optional, TYPE_CHECKING

from google.cloud.firestore_v1 import AsyncClient

if TYPE_CHECKING:
    from .config import PostboardSettings

logger = logging.getLogger(__name__)


class FirestoreDB:
    """
    Owns the :class:`google.cloud.firestore_v1.AsyncClient` every model reads
    and writes through.

    The client points at a local emulator when ``emulator_host`` is given and
    at the real Firestore backend otherwise. Tests usually replace
    :attr:`client` with a mock after construction.
    """

    def __init__(
        self,
        project_id: str,
        database: Optional[str] = None,
        credentials=None,
        emulator_host: Optional[str] = None,
    ):
        """
        Parameters
        ----------
        project_id :
            Google Cloud project identifier.
        database :
            Optional Firestore database ID (defaults to the default database).
        credentials :
            Explicit credentials; ``None`` uses the SDK default chain.
        emulator_host :
            ``host:port`` of a running Firestore emulator.
        """
        self.project_id = project_id
        self.database = database
        self.credentials = credentials
        self._emulator_host = emulator_host

        self.client: AsyncClient = self._init_client()

    @classmethod
    def from_settings(cls, settings: "PostboardSettings", credentials=None) -> "FirestoreDB":
        return cls(
            project_id=settings.project_id,
            database=settings.database,
            credentials=credentials,
            emulator_host=settings.emulator_host,
        )

    def _init_client(self) -> AsyncClient:
        # The SDK only honours the emulator through FIRESTORE_EMULATOR_HOST.
        if self._emulator_host:
            os.environ["FIRESTORE_EMULATOR_HOST"] = self._emulator_host
            logger.info(f"Using Firestore emulator on {self._emulator_host}")
        else:
            os.environ.pop("FIRESTORE_EMULATOR_HOST", None)
        return AsyncClient(
            project=self.project_id,
            database=self.database,
            credentials=self.credentials,
        )

    def use_emulator(self, host: str = "localhost:8080"):
        """Switch to a local emulator and recreate the client."""
        self._emulator_host = host
        self.client = self._init_client()
        logger.info(f"Emulator enabled on {host}")

    def clear_emulator(self):
        """Reconnect to the production Firestore endpoint."""
        self._emulator_host = None
        self.client = self._init_client()
        logger.info("Emulator disabled – using real Firestore.")

"""Service for looking up shared access codes in the document store."""

from typing import Any, Dict

from database.appwrite.client import DocumentStoreClient
from database.appwrite.models import AccessCode
from database.appwrite.query import Query


class AccessCodeService:
    """Checks user-supplied codes against the access_codes collection.

    Store failures are not handled here: a ``DocumentStoreError`` reaches the
    caller, which decides whether a failed lookup means "denied".
    """

    def __init__(
        self,
        client: DocumentStoreClient,
        database_id: str,
        collection_id: str = "access_codes",
    ):
        """Initialize the service.

        Args:
            client: Document store client
            database_id: Database holding the access codes
            collection_id: Access code collection (default: access_codes)
        """
        self.client = client
        self.database_id = database_id
        self.collection_id = collection_id

    async def verify_access_code(self, code: str) -> bool:
        """Check whether a code exists in the access code collection.

        Args:
            code: Code typed by the user; surrounding whitespace is ignored

        Returns:
            True if at least one document has exactly this code
        """
        code = code.strip()
        if not code:
            return False

        result = await self.client.list_documents(
            self.database_id,
            self.collection_id,
            [Query.equal("code", code), Query.limit(1)],
        )
        return result.total > 0 or len(result.documents) > 0

    async def verify_developer_access_code(self, code_input: str) -> bool:
        """Check a developer code, which must be typed twice separated by a space.

        Args:
            code_input: e.g. "ABC123 ABC123"

        Returns:
            True if both parts are identical and the code exists
        """
        parts = code_input.split()
        if len(parts) != 2 or parts[0] != parts[1]:
            return False
        return await self.verify_access_code(parts[0])

    async def add_access_code(self, code: str) -> Dict[str, Any]:
        """Create a new access code document.

        Args:
            code: Code value

        Returns:
            The created document
        """
        access_code = AccessCode(code=code.strip())
        return await self.client.create_document(
            self.database_id,
            self.collection_id,
            access_code.model_dump(),
        )

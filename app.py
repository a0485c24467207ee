"""Chainlit application: access-code gate in front of a paged client list."""

import chainlit as cl

from config import ACCEPT_LEGACY_ACCESS_FLAG, ACCESS_CODE_EXPIRATION_MS, DEFAULT_PAGE_SIZE
from database.appwrite import AccessCodeService, DocumentStoreError
from database.catalog_adapter import client_page_fetcher
from database.connection import DatabaseManager
from database.debug import print_database_status
from database.redis import RedisKeyValueStore
from logging_config import get_logger, setup_logging
from workflow.access_gate import AccessGate, storage_ttl_seconds
from workflow.debug import print_page_documents
from workflow.formatters import format_currency, format_phone_number
from workflow.pagination import PaginatedQueryController

setup_logging()
logger = get_logger(__name__)

HELP_TEXT = (
    "Commands: `clients`, `next`, `prev`, `page N`, `size N`, `logout`."
)


def _render_page(result) -> str:
    p = result.pagination
    lines = [f"**Clients** (page {p.current_page}/{p.total_pages}, {p.total_items} total)"]
    if not result.data:
        lines.append("- (no clients)")
    for doc in result.data:
        name = doc.get("fullName") or doc.get("name") or doc.get("$id", "?")
        phone = format_phone_number(doc.get("phone"))
        spent = format_currency(doc.get("totalSpent") or 0)
        status = doc.get("loyaltyStatus") or "bronze"
        lines.append(f"- {name} | {phone} | {spent} | {status}")
    return "\n".join(lines)


def _parse_int(arg: str):
    try:
        return int(arg)
    except ValueError:
        return None


def _gate_namespace() -> str:
    """Redis namespace of the cached authorization.

    Authenticated users keep their verification across chat sessions until
    it expires. Anonymous chats have no stable identity, so theirs lasts one
    session.
    """
    user = cl.user_session.get("user")
    if user is not None:
        return f"crm:gate:user:{user.identifier}"
    return f"crm:gate:session:{cl.user_session.get('id')}"


@cl.on_chat_start
async def start():
    """Initialize the chat session."""
    manager = DatabaseManager()
    store = manager.get_document_store()
    await print_database_status(manager)

    gate = AccessGate(
        verifier=AccessCodeService(store, manager.database_id),
        storage=RedisKeyValueStore(
            manager.connect_redis(),
            namespace=_gate_namespace(),
            ttl=storage_ttl_seconds(ACCESS_CODE_EXPIRATION_MS),
        ),
        expiration_ms=ACCESS_CODE_EXPIRATION_MS,
        accept_legacy_flag=ACCEPT_LEGACY_ACCESS_FLAG,
    )
    clients = PaginatedQueryController(
        client_page_fetcher(store, manager.database_id),
        initial_page_size=DEFAULT_PAGE_SIZE,
    )

    cl.user_session.set("manager", manager)
    cl.user_session.set("gate", gate)
    cl.user_session.set("clients", clients)

    if gate.is_authorized:
        await cl.Message(content=f"Welcome back. {HELP_TEXT}").send()
    else:
        await cl.Message(content="Please enter the access code to continue.").send()


@cl.on_chat_end
async def end():
    manager = cl.user_session.get("manager")
    if manager:
        await manager.close_all()


@cl.on_message
async def main(message: cl.Message):
    """Handle incoming messages."""
    gate: AccessGate = cl.user_session.get("gate")
    clients: PaginatedQueryController = cl.user_session.get("clients")
    text = (message.content or "").strip()

    # Expiration is re-checked on every interaction.
    if not gate.check_stored_authorization():
        if await gate.verify_access_code(text):
            await cl.Message(content=f"Access granted. {HELP_TEXT}").send()
        else:
            await cl.Message(content="Access denied. Please try again.").send()
        return

    command, _, arg = text.lower().partition(" ")
    if command == "logout":
        gate.reset_authorization()
        await cl.Message(content="Signed out. Enter the access code to continue.").send()
        return
    if command == "next":
        clients.next_page()
    elif command == "prev":
        clients.prev_page()
    elif command == "page" and _parse_int(arg) is not None:
        clients.go_to_page(_parse_int(arg))
    elif command == "size" and (_parse_int(arg) or 0) > 0:
        clients.set_page_size(_parse_int(arg))
    elif command != "clients":
        await cl.Message(content=HELP_TEXT).send()
        return

    try:
        result = await clients.fetch()
    except DocumentStoreError as e:
        logger.error(f"Failed to load clients: {e}")
        await cl.Message(content=f"Could not load clients: {e}").send()
        return

    print_page_documents(result)
    await cl.Message(content=_render_page(result)).send()

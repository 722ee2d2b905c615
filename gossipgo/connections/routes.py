"""Connection ("friend request") endpoints."""

from fastapi import APIRouter, Depends

from gossipgo.auth.dependencies import CurrentUser, get_current_user
from gossipgo.chats.service import open_direct_chat
from gossipgo.connections.graph import ConnectionGraph
from gossipgo.connections.schemas import ConnectionStatusResponse, ConnectionTargetRequest
from gossipgo.db.client import get_store
from gossipgo.db.store import InMemoryStore
from gossipgo.users.service import get_user
from gossipgo.utils.envelope import ok

router = APIRouter(prefix="/api/connections", tags=["Connections"])


def get_graph(user: CurrentUser = Depends(get_current_user), store: InMemoryStore = Depends(get_store)) -> ConnectionGraph:
    return ConnectionGraph(user.id, store.connections)


@router.get("", summary="List connections", description="Every connection record involving the caller, any status.")
async def list_all(graph: ConnectionGraph = Depends(get_graph)):
    return ok(graph.get_connections())


@router.get("/pending", summary="Pending inbound requests")
async def pending(graph: ConnectionGraph = Depends(get_graph)):
    return ok(graph.get_pending_requests())


@router.get("/accepted", summary="Accepted connections")
async def accepted(graph: ConnectionGraph = Depends(get_graph)):
    return ok(graph.get_connected_users())


@router.get("/{user_id}/status", summary="Connection status with a user")
async def status(user_id: str, graph: ConnectionGraph = Depends(get_graph)):
    return ok(ConnectionStatusResponse(
        user_id=user_id,
        status=graph.get_connection_status(user_id),
        sent_by_me=graph.is_request_sent_by_current_user(user_id),
    ))


@router.post("/request", status_code=201, summary="Send a connection request")
async def request(body: ConnectionTargetRequest, graph: ConnectionGraph = Depends(get_graph), store: InMemoryStore = Depends(get_store)):
    get_user(store, body.user_id)
    return ok(graph.send_connection_request(body.user_id))


@router.post("/accept", summary="Accept a connection request", description="Accepting also opens a direct chat between the two users.")
async def accept(body: ConnectionTargetRequest, graph: ConnectionGraph = Depends(get_graph), store: InMemoryStore = Depends(get_store)):
    conn = graph.accept_connection_request(body.user_id)
    chat = open_direct_chat(store, conn.from_user_id, conn.to_user_id)
    return ok({"connection": conn, "chat_id": chat.id})


@router.post("/decline", summary="Decline a connection request")
async def decline(body: ConnectionTargetRequest, graph: ConnectionGraph = Depends(get_graph)):
    return ok(graph.decline_connection_request(body.user_id))


@router.post("/cancel", summary="Cancel an outgoing pending request")
async def cancel(body: ConnectionTargetRequest, graph: ConnectionGraph = Depends(get_graph)):
    graph.cancel_connection_request(body.user_id)
    return ok({"message": "Connection request cancelled"})

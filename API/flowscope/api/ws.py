from fastapi import APIRouter, WebSocket

router = APIRouter(tags=["websockets"])


@router.websocket("/ws")
async def updates(websocket: WebSocket):
    """Push a topology summary to the client every few seconds until it goes away."""
    await websocket.app.state.broadcaster.serve(websocket)

"""联机对战模块
房主权威的点对点回合同步，基于 WebSocket
"""

from .broadcast import Projection, StateBroadcaster, StateProjector
from .client import GuestClient
from .connection import Channel, ConnectionManager, create_identity
from .host import HostSession
from .protocol import Message, MsgType
from .router import MessageRouter, Role

__all__ = [
    "MsgType", "Message",
    "Channel", "ConnectionManager", "create_identity",
    "MessageRouter", "Role",
    "Projection", "StateProjector", "StateBroadcaster",
    "HostSession", "GuestClient",
]

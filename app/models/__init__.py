# Models package
from .channel import Channel, ChannelType, ChannelStatus, MigrationStatus

__all__ = [
    "Channel", "ChannelType", "ChannelStatus", "MigrationStatus",
]

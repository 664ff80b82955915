"""
Pricing Store

Read/write access to the pricing fields of a channel row. Decodes the stored
JSON documents into ChannelPricing records and writes them back in a single
transaction. Every write is checked against the row version it was read at.
"""

import json
from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..config import settings
from ..errors import NotFoundError, StoreWriteError
from ..models.channel import Channel
from ..schemas.pricing import ModelConfig
from ..utils.db_helpers import acquire_row_lock
from ..utils.logging_config import get_logger
from .config_normalizer import parse_legacy_map, dump_legacy_map, configs_to_document, is_blank_document
from .config_validator import parse_model_configs

logger = get_logger(__name__)


@dataclass
class ChannelPricing:
    """Pricing record of one channel. None means the map is absent."""
    channel_id: int
    legacy_model_ratio: Optional[Dict[str, float]] = None
    legacy_completion_ratio: Optional[Dict[str, float]] = None
    unified_model_configs: Optional[Dict[str, ModelConfig]] = None
    channel_name: str = ""
    channel_type: int = 0
    version: Optional[int] = None

    def unified_document(self) -> Dict[str, dict]:
        return configs_to_document(self.unified_model_configs)


def _decode_channel(channel: Channel) -> ChannelPricing:
    model_ratio = parse_legacy_map(channel.model_ratio, "model_ratio")
    completion_ratio = parse_legacy_map(channel.completion_ratio, "completion_ratio")
    if is_blank_document(channel.model_configs):
        unified = None
    else:
        unified = parse_model_configs(channel.model_configs)

    return ChannelPricing(
        channel_id=channel.id,
        legacy_model_ratio=model_ratio or None,
        legacy_completion_ratio=completion_ratio or None,
        unified_model_configs=unified or None,
        channel_name=channel.name or "",
        channel_type=channel.type or 0,
        version=channel.version,
    )


def _dump_unified(configs: Optional[Dict[str, ModelConfig]]) -> Optional[str]:
    if not configs:
        return None
    return json.dumps(configs_to_document(configs))


class PricingStore:
    """
    Channel pricing persistence over a SQLAlchemy session.

    Writes commit on success and roll back on any failure, so callers never
    observe a half-written record.
    """

    def __init__(self, db: Session):
        self.db = db

    def _get_channel(self, channel_id: int, lock: bool = False) -> Channel:
        if lock:
            channel = acquire_row_lock(
                self.db, Channel, Channel.id == channel_id,
                nowait=settings.pricing_lock_nowait
            )
        else:
            channel = self.db.query(Channel).filter(Channel.id == channel_id).first()
        if channel is None:
            raise NotFoundError(channel_id)
        return channel

    def get(self, channel_id: int, lock: bool = False) -> ChannelPricing:
        """
        Read a channel's pricing.

        With lock=True the row is held FOR UPDATE (PostgreSQL) until the next
        write/rollback, serializing read-modify-write callers.
        """
        try:
            channel = self._get_channel(channel_id, lock=lock)
        except OperationalError as e:
            self.db.rollback()
            logger.warning(f"Lock contention on channel {channel_id}: {e}")
            raise StoreWriteError(channel_id, f"Channel {channel_id} is locked by another operation", conflict=True)
        return _decode_channel(channel)

    def list_ids(self) -> List[int]:
        return [row[0] for row in self.db.query(Channel.id).order_by(Channel.id).all()]

    def write_unified(
        self,
        channel_id: int,
        configs: Optional[Dict[str, ModelConfig]],
        expected_version: Optional[int] = None,
    ) -> ChannelPricing:
        """Replace the unified map; legacy maps are left as they are"""
        return self._write(channel_id, expected_version, model_configs=_dump_unified(configs))

    def write_legacy(
        self,
        channel_id: int,
        model_ratio: Optional[Dict[str, float]],
        completion_ratio: Optional[Dict[str, float]],
        expected_version: Optional[int] = None,
    ) -> ChannelPricing:
        """Replace both legacy maps; the unified map is left as it is"""
        return self._write(
            channel_id,
            expected_version,
            model_ratio=dump_legacy_map(model_ratio),
            completion_ratio=dump_legacy_map(completion_ratio),
        )

    def _write(self, channel_id: int, expected_version: Optional[int], **columns) -> ChannelPricing:
        try:
            channel = self._get_channel(channel_id)
            if expected_version is not None and channel.version != expected_version:
                raise StaleDataError(
                    f"channel {channel_id} is at version {channel.version}, expected {expected_version}"
                )
            for column, value in columns.items():
                setattr(channel, column, value)
            self.db.commit()
        except NotFoundError:
            self.db.rollback()
            raise
        except StaleDataError as e:
            self.db.rollback()
            logger.warning(f"Concurrent update on channel {channel_id}: {e}")
            raise StoreWriteError(
                channel_id,
                f"Channel {channel_id} was modified concurrently, retry the operation",
                conflict=True,
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to write pricing for channel {channel_id}: {e}")
            raise StoreWriteError(channel_id, f"Failed to save pricing for channel {channel_id}: {e}")

        self.db.refresh(channel)
        return _decode_channel(channel)

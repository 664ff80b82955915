"""
Channel Model

Stores a gateway channel together with its pricing fields:
- model_configs: unified per-model config (ratio, completion_ratio, max_tokens)
- model_ratio / completion_ratio: legacy flat rate maps, kept for
  backward-compatible editors and rollback; never purged automatically

All three pricing fields are JSON documents keyed by model name.
"""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, Integer
from ..database import Base
import enum


class ChannelType(int, enum.Enum):
    """Adaptor type of a channel (gateway numbering)"""
    UNKNOWN = 0
    OPENAI = 1
    API2D = 2
    AZURE = 3
    CUSTOM = 8
    PALM = 11
    ANTHROPIC = 14
    BAIDU = 15
    ZHIPU = 16
    ALI = 17
    XUNFEI = 18
    OPENROUTER = 20
    TENCENT = 23
    GEMINI = 24
    MOONSHOT = 25
    BAICHUAN = 26
    MINIMAX = 27
    MISTRAL = 28
    GROQ = 29
    OLLAMA = 30
    LINGYIWANWU = 31
    STEPFUN = 32
    AWS_CLAUDE = 33
    COZE = 34
    COHERE = 35
    DEEPSEEK = 36
    CLOUDFLARE = 37
    TOGETHERAI = 39
    DOUBAO = 40
    NOVITA = 41
    VERTEXAI = 42
    SILICONFLOW = 44
    XAI = 45
    OPENAI_COMPATIBLE = 50


class ChannelStatus(int, enum.Enum):
    UNKNOWN = 0
    ENABLED = 1
    MANUALLY_DISABLED = 2
    AUTO_DISABLED = 3


class MigrationStatus(str, enum.Enum):
    """How far a channel's pricing has moved to unified model configs (derived, never stored)"""
    EMPTY = "empty"
    NEEDS_MIGRATION = "needs_migration"
    MIGRATED = "migrated"
    MIGRATED_WITH_LEGACY = "migrated_with_legacy"


class Channel(Base):
    """
    A gateway channel and its pricing record.

    The version column is bumped on every flush; a write against a row that
    changed since it was read fails instead of silently overwriting.
    """
    __tablename__ = "channels"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), index=True, nullable=False, default="")
    type = Column(Integer, nullable=False, default=ChannelType.OPENAI.value)
    status = Column(Integer, nullable=False, default=ChannelStatus.ENABLED.value)

    # Unified pricing
    model_configs = Column(Text, nullable=True)

    # DEPRECATED: legacy pricing maps, superseded by model_configs
    model_ratio = Column(Text, nullable=True)
    completion_ratio = Column(Text, nullable=True)

    # Optimistic concurrency token
    version = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<Channel id={self.id} name={self.name} type={self.type}>"

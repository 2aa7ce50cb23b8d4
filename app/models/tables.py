# =======================================================================================
# app/models/tables.py - Table Definitions
# =======================================================================================
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("role", String(16), nullable=False, default="user"),
    Column("full_name", String(255), nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

scanners = Table(
    "scanners",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("location", String(255), nullable=False),
    Column("description", Text, nullable=True),
    Column("reader_type", String(8), nullable=False, default="both"),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

tokens = Table(
    "tokens",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("rfid_uid", String(64), nullable=False, unique=True),
    Column("user_id", String(36), ForeignKey("users.id"), nullable=False),
    Column("name", String(255), nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("last_used_at", DateTime(timezone=True), nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

# One row per (user, scanner) pair
scanner_access = Table(
    "scanner_access",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(36), ForeignKey("users.id"), nullable=False),
    Column("scanner_id", String(36), ForeignKey("scanners.id"), nullable=False),
    Column("granted_by", String(36), ForeignKey("users.id"), nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("expires_at", DateTime(timezone=True), nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    UniqueConstraint("user_id", "scanner_id", name="uq_scanner_access_user_scanner"),
)

access_logs = Table(
    "access_logs",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("token_id", String(36), ForeignKey("tokens.id"), nullable=True),
    Column("scanner_id", String(36), ForeignKey("scanners.id"), nullable=False),
    Column("access_granted", Boolean, nullable=False),
    Column("rfid_uid", String(255), nullable=False),
    Column("denial_reason", String(64), nullable=True),
    Column("timestamp", DateTime(timezone=True), nullable=False, index=True),
)

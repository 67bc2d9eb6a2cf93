"""Initial schema: users, profiles, groups, content types, resources, elements

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ELEMENT_TABLES = ("chunks", "snippets", "templates", "plugins", "tvs")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False, server_default=""),
        sa.Column("class_key", sa.String(100), nullable=False, server_default="user"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("blocked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("sudo", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("primary_group", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("remote_data", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )
    op.create_table(
        "user_profiles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "internal_key",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE", name="fk_user_profiles_internal_key_users"),
            nullable=False,
        ),
        sa.Column("fullname", sa.String(255), nullable=False, server_default=""),
        sa.Column("email", sa.String(255), nullable=False, server_default=""),
        sa.Column("phone", sa.String(100), nullable=False, server_default=""),
        sa.Column("mobilephone", sa.String(100), nullable=False, server_default=""),
        sa.Column("gender", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("address", sa.Text(), nullable=False, server_default=""),
        sa.Column("city", sa.String(255), nullable=False, server_default=""),
        sa.Column("state", sa.String(25), nullable=False, server_default=""),
        sa.Column("zip", sa.String(25), nullable=False, server_default=""),
        sa.Column("country", sa.String(255), nullable=False, server_default=""),
        sa.Column("website", sa.String(255), nullable=False, server_default=""),
        sa.Column("comment", sa.Text(), nullable=False, server_default=""),
        sa.Column("extended", sa.JSON(), nullable=True),
        sa.UniqueConstraint("internal_key", name="uq_user_profiles_internal_key"),
    )
    op.create_index("ix_user_profiles_email", "user_profiles", ["email"])
    op.create_table(
        "user_groups",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("parent", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("name", name="uq_user_groups_name"),
    )
    op.create_table(
        "user_group_members",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "group_id",
            sa.Integer(),
            sa.ForeignKey("user_groups.id", ondelete="CASCADE", name="fk_user_group_members_group_id_user_groups"),
            nullable=False,
        ),
        sa.Column(
            "member_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE", name="fk_user_group_members_member_id_users"),
            nullable=False,
        ),
        sa.Column("role", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("rank", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("group_id", "member_id", name="ux_user_group_members_group_member"),
    )
    op.create_index("ix_user_group_members_member_id", "user_group_members", ["member_id"])
    op.create_table(
        "content_types",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("mime_type", sa.String(255), nullable=False, server_default="text/html"),
        sa.Column("file_extensions", sa.String(255), nullable=False, server_default=""),
        sa.Column("headers", sa.JSON(), nullable=True),
        sa.Column("binary", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("name", name="uq_content_types_name"),
    )
    op.create_table(
        "resources",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("pagetitle", sa.String(255), nullable=False, server_default=""),
        sa.Column("alias", sa.String(255), nullable=False, server_default=""),
        sa.Column("parent", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_folder", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "content_type",
            sa.Integer(),
            sa.ForeignKey("content_types.id", ondelete="RESTRICT", name="fk_resources_content_type_content_types"),
            nullable=False,
        ),
        sa.Column("uri", sa.Text(), nullable=False, server_default=""),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("editedby", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("editedon", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_resources_parent", "resources", ["parent"])
    op.create_index("ix_resources_content_type", "resources", ["content_type"])
    op.create_index("ix_resources_editedby_editedon", "resources", ["editedby", "editedon"])
    for table in ELEMENT_TABLES:
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("description", sa.Text(), nullable=False, server_default=""),
            sa.Column("category", sa.Integer(), nullable=False, server_default="0"),
            sa.UniqueConstraint("name", name=f"uq_{table}_name"),
        )
    op.create_table(
        "property_sets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("properties", sa.JSON(), nullable=True),
        sa.UniqueConstraint("name", name="uq_property_sets_name"),
    )
    op.create_table(
        "element_property_sets",
        sa.Column("element", sa.Integer(), primary_key=True),
        sa.Column("element_class", sa.String(100), primary_key=True),
        sa.Column(
            "property_set",
            sa.Integer(),
            sa.ForeignKey("property_sets.id", ondelete="CASCADE", name="fk_element_property_sets_property_set_property_sets"),
            primary_key=True,
        ),
    )
    op.create_table(
        "auth_one_time_tokens",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("token", sa.String(255), nullable=False),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE", name="fk_auth_one_time_tokens_user_id_users"),
            nullable=False,
        ),
        sa.Column("purpose", sa.String(50), nullable=False),
        sa.Column("is_used", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("extra_data", sa.JSON(), nullable=True),
        sa.UniqueConstraint("token", name="uq_auth_one_time_tokens_token"),
    )
    op.create_index(
        "ix_auth_one_time_tokens_user_purpose", "auth_one_time_tokens", ["user_id", "purpose"]
    )


def downgrade() -> None:
    op.drop_table("auth_one_time_tokens")
    op.drop_table("element_property_sets")
    op.drop_table("property_sets")
    for table in reversed(ELEMENT_TABLES):
        op.drop_table(table)
    op.drop_table("resources")
    op.drop_table("content_types")
    op.drop_table("user_group_members")
    op.drop_table("user_groups")
    op.drop_table("user_profiles")
    op.drop_table("users")

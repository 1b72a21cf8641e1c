"""Create articles and subscription tables

Revision ID: initial_schema
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
import uuid
from datetime import datetime, timezone

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _audit_columns():
    return [
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'articles',
        *_audit_columns(),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('url', sa.String(length=1000), nullable=False),
        sa.Column('image_url', sa.String(length=1000), nullable=True),
        sa.Column('publication_date', sa.String(length=255), nullable=True),
        sa.Column('publication_source', sa.String(length=100), nullable=False, comment='Canonical provider slug'),
    )
    op.create_index('ix_articles_url', 'articles', ['url'], unique=True)
    op.create_index('ix_articles_created_at', 'articles', ['created_at'])
    op.create_index('ix_articles_publication_source', 'articles', ['publication_source'])

    plans = op.create_table(
        'subscription_plans',
        *_audit_columns(),
        sa.Column('name', sa.String(length=50), nullable=False, unique=True),
        sa.Column('daily_article_limit', sa.Integer(), nullable=True),
    )
    op.create_index('ix_subscription_plans_created_at', 'subscription_plans', ['created_at'])

    op.create_table(
        'user_subscriptions',
        *_audit_columns(),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('subscription_type', sa.String(length=20), nullable=False, comment='free_trial, free or premium'),
        sa.Column('trial_start_date', sa.DateTime(), nullable=True),
        sa.Column('trial_end_date', sa.DateTime(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index('ix_user_subscriptions_user_id', 'user_subscriptions', ['user_id'])
    op.create_index('ix_user_subscriptions_created_at', 'user_subscriptions', ['created_at'])

    op.create_table(
        'daily_usage',
        *_audit_columns(),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('usage_date', sa.Date(), nullable=False),
        sa.Column('articles_viewed', sa.Integer(), nullable=False, server_default='0'),
        sa.UniqueConstraint('user_id', 'usage_date', name='uq_daily_usage_user_date'),
    )
    op.create_index('ix_daily_usage_user_id', 'daily_usage', ['user_id'])
    op.create_index('ix_daily_usage_created_at', 'daily_usage', ['created_at'])

    op.create_table(
        'article_views',
        *_audit_columns(),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('article_id', sa.Uuid(), sa.ForeignKey('articles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('viewed_at', sa.DateTime(), nullable=False),
        sa.Column('ip_address', sa.String(length=255), nullable=True),
        sa.Column('user_agent', sa.String(length=500), nullable=True),
    )
    op.create_index('ix_article_views_user_id', 'article_views', ['user_id'])
    op.create_index('ix_article_views_article_id', 'article_views', ['article_id'])
    op.create_index('ix_article_views_created_at', 'article_views', ['created_at'])

    # Free tier is capped per day; trial and premium are unlimited
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    op.bulk_insert(
        plans,
        [
            {'id': uuid.uuid4(), 'created_at': now, 'updated_at': now, 'name': 'free_trial', 'daily_article_limit': None},
            {'id': uuid.uuid4(), 'created_at': now, 'updated_at': now, 'name': 'free', 'daily_article_limit': 3},
            {'id': uuid.uuid4(), 'created_at': now, 'updated_at': now, 'name': 'premium', 'daily_article_limit': None},
        ],
    )


def downgrade() -> None:
    op.drop_table('article_views')
    op.drop_table('daily_usage')
    op.drop_table('user_subscriptions')
    op.drop_table('subscription_plans')
    op.drop_table('articles')

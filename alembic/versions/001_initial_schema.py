"""Initial schema: users, points ledger, badges, NFTs, donations, applicants, trivia, chat, checklist.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id BIGSERIAL PRIMARY KEY,
            email VARCHAR(320) UNIQUE NOT NULL,
            display_name VARCHAR(64),
            password_hash VARCHAR(256),
            role VARCHAR(16) NOT NULL DEFAULT 'recruit',
            points INTEGER NOT NULL DEFAULT 0,
            donation_points INTEGER NOT NULL DEFAULT 0,
            has_applied BOOLEAN NOT NULL DEFAULT false,
            referred_by_id BIGINT REFERENCES users(id) ON DELETE SET NULL,
            avatar_url TEXT,
            is_banned BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            last_login TIMESTAMPTZ
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_users_points ON users(points DESC)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_users_referred_by ON users(referred_by_id)")

    # --- Points ledger ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS point_awards (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            points INTEGER NOT NULL,
            action VARCHAR(64) NOT NULL,
            balance VARCHAR(16) NOT NULL DEFAULT 'points',
            description VARCHAR(512),
            idempotency_key VARCHAR(256) UNIQUE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_point_awards_user_created
        ON point_awards(user_id, created_at)
    """)

    # --- Badges ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS badge_definitions (
            id SERIAL PRIMARY KEY,
            slug VARCHAR(64) UNIQUE NOT NULL,
            name VARCHAR(128) NOT NULL,
            description TEXT NOT NULL,
            category VARCHAR(32) NOT NULL,
            points INTEGER NOT NULL DEFAULT 0,
            sort_order INTEGER NOT NULL DEFAULT 0,
            is_active BOOLEAN NOT NULL DEFAULT true
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_badges (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            badge_type VARCHAR(64) NOT NULL,
            earned_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            progress INTEGER,
            requirements JSONB,
            CONSTRAINT user_badges_user_id_badge_type_key UNIQUE (user_id, badge_type)
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_user_badges_earned ON user_badges(earned_at)")

    # --- NFT tiers ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS nft_awards (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            tier VARCHAR(64) NOT NULL,
            points_at_award INTEGER NOT NULL,
            token_id VARCHAR(128) NOT NULL,
            awarded_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT nft_awards_user_id_tier_key UNIQUE (user_id, tier)
        )
    """)

    # --- Donations ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS donation_campaigns (
            id SERIAL PRIMARY KEY,
            name VARCHAR(128) NOT NULL,
            description TEXT,
            start_date TIMESTAMPTZ NOT NULL,
            end_date TIMESTAMPTZ,
            multiplier NUMERIC(6, 2) NOT NULL DEFAULT 1.00,
            is_active BOOLEAN NOT NULL DEFAULT true,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS donation_point_rules (
            id SERIAL PRIMARY KEY,
            name VARCHAR(128) NOT NULL,
            description TEXT,
            min_amount NUMERIC(12, 2) NOT NULL DEFAULT 0,
            max_amount NUMERIC(12, 2),
            points_per_dollar NUMERIC(8, 2) NOT NULL,
            recurring_multiplier NUMERIC(6, 2) NOT NULL DEFAULT 1.00,
            is_active BOOLEAN NOT NULL DEFAULT true,
            campaign_id INTEGER REFERENCES donation_campaigns(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS donations (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            amount NUMERIC(12, 2) NOT NULL,
            is_recurring BOOLEAN NOT NULL DEFAULT false,
            status VARCHAR(16) NOT NULL DEFAULT 'completed',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS donation_point_awards (
            id BIGSERIAL PRIMARY KEY,
            donation_id BIGINT UNIQUE NOT NULL REFERENCES donations(id) ON DELETE CASCADE,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            rule_id INTEGER REFERENCES donation_point_rules(id) ON DELETE SET NULL,
            campaign_id INTEGER REFERENCES donation_campaigns(id) ON DELETE SET NULL,
            points INTEGER NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_donation_point_awards_user
        ON donation_point_awards(user_id)
    """)

    # --- Applicants ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS applicants (
            id BIGSERIAL PRIMARY KEY,
            first_name VARCHAR(64) NOT NULL,
            last_name VARCHAR(64) NOT NULL,
            email VARCHAR(320) NOT NULL,
            phone VARCHAR(32),
            zip_code VARCHAR(10),
            referral_source VARCHAR(64),
            referral_code VARCHAR(64),
            tracking_number VARCHAR(32) UNIQUE NOT NULL,
            application_status VARCHAR(16) NOT NULL DEFAULT 'pending',
            user_id BIGINT REFERENCES users(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_applicants_email ON applicants(email)")

    # --- Trivia ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS trivia_questions (
            id VARCHAR(64) PRIMARY KEY,
            question TEXT NOT NULL,
            options JSONB NOT NULL,
            correct_answer INTEGER NOT NULL,
            explanation TEXT NOT NULL DEFAULT '',
            difficulty VARCHAR(16) NOT NULL DEFAULT 'medium',
            category VARCHAR(64) NOT NULL,
            image_url TEXT,
            image_alt VARCHAR(256),
            is_active BOOLEAN NOT NULL DEFAULT true
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS trivia_attempts (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            round_id VARCHAR(64) UNIQUE NOT NULL,
            game_mode VARCHAR(16) NOT NULL DEFAULT 'normal',
            score INTEGER NOT NULL,
            correct_answers INTEGER NOT NULL,
            total_questions INTEGER NOT NULL,
            max_streak INTEGER NOT NULL DEFAULT 0,
            fast_correct INTEGER NOT NULL DEFAULT 0,
            points_awarded INTEGER NOT NULL,
            category_results JSONB NOT NULL DEFAULT '{}',
            completed_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_trivia_attempts_user ON trivia_attempts(user_id)")
    op.execute("""
        CREATE TABLE IF NOT EXISTS trivia_answers (
            id BIGSERIAL PRIMARY KEY,
            attempt_id BIGINT NOT NULL REFERENCES trivia_attempts(id) ON DELETE CASCADE,
            question_id VARCHAR(64) NOT NULL,
            selected_answer INTEGER,
            is_correct BOOLEAN NOT NULL,
            time_spent_ms INTEGER NOT NULL DEFAULT 0,
            points INTEGER NOT NULL DEFAULT 0
        )
    """)

    # --- Chat ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS chat_interactions (
            id BIGSERIAL PRIMARY KEY,
            session_id VARCHAR(64) NOT NULL,
            user_id BIGINT REFERENCES users(id) ON DELETE SET NULL,
            message TEXT NOT NULL,
            response TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_chat_interactions_session_id
        ON chat_interactions(session_id)
    """)

    # --- Background checklist ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS checklist_progress (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            document_id VARCHAR(64) NOT NULL,
            checked BOOLEAN NOT NULL DEFAULT true,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT checklist_progress_user_id_document_id_key UNIQUE (user_id, document_id)
        )
    """)


def downgrade() -> None:
    for table in (
        "checklist_progress",
        "chat_interactions",
        "trivia_answers",
        "trivia_attempts",
        "trivia_questions",
        "applicants",
        "donation_point_awards",
        "donations",
        "donation_point_rules",
        "donation_campaigns",
        "nft_awards",
        "user_badges",
        "badge_definitions",
        "point_awards",
        "users",
    ):
        op.execute(f"DROP TABLE IF EXISTS {table} CASCADE")

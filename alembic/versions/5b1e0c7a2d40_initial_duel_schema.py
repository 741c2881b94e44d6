"""initial_duel_schema

Revision ID: 5b1e0c7a2d40
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "5b1e0c7a2d40"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("full_name", sa.String(256), nullable=False),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("idx_users_full_name", "users", ["full_name"])

    op.create_table(
        "classes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("grade_label", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )

    op.create_table(
        "class_memberships",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("class_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("role_in_class", sa.String(16), nullable=False),
        sa.Column("enrolled_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("role_in_class IN ('student','teacher')", name="ck_class_memberships_role"),
        sa.ForeignKeyConstraint(["class_id"], ["classes.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("class_id", "user_id", name="uq_class_memberships_class_user"),
    )
    op.create_index("idx_class_memberships_user", "class_memberships", ["user_id"])

    op.create_table(
        "subjects",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("class_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["class_id"], ["classes.id"]),
    )
    op.create_index("idx_subjects_class", "subjects", ["class_id"])

    op.create_table(
        "topics",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("subject_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"]),
    )
    op.create_index("idx_topics_subject_sort", "topics", ["subject_id", "sort_order"])

    op.create_table(
        "levels",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("topic_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("level_number", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(128), nullable=True),
        sa.Column("min_xp_unlock", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("study_text", sa.Text(), nullable=True),
        sa.CheckConstraint("level_number >= 1", name="ck_levels_level_number_positive"),
        sa.ForeignKeyConstraint(["topic_id"], ["topics.id"]),
    )
    op.create_index("idx_levels_topic_number", "levels", ["topic_id", "level_number"])

    op.create_table(
        "questions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("subject_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("topic_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("stem", sa.Text(), nullable=False),
        sa.Column("explanation", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"]),
        sa.ForeignKeyConstraint(["topic_id"], ["topics.id"]),
    )
    op.create_index("idx_questions_subject", "questions", ["subject_id"])

    op.create_table(
        "question_options",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("question_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("option_text", sa.Text(), nullable=False),
        sa.Column("is_correct", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.ForeignKeyConstraint(["question_id"], ["questions.id"]),
    )
    op.create_index(
        "idx_question_options_question_sort",
        "question_options",
        ["question_id", "sort_order"],
    )

    op.create_table(
        "quizzes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("subject_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("topic_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("level_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("class_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"]),
        sa.ForeignKeyConstraint(["topic_id"], ["topics.id"]),
        sa.ForeignKeyConstraint(["level_id"], ["levels.id"]),
        sa.ForeignKeyConstraint(["class_id"], ["classes.id"]),
    )
    op.create_index("idx_quizzes_subject_published", "quizzes", ["subject_id", "is_published"])
    op.create_index("idx_quizzes_level", "quizzes", ["level_id"])
    op.create_index("idx_quizzes_class", "quizzes", ["class_id"])

    op.create_table(
        "quiz_questions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("quiz_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("question_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.ForeignKeyConstraint(["quiz_id"], ["quizzes.id"]),
        sa.ForeignKeyConstraint(["question_id"], ["questions.id"]),
        sa.UniqueConstraint("quiz_id", "question_id", name="uq_quiz_questions_quiz_question"),
    )

    op.create_table(
        "user_progress",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("subject_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("topic_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("level_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("xp", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("has_read_study_text", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_activity_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("xp >= 0", name="ck_user_progress_xp_non_negative"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"]),
        sa.ForeignKeyConstraint(["topic_id"], ["topics.id"]),
        sa.ForeignKeyConstraint(["level_id"], ["levels.id"]),
    )
    op.create_index("idx_user_progress_user_subject", "user_progress", ["user_id", "subject_id"])
    op.create_index("idx_user_progress_user_level", "user_progress", ["user_id", "level_id"])

    op.create_table(
        "duels",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("subject_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("level_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("best_of", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("status IN ('pending','active','completed')", name="ck_duels_status"),
        sa.CheckConstraint("best_of >= 1 AND best_of % 2 = 1", name="ck_duels_best_of_odd_positive"),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"]),
        sa.ForeignKeyConstraint(["level_id"], ["levels.id"]),
    )
    op.create_index("idx_duels_subject_status", "duels", ["subject_id", "status"])
    op.create_index("idx_duels_status_created", "duels", ["status", "created_at"])

    op.create_table(
        "duel_participants",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("duel_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("invited_by_user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("score", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("result", sa.String(8), nullable=True),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "result IS NULL OR result IN ('win','lose','draw')",
            name="ck_duel_participants_result",
        ),
        sa.CheckConstraint("score >= 0", name="ck_duel_participants_score_non_negative"),
        sa.ForeignKeyConstraint(["duel_id"], ["duels.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["invited_by_user_id"], ["users.id"]),
        sa.UniqueConstraint("duel_id", "user_id", name="uq_duel_participants_duel_user"),
    )
    op.create_index("idx_duel_participants_user", "duel_participants", ["user_id"])

    op.create_table(
        "duel_rounds",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("duel_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("round_number", sa.Integer(), nullable=False),
        sa.Column("question_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("question_text_snapshot", sa.Text(), nullable=False),
        sa.Column("options_snapshot", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("option_ids_snapshot", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("correct_index_snapshot", sa.Integer(), nullable=False),
        sa.Column("time_limit_seconds", sa.Integer(), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("round_number >= 1", name="ck_duel_rounds_round_number_positive"),
        sa.CheckConstraint("time_limit_seconds >= 1", name="ck_duel_rounds_time_limit_positive"),
        sa.CheckConstraint("correct_index_snapshot >= -1", name="ck_duel_rounds_correct_index_range"),
        sa.ForeignKeyConstraint(["duel_id"], ["duels.id"]),
        sa.ForeignKeyConstraint(["question_id"], ["questions.id"]),
        sa.UniqueConstraint("duel_id", "round_number", name="uq_duel_rounds_duel_round_number"),
        sa.UniqueConstraint("duel_id", "question_id", name="uq_duel_rounds_duel_question"),
    )
    op.create_index("idx_duel_rounds_duel_open", "duel_rounds", ["duel_id", "ended_at"])

    op.create_table(
        "duel_answers",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("round_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("duel_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("answer_seq", sa.Integer(), nullable=False),
        sa.Column("selected_index", sa.Integer(), nullable=False),
        sa.Column("is_correct", sa.Boolean(), nullable=False),
        sa.Column("response_time_ms", sa.Integer(), nullable=False),
        sa.Column("answered_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("selected_index >= -1", name="ck_duel_answers_selected_index_range"),
        sa.CheckConstraint("response_time_ms >= 0", name="ck_duel_answers_response_time_non_negative"),
        sa.CheckConstraint("answer_seq >= 1", name="ck_duel_answers_answer_seq_positive"),
        sa.ForeignKeyConstraint(["round_id"], ["duel_rounds.id"]),
        sa.ForeignKeyConstraint(["duel_id"], ["duels.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("round_id", "user_id", name="uq_duel_answers_round_user"),
        sa.UniqueConstraint("round_id", "answer_seq", name="uq_duel_answers_round_seq"),
    )
    op.create_index("idx_duel_answers_duel_user", "duel_answers", ["duel_id", "user_id"])


def downgrade() -> None:
    op.drop_index("idx_duel_answers_duel_user", table_name="duel_answers")
    op.drop_table("duel_answers")
    op.drop_index("idx_duel_rounds_duel_open", table_name="duel_rounds")
    op.drop_table("duel_rounds")
    op.drop_index("idx_duel_participants_user", table_name="duel_participants")
    op.drop_table("duel_participants")
    op.drop_index("idx_duels_status_created", table_name="duels")
    op.drop_index("idx_duels_subject_status", table_name="duels")
    op.drop_table("duels")
    op.drop_index("idx_user_progress_user_level", table_name="user_progress")
    op.drop_index("idx_user_progress_user_subject", table_name="user_progress")
    op.drop_table("user_progress")
    op.drop_table("quiz_questions")
    op.drop_index("idx_quizzes_class", table_name="quizzes")
    op.drop_index("idx_quizzes_level", table_name="quizzes")
    op.drop_index("idx_quizzes_subject_published", table_name="quizzes")
    op.drop_table("quizzes")
    op.drop_index("idx_question_options_question_sort", table_name="question_options")
    op.drop_table("question_options")
    op.drop_index("idx_questions_subject", table_name="questions")
    op.drop_table("questions")
    op.drop_index("idx_levels_topic_number", table_name="levels")
    op.drop_table("levels")
    op.drop_index("idx_topics_subject_sort", table_name="topics")
    op.drop_table("topics")
    op.drop_index("idx_subjects_class", table_name="subjects")
    op.drop_table("subjects")
    op.drop_index("idx_class_memberships_user", table_name="class_memberships")
    op.drop_table("class_memberships")
    op.drop_table("classes")
    op.drop_index("idx_users_full_name", table_name="users")
    op.drop_table("users")

from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from classduel.db.models.subjects import Subject
from classduel.db.repo.class_memberships_repo import ClassMembershipsRepo
from classduel.db.repo.question_bank_repo import QuestionBankRepo
from classduel.db.repo.subjects_repo import SubjectsRepo
from classduel.db.repo.user_progress_repo import UserProgressRepo


async def can_create_duel(session: AsyncSession, *, user_id: UUID, subject: Subject) -> bool:
    """A user may only duel on content they have already been exposed to."""
    class_ids = await ClassMembershipsRepo.list_class_ids_for_user(session, user_id=user_id)
    if subject.class_id is not None and subject.class_id in class_ids:
        return True
    if await QuestionBankRepo.subject_has_quiz_for_classes(
        session,
        subject_id=subject.id,
        class_ids=class_ids,
    ):
        return True

    if await UserProgressRepo.has_any_for_subject(
        session,
        user_id=user_id,
        subject_id=subject.id,
    ):
        return True

    level_ids = await SubjectsRepo.list_level_ids_for_subject(session, subject_id=subject.id)
    if not level_ids:
        return True
    cleared_level_ids = await UserProgressRepo.list_cleared_level_ids(
        session,
        user_id=user_id,
        subject_id=subject.id,
    )
    return set(level_ids).issubset(cleared_level_ids)


async def are_classmates(session: AsyncSession, *, user_a_id: UUID, user_b_id: UUID) -> bool:
    return await ClassMembershipsRepo.users_share_class(
        session,
        user_a_id=user_a_id,
        user_b_id=user_b_id,
    )
